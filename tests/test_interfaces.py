"""Tests for ballot_protocol.interfaces — notification protocol and sinks."""

from __future__ import annotations

import logging

import pytest

from ballot_protocol.interfaces import EventLog, LoggingSink, NotificationSink
from ballot_protocol.types import (
    ProposalRegistered,
    Voted,
    VoterRegistered,
    WorkflowStatus,
    WorkflowStatusChange,
)


class TestNotificationSinkProtocol:
    def test_event_log_is_sink(self) -> None:
        assert isinstance(EventLog(), NotificationSink)

    def test_logging_sink_is_sink(self) -> None:
        assert isinstance(LoggingSink(), NotificationSink)

    def test_structural_subtyping(self) -> None:
        class Collector:
            def notify(self, event) -> None:
                pass

        assert isinstance(Collector(), NotificationSink)

    def test_object_without_notify_is_not_sink(self) -> None:
        assert not isinstance(object(), NotificationSink)


class TestEventLog:
    def test_keeps_emission_order(self) -> None:
        log = EventLog()
        events = [
            VoterRegistered("v"),
            WorkflowStatusChange(WorkflowStatus(0), WorkflowStatus(1)),
            ProposalRegistered(1),
            Voted("v", 1),
        ]
        for e in events:
            log.notify(e)

        assert log.events == tuple(events)
        assert log.last == Voted("v", 1)
        assert len(log) == 4

    def test_of_type_filters(self) -> None:
        log = EventLog()
        log.notify(ProposalRegistered(1))
        log.notify(Voted("v", 1))
        log.notify(ProposalRegistered(2))
        assert log.of_type(ProposalRegistered) == [ProposalRegistered(1), ProposalRegistered(2)]

    def test_events_view_cannot_mutate_log(self) -> None:
        log = EventLog()
        log.notify(ProposalRegistered(1))
        view = log.events
        with pytest.raises(AttributeError):
            view.append(ProposalRegistered(2))  # type: ignore[attr-defined]
        assert len(log) == 1

    def test_empty_log(self) -> None:
        log = EventLog()
        assert log.last is None
        assert log.events == ()

    def test_events_are_frozen(self) -> None:
        event = Voted("v", 1)
        with pytest.raises(Exception):
            event.proposal_id = 2  # type: ignore[misc]


class TestLoggingSink:
    def test_logs_event(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = LoggingSink(logging.getLogger("ballot.test"))
        with caplog.at_level(logging.INFO, logger="ballot.test"):
            sink.notify(VoterRegistered("0xabc"))
        assert "VoterRegistered" in caplog.text
        assert "0xabc" in caplog.text

    def test_respects_level(self, caplog: pytest.LogCaptureFixture) -> None:
        sink = LoggingSink(logging.getLogger("ballot.test.debug"), level=logging.DEBUG)
        with caplog.at_level(logging.INFO, logger="ballot.test.debug"):
            sink.notify(ProposalRegistered(3))
        assert caplog.text == ""
