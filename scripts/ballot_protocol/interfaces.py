"""Notification interfaces + built-in sinks.

This module defines:
- NotificationSink (@runtime_checkable Protocol): anything with a matching
  notify() receives ballot events, no inheritance required.
- EventLog: the append-only, ordered audit trail every Ballot carries.
- LoggingSink: forwards each event to the logging module.

Event types are defined in types.py and re-exported here for convenience.
"""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar, runtime_checkable

from ballot_protocol.types import (
    BallotEvent,
    ProposalRegistered,
    Voted,
    VoterRegistered,
    WorkflowStatusChange,
)

E = TypeVar("E")


# ─── Protocol Interfaces ──────────────────────────────────────────────────────


@runtime_checkable
class NotificationSink(Protocol):
    """Observer for ballot notifications.

    notify() is called once per event, in emission order, after the
    mutation that produced the event has committed.
    """

    def notify(self, event: BallotEvent) -> None:
        ...


# ─── Built-in Sinks ───────────────────────────────────────────────────────────


class EventLog:
    """Append-only, ordered record of every event a ballot emitted."""

    def __init__(self) -> None:
        self._events: list[BallotEvent] = []

    def notify(self, event: BallotEvent) -> None:
        self._events.append(event)

    @property
    def events(self) -> tuple[BallotEvent, ...]:
        return tuple(self._events)

    def of_type(self, event_type: type[E]) -> list[E]:
        """Events of one type, in emission order."""
        return [e for e in self._events if isinstance(e, event_type)]

    @property
    def last(self) -> BallotEvent | None:
        return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)


class LoggingSink:
    """Writes every event to a logger (default: this module's logger)."""

    def __init__(
        self, logger: logging.Logger | None = None, level: int = logging.INFO
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._level = level

    def notify(self, event: BallotEvent) -> None:
        self._logger.log(self._level, "Ballot event: %r", event)


__all__ = [
    "NotificationSink",
    "EventLog",
    "LoggingSink",
    # Event types (re-exported from types.py)
    "BallotEvent",
    "VoterRegistered",
    "ProposalRegistered",
    "Voted",
    "WorkflowStatusChange",
]
