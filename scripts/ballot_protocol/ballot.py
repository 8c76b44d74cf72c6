"""Ballot — the caller-facing facade over the ballot components.

Every operation takes the calling identity explicitly as its first argument.
Calls are expected one at a time; the hosting environment (for example
BallotWorkflow) serializes them. Each call either commits all of its state
changes and notifications or, when a precondition fails, raises a
BallotError and changes nothing.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ballot_protocol.access import AccessControl
from ballot_protocol.engine import TallyEngine, VotingEngine
from ballot_protocol.interfaces import EventLog, NotificationSink
from ballot_protocol.registry import ProposalRegistry, VoterRegistry
from ballot_protocol.state_machine import (
    BallotSnapshot,
    BallotState,
    Clock,
    TransitionRecord,
    WorkflowStateMachine,
)
from ballot_protocol.types import (
    TRANSITION_OPERATIONS,
    BallotEvent,
    Identity,
    Operation,
    OperationSpec,
    Proposal,
    Voter,
    WorkflowStatus,
    WorkflowStatusChange,
)

logger = logging.getLogger(__name__)


class Ballot:
    """Single-authority ballot.

    Args:
        controller: the one identity allowed to drive transitions and tally.
        specs: operation table override (see WorkflowStateMachine).
        clock: timestamp source for transition records.
        sinks: extra notification sinks; the built-in EventLog is always first.
    """

    def __init__(
        self,
        controller: Identity,
        *,
        specs: dict[Operation, OperationSpec] | None = None,
        clock: Clock | None = None,
        sinks: Iterable[NotificationSink] = (),
    ) -> None:
        self._state = BallotState(controller=controller)
        self._access = AccessControl(controller)
        self._machine = WorkflowStateMachine(self._state, specs=specs, clock=clock)
        self._voters = VoterRegistry(self._state, self._access, self._machine)
        self._proposals = ProposalRegistry(self._state, self._voters, self._machine)
        self._voting = VotingEngine(self._state, self._voters, self._proposals, self._machine)
        self._tally = TallyEngine(self._state, self._access, self._machine)
        self._log = EventLog()
        self._sinks: list[NotificationSink] = list(sinks)

    # ── Notifications ─────────────────────────────────────────────────────────

    def subscribe(self, sink: NotificationSink) -> None:
        if not isinstance(sink, NotificationSink):
            raise TypeError(f"{sink!r} does not implement NotificationSink")
        self._sinks.append(sink)

    def _emit(self, event: BallotEvent) -> None:
        self._log.notify(event)
        for sink in self._sinks:
            try:
                sink.notify(event)
            except Exception:
                # State has already committed; sink failures are logged only.
                logger.exception("Notification sink %r failed on %r", sink, event)

    def _emit_transition(self, record: TransitionRecord) -> None:
        self._emit(WorkflowStatusChange(record.from_status, record.to_status))

    # ── Voter Registry ────────────────────────────────────────────────────────

    def add_voter(self, caller: Identity, target: Identity) -> None:
        self._emit(self._voters.add_voter(caller, target))

    def get_voter(self, caller: Identity, target: Identity) -> Voter:
        return self._voters.get_voter(caller, target)

    # ── Proposal Registry ─────────────────────────────────────────────────────

    def add_proposal(self, caller: Identity, description: str) -> int:
        """Append a proposal and return its permanent index."""
        event = self._proposals.add_proposal(caller, description)
        self._emit(event)
        return event.proposal_id

    def get_one_proposal(self, caller: Identity, index: int) -> Proposal:
        return self._proposals.get_one_proposal(caller, index)

    # ── Workflow Transitions ──────────────────────────────────────────────────

    def start_proposals_registering(self, caller: Identity) -> TransitionRecord:
        """Open proposal registration and seed GENESIS at index 0."""
        op = Operation.START_PROPOSALS_REGISTERING
        self._access.require_controller(caller, op)
        self._machine.require_transition(op)

        self._proposals.seed_genesis()
        record = self._machine.advance(op, triggered_by=caller)
        self._emit_transition(record)
        return record

    def end_proposals_registering(self, caller: Identity) -> TransitionRecord:
        return self._transition(caller, Operation.END_PROPOSALS_REGISTERING)

    def start_voting_session(self, caller: Identity) -> TransitionRecord:
        return self._transition(caller, Operation.START_VOTING_SESSION)

    def end_voting_session(self, caller: Identity) -> TransitionRecord:
        return self._transition(caller, Operation.END_VOTING_SESSION)

    def _transition(self, caller: Identity, op: Operation) -> TransitionRecord:
        self._access.require_controller(caller, op)
        record = self._machine.advance(op, triggered_by=caller)
        self._emit_transition(record)
        return record

    def advance(self, caller: Identity, to_status: WorkflowStatus) -> TransitionRecord:
        """Run whichever transition operation targets to_status.

        Used by hosts that express transitions as a target phase.
        """
        target = WorkflowStatus(to_status)
        op = TRANSITION_OPERATIONS.get(target)
        if op is None:
            raise ValueError(f"No transition leads to {target.name}")
        # Operation values double as the facade method names.
        return getattr(self, op.value)(caller)

    # ── Voting & Tally ────────────────────────────────────────────────────────

    def set_vote(self, caller: Identity, proposal_id: int) -> None:
        self._emit(self._voting.set_vote(caller, proposal_id))

    def tally_votes(self, caller: Identity) -> TransitionRecord:
        record = self._tally.tally_votes(caller)
        self._emit_transition(record)
        return record

    # ── Read-only Views ───────────────────────────────────────────────────────

    @property
    def controller(self) -> Identity:
        return self._access.controller

    @property
    def status(self) -> WorkflowStatus:
        return self._state.status

    @property
    def winning_proposal_id(self) -> int | None:
        """Index of the winning proposal; None until votes are tallied."""
        return self._state.winning_proposal_id

    @property
    def proposals(self) -> tuple[Proposal, ...]:
        return self._proposals.proposals

    @property
    def voter_count(self) -> int:
        return self._voters.voter_count

    @property
    def transition_history(self) -> tuple[TransitionRecord, ...]:
        return tuple(self._state.transition_history)

    @property
    def events(self) -> tuple[BallotEvent, ...]:
        return self._log.events

    @property
    def event_log(self) -> EventLog:
        return self._log

    @property
    def available_operations(self) -> list[Operation]:
        return self._machine.available_operations

    def validate(self, operation: Operation) -> list[str]:
        """Phase-level dry run for operation; see WorkflowStateMachine.validate."""
        return self._machine.validate(operation)

    def snapshot(self) -> BallotSnapshot:
        return BallotSnapshot.of(self._state)
