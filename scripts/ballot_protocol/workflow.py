"""Temporal workflow host for a Ballot.

Wraps Ballot with durable Temporal execution. Every caller action arrives as
a signal and is queued in arrival order; run() applies them one at a time,
which gives the ballot the single linear call history it requires. Queries
are used for reads. Search attributes are updated on every transition.

Design rules:
- Workflow code MUST be deterministic: no I/O, no random, no datetime.now().
- The ballot clock is workflow.now(), so transition timestamps replay.
- Activities handle non-deterministic operations (recording transitions).
- One workflow per ballot.

Key types (all frozen dataclasses):
    BallotInput             — workflow run() input
    BallotResult            — workflow run() return value
    VoterRegistrationSignal — register_voter signal payload
    ProposalSignal          — submit_proposal signal payload
    VoteSignal              — cast_vote signal payload
    PhaseAdvanceSignal      — advance_phase signal payload (transitions + tally)

Search attribute keys:
    SA_BALLOT_ID — text key for ballot ID lookup
    SA_STATUS    — keyword key for current WorkflowStatus name

Activities:
    record_transition(record: TransitionRecord) -> None
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from temporalio import activity, workflow
from temporalio.common import SearchAttributeKey

from ballot_protocol.ballot import Ballot
from ballot_protocol.errors import BallotError
from ballot_protocol.state_machine import BallotSnapshot, TransitionRecord
from ballot_protocol.types import Identity, WorkflowStatus

# ─── Search Attribute Keys ────────────────────────────────────────────────────
# Registered in the Temporal namespace: "find all ballots where
# BallotStatus='VOTING_SESSION_STARTED'" etc.

SA_BALLOT_ID: SearchAttributeKey = SearchAttributeKey.for_text("BallotId")
SA_STATUS: SearchAttributeKey = SearchAttributeKey.for_keyword("BallotStatus")


# ─── Signal / Query Types (frozen dataclasses) ────────────────────────────────


@dataclass(frozen=True)
class BallotInput:
    """Input for BallotWorkflow.run().

    ballot_id: globally unique ballot identifier
    controller: the identity allowed to drive transitions and tally
    activity_timeout_seconds: start-to-close timeout for record_transition
    """

    ballot_id: str
    controller: Identity
    activity_timeout_seconds: float = 10.0


@dataclass(frozen=True)
class BallotResult:
    """Return value of BallotWorkflow.run() once votes are tallied."""

    ballot_id: str
    final_status: WorkflowStatus
    winning_proposal_id: int | None
    proposal_count: int
    transition_count: int
    rejected_call_count: int


@dataclass(frozen=True)
class VoterRegistrationSignal:
    caller: Identity
    voter: Identity


@dataclass(frozen=True)
class ProposalSignal:
    caller: Identity
    description: str


@dataclass(frozen=True)
class VoteSignal:
    caller: Identity
    proposal_id: int


@dataclass(frozen=True)
class PhaseAdvanceSignal:
    """Signal payload for BallotWorkflow.advance_phase().

    to_status: the phase to enter; VOTES_TALLIED runs the tally.
    """

    caller: Identity
    to_status: WorkflowStatus


BallotSignal = VoterRegistrationSignal | ProposalSignal | VoteSignal | PhaseAdvanceSignal


def apply_signal(ballot: Ballot, signal: BallotSignal) -> None:
    """Apply one queued signal to the ballot (pure, deterministic).

    Raises whatever the underlying ballot operation raises.
    """
    if isinstance(signal, VoterRegistrationSignal):
        ballot.add_voter(signal.caller, signal.voter)
    elif isinstance(signal, ProposalSignal):
        ballot.add_proposal(signal.caller, signal.description)
    elif isinstance(signal, VoteSignal):
        ballot.set_vote(signal.caller, signal.proposal_id)
    elif isinstance(signal, PhaseAdvanceSignal):
        ballot.advance(signal.caller, signal.to_status)
    else:
        raise TypeError(f"Unknown ballot signal: {signal!r}")


# ─── Activities ───────────────────────────────────────────────────────────────


@activity.defn
async def record_transition(record: TransitionRecord) -> None:
    """Write a committed transition to the operational log.

    The record itself already lives in the ballot's transition_history;
    this is the I/O boundary for shipping it elsewhere.
    """
    logger = logging.getLogger(__name__)
    logger.info(
        "Transition recorded: %s -> %s (%s by %s)",
        WorkflowStatus(record.from_status).name,
        WorkflowStatus(record.to_status).name,
        record.operation,
        record.triggered_by,
    )


# ─── Workflow ─────────────────────────────────────────────────────────────────


@workflow.defn
class BallotWorkflow:
    """Durable Temporal workflow hosting one Ballot.

    Lifecycle:
        1. run() creates the Ballot and sets search attributes.
        2. run() waits for signals and applies them in arrival order.
        3. A rejected call is stored in last_error and counted; the ballot
           stays usable.
        4. Each committed transition is recorded (activity) and the status
           search attribute is upserted.
        5. When status reaches VOTES_TALLIED, run() returns BallotResult.

    Signals:
        register_voter(VoterRegistrationSignal)
        submit_proposal(ProposalSignal)
        cast_vote(VoteSignal)
        advance_phase(PhaseAdvanceSignal)

    Queries:
        current_status() -> WorkflowStatus
        snapshot() -> BallotSnapshot
        last_error() -> str | None
        winning_proposal_id() -> int | None
    """

    def __init__(self) -> None:
        # One queue for every signal kind keeps arrival order intact.
        self._pending: list[BallotSignal] = []
        self._last_error: str | None = None
        self._rejected_calls: int = 0
        # Initialized in run().
        self._ballot: Ballot | None = None

    # ── Run ───────────────────────────────────────────────────────────────────

    @workflow.run
    async def run(self, input: BallotInput) -> BallotResult:
        self._ballot = Ballot(input.controller, clock=workflow.now)
        timeout = timedelta(seconds=input.activity_timeout_seconds)

        workflow.upsert_search_attributes(
            [
                SA_BALLOT_ID.value_set(input.ballot_id),
                SA_STATUS.value_set(self._ballot.status.name),
            ]
        )

        while self._ballot.status != WorkflowStatus.VOTES_TALLIED:
            await workflow.wait_condition(lambda: bool(self._pending))

            signal = self._pending.pop(0)
            transitions_before = len(self._ballot.transition_history)
            try:
                apply_signal(self._ballot, signal)
            except (BallotError, ValueError) as e:
                self._last_error = str(e)
                self._rejected_calls += 1
                workflow.logger.warning(
                    "Rejected %s from %s: %s", type(signal).__name__, signal.caller, e
                )
                continue
            self._last_error = None

            history = self._ballot.transition_history
            if len(history) > transitions_before:
                await workflow.execute_activity(
                    record_transition,
                    args=[history[-1]],
                    start_to_close_timeout=timeout,
                )
                workflow.upsert_search_attributes(
                    [SA_STATUS.value_set(self._ballot.status.name)]
                )

        return BallotResult(
            ballot_id=input.ballot_id,
            final_status=self._ballot.status,
            winning_proposal_id=self._ballot.winning_proposal_id,
            proposal_count=len(self._ballot.proposals),
            transition_count=len(self._ballot.transition_history),
            rejected_call_count=self._rejected_calls,
        )

    # ── Signals ───────────────────────────────────────────────────────────────

    @workflow.signal
    def register_voter(self, signal: VoterRegistrationSignal) -> None:
        self._pending.append(signal)

    @workflow.signal
    def submit_proposal(self, signal: ProposalSignal) -> None:
        self._pending.append(signal)

    @workflow.signal
    def cast_vote(self, signal: VoteSignal) -> None:
        self._pending.append(signal)

    @workflow.signal
    def advance_phase(self, signal: PhaseAdvanceSignal) -> None:
        """Signal: request the transition into signal.to_status.

        Queued like every other signal; applied in the run() loop.
        """
        self._pending.append(signal)

    # ── Queries ───────────────────────────────────────────────────────────────

    def _require_ballot(self) -> Ballot:
        if self._ballot is None:
            raise RuntimeError("Workflow not yet initialized: run() has not started.")
        return self._ballot

    @workflow.query
    def current_status(self) -> WorkflowStatus:
        return self._require_ballot().status

    @workflow.query
    def snapshot(self) -> BallotSnapshot:
        return self._require_ballot().snapshot()

    @workflow.query
    def last_error(self) -> str | None:
        return self._last_error

    @workflow.query
    def winning_proposal_id(self) -> int | None:
        return self._require_ballot().winning_proposal_id
