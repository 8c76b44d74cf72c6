"""Typed definitions for the ballot protocol.

Enums:
    WorkflowStatus  — 6 ordered phases, 0..5
    Operation       — the ten caller-facing operations
    PhaseViolation  — why an operation is not legal in the current phase

Frozen Dataclasses:
    Voter           — voter record (registration + vote)
    Proposal        — description + accumulated vote count
    OperationSpec   — one row of the operation table

Event Types (frozen dataclasses):
    VoterRegistered, ProposalRegistered, Voted, WorkflowStatusChange
    BallotEvent — union of the four

Canonical Lookup Dicts:
    OPERATION_SPECS       — dict[Operation, OperationSpec]
    TRANSITION_OPERATIONS — dict[WorkflowStatus, Operation] (target -> operation)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

# Opaque caller identity. The core only compares and looks identities up,
# so any hashable value works in-process; str is what crosses the wire.
Identity = str

GENESIS_DESCRIPTION = "GENESIS"


# ─── Enums ────────────────────────────────────────────────────────────────────


class WorkflowStatus(IntEnum):
    """Ordered, monotonic ballot phases."""

    VOTERS_REGISTRATION = 0
    PROPOSALS_REGISTRATION_STARTED = 1
    PROPOSALS_REGISTRATION_ENDED = 2
    VOTING_SESSION_STARTED = 3
    VOTING_SESSION_ENDED = 4
    VOTES_TALLIED = 5


class Operation(str, Enum):
    ADD_VOTER = "add_voter"
    GET_VOTER = "get_voter"
    START_PROPOSALS_REGISTERING = "start_proposals_registering"
    ADD_PROPOSAL = "add_proposal"
    GET_ONE_PROPOSAL = "get_one_proposal"
    END_PROPOSALS_REGISTERING = "end_proposals_registering"
    START_VOTING_SESSION = "start_voting_session"
    SET_VOTE = "set_vote"
    END_VOTING_SESSION = "end_voting_session"
    TALLY_VOTES = "tally_votes"


class PhaseViolation(str, Enum):
    """Distinguishes the three ways an operation can be out of phase."""

    NOT_STARTED = "not_started"
    CLOSED = "closed"
    NOT_ALLOWED = "not_allowed"


# ─── Records ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Voter:
    """Voter record.

    The defaults describe an identity that was never registered.
    voted_proposal_id is only meaningful when has_voted is True.
    """

    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int = 0


@dataclass(frozen=True)
class Proposal:
    description: str
    vote_count: int = 0


@dataclass(frozen=True)
class OperationSpec:
    """One row of the operation table.

    required_status: phase the operation is legal in; None means any phase.
    next_status: phase entered on success; None for non-transition operations.
    not_started_message: reason used while required_status is still ahead.
    closed_message: reason used once required_status has passed.
    closed_violation: CLOSED, or NOT_ALLOWED when the operation can never
        become legal again for a reason other than its window closing.
    """

    operation: Operation
    required_status: WorkflowStatus | None = None
    next_status: WorkflowStatus | None = None
    controller_only: bool = False
    voter_only: bool = False
    not_started_message: str = ""
    closed_message: str = ""
    closed_violation: PhaseViolation = PhaseViolation.CLOSED

    @property
    def is_transition(self) -> bool:
        return self.next_status is not None


# ─── Events ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class VoterRegistered:
    voter: Identity


@dataclass(frozen=True)
class ProposalRegistered:
    proposal_id: int


@dataclass(frozen=True)
class Voted:
    voter: Identity
    proposal_id: int


@dataclass(frozen=True)
class WorkflowStatusChange:
    previous_status: WorkflowStatus
    new_status: WorkflowStatus


BallotEvent = VoterRegistered | ProposalRegistered | Voted | WorkflowStatusChange


# ─── Operation Table ──────────────────────────────────────────────────────────

_S = WorkflowStatus

OPERATION_SPECS: dict[Operation, OperationSpec] = {
    Operation.ADD_VOTER: OperationSpec(
        operation=Operation.ADD_VOTER,
        required_status=_S.VOTERS_REGISTRATION,
        controller_only=True,
        closed_message="Voters registration is not open yet",
    ),
    Operation.GET_VOTER: OperationSpec(
        operation=Operation.GET_VOTER,
        voter_only=True,
    ),
    Operation.START_PROPOSALS_REGISTERING: OperationSpec(
        operation=Operation.START_PROPOSALS_REGISTERING,
        required_status=_S.VOTERS_REGISTRATION,
        next_status=_S.PROPOSALS_REGISTRATION_STARTED,
        controller_only=True,
        closed_message="Registering proposals cant be started now",
        closed_violation=PhaseViolation.NOT_ALLOWED,
    ),
    Operation.ADD_PROPOSAL: OperationSpec(
        operation=Operation.ADD_PROPOSAL,
        required_status=_S.PROPOSALS_REGISTRATION_STARTED,
        voter_only=True,
        not_started_message="Proposals are not allowed yet",
        closed_message="Proposals registration is closed",
    ),
    Operation.GET_ONE_PROPOSAL: OperationSpec(
        operation=Operation.GET_ONE_PROPOSAL,
        voter_only=True,
    ),
    Operation.END_PROPOSALS_REGISTERING: OperationSpec(
        operation=Operation.END_PROPOSALS_REGISTERING,
        required_status=_S.PROPOSALS_REGISTRATION_STARTED,
        next_status=_S.PROPOSALS_REGISTRATION_ENDED,
        controller_only=True,
        not_started_message="Registering proposals havent started yet",
        closed_message="Registering proposals already ended",
    ),
    Operation.START_VOTING_SESSION: OperationSpec(
        operation=Operation.START_VOTING_SESSION,
        required_status=_S.PROPOSALS_REGISTRATION_ENDED,
        next_status=_S.VOTING_SESSION_STARTED,
        controller_only=True,
        not_started_message="Registering proposals phase is not finished",
        closed_message="Voting session already started",
    ),
    Operation.SET_VOTE: OperationSpec(
        operation=Operation.SET_VOTE,
        required_status=_S.VOTING_SESSION_STARTED,
        voter_only=True,
        not_started_message="Voting session havent started yet",
        closed_message="Voting session has ended",
    ),
    Operation.END_VOTING_SESSION: OperationSpec(
        operation=Operation.END_VOTING_SESSION,
        required_status=_S.VOTING_SESSION_STARTED,
        next_status=_S.VOTING_SESSION_ENDED,
        controller_only=True,
        not_started_message="Voting session havent started yet",
        closed_message="Voting session already ended",
    ),
    Operation.TALLY_VOTES: OperationSpec(
        operation=Operation.TALLY_VOTES,
        required_status=_S.VOTING_SESSION_ENDED,
        next_status=_S.VOTES_TALLIED,
        controller_only=True,
        not_started_message="Current status is not voting session ended",
        closed_message="Votes already tallied",
    ),
}

del _S

TRANSITION_OPERATIONS: dict[WorkflowStatus, Operation] = {
    spec.next_status: op
    for op, spec in OPERATION_SPECS.items()
    if spec.next_status is not None
}
