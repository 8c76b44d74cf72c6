"""Ballot workflow state machine.

Holds the current WorkflowStatus and gates every operation through the
operation table (OPERATION_SPECS). Transitions are forward-only: each one
advances the status by exactly one step, and no operation moves backward or
skips a phase.

Key types:
    BallotState          — mutable runtime state shared by every component
    TransitionRecord     — frozen audit entry for one committed transition
    BallotSnapshot       — frozen, copy-out view of BallotState
    WorkflowStateMachine — phase gate + transition driver
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from ballot_protocol.errors import InvalidPhaseError
from ballot_protocol.types import (
    OPERATION_SPECS,
    Identity,
    Operation,
    OperationSpec,
    PhaseViolation,
    Proposal,
    Voter,
    WorkflowStatus,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True)
class TransitionRecord:
    """Immutable audit entry for one committed phase transition.

    operation is the Operation's value (plain str, decodable by Temporal's
    default data converter).
    """

    from_status: WorkflowStatus
    to_status: WorkflowStatus
    operation: str
    timestamp: datetime
    triggered_by: Identity


@dataclass
class BallotState:
    """Mutable ballot runtime state.

    Owned by one Ballot and passed by reference to each component; nothing
    outside the guarded operations writes to it.
    """

    controller: Identity
    status: WorkflowStatus = WorkflowStatus.VOTERS_REGISTRATION
    voters: dict[Identity, Voter] = field(default_factory=dict)
    proposals: list[Proposal] = field(default_factory=list)
    winning_proposal_id: int | None = None
    transition_history: list[TransitionRecord] = field(default_factory=list)


@dataclass(frozen=True)
class BallotSnapshot:
    """Point-in-time copy of BallotState, safe to hand to callers."""

    controller: Identity
    status: WorkflowStatus
    voters: dict[Identity, Voter]
    proposals: list[Proposal]
    winning_proposal_id: int | None
    transition_history: list[TransitionRecord]

    @classmethod
    def of(cls, state: BallotState) -> BallotSnapshot:
        return cls(
            controller=state.controller,
            status=state.status,
            voters=dict(state.voters),
            proposals=list(state.proposals),
            winning_proposal_id=state.winning_proposal_id,
            transition_history=list(state.transition_history),
        )


class WorkflowStateMachine:
    """Forward-only six-phase workflow.

    Args:
        state: shared ballot state; only status and transition_history are
               written here.
        specs: operation table, injectable for tests. Defaults to
               OPERATION_SPECS.
        clock: timestamp source for TransitionRecord. Defaults to UTC now;
               the Temporal workflow passes workflow.now.
    """

    def __init__(
        self,
        state: BallotState,
        *,
        specs: dict[Operation, OperationSpec] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._state = state
        self._specs = specs if specs is not None else OPERATION_SPECS
        self._clock = clock or _utc_now

    @property
    def status(self) -> WorkflowStatus:
        return self._state.status

    def spec_for(self, operation: Operation) -> OperationSpec:
        try:
            return self._specs[operation]
        except KeyError:
            raise ValueError(f"No operation spec for {operation!r}") from None

    def _violation(self, operation: Operation) -> InvalidPhaseError | None:
        spec = self.spec_for(operation)
        required = spec.required_status
        current = self._state.status
        if required is None or current == required:
            return None

        if current < required:
            violation = PhaseViolation.NOT_STARTED
            reason = spec.not_started_message
        else:
            violation = spec.closed_violation
            reason = spec.closed_message
        if not reason:
            reason = (
                f"{operation.value} requires {required.name}, "
                f"current status is {current.name}"
            )
        return InvalidPhaseError(
            reason,
            operation=operation,
            current_status=current,
            required_status=required,
            violation=violation,
        )

    def require(self, operation: Operation) -> None:
        """Raise InvalidPhaseError unless operation is legal in the current phase."""
        error = self._violation(operation)
        if error is not None:
            raise error

    def validate(self, operation: Operation) -> list[str]:
        """Dry run of require(): returns the violated reasons, never mutates."""
        error = self._violation(operation)
        return [] if error is None else [error.reason]

    @property
    def available_operations(self) -> list[Operation]:
        """Operations whose phase precondition holds right now.

        Caller checks (controller, voter) are not part of this view.
        """
        return [op for op in self._specs if self._violation(op) is None]

    def require_transition(self, operation: Operation) -> OperationSpec:
        """Check every advance() precondition without mutating state.

        Raises:
            ValueError: operation is not a transition in the table, or its
                        next_status is not the phase directly after the
                        current one.
            InvalidPhaseError: current status is not the operation's required one.
        """
        spec = self.spec_for(operation)
        if spec.next_status is None:
            raise ValueError(f"{operation.value} is not a transition operation")
        self.require(operation)

        current = self._state.status
        if spec.next_status != current + 1:
            raise ValueError(
                f"{operation.value} would move {current.name} -> "
                f"{spec.next_status.name}; transitions advance exactly one phase"
            )
        return spec

    def advance(self, operation: Operation, *, triggered_by: Identity) -> TransitionRecord:
        """Apply a transition operation and record it.

        Raises whatever require_transition() raises; state is untouched then.
        """
        spec = self.require_transition(operation)

        previous = self._state.status
        record = TransitionRecord(
            from_status=previous,
            to_status=spec.next_status,
            operation=operation.value,
            timestamp=self._clock(),
            triggered_by=triggered_by,
        )
        self._state.status = spec.next_status
        self._state.transition_history.append(record)
        logger.info(
            "Ballot status %s -> %s (%s by %s)",
            previous.name,
            spec.next_status.name,
            operation.value,
            triggered_by,
        )
        return record
