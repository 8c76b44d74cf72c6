"""Exception taxonomy for rejected ballot calls.

Every error is raised before any mutation, so a rejected call leaves the
ballot exactly as it was. None of them are transient; there is nothing to
retry.
"""

from __future__ import annotations

from ballot_protocol.types import Identity, Operation, PhaseViolation, WorkflowStatus


class BallotError(Exception):
    """Base class for every rejected ballot operation.

    Attributes:
        operation: the operation that was rejected (None when raised outside
                   an operation, e.g. by a bare guard call).
        reason: human-readable failure reason.
    """

    def __init__(self, reason: str, operation: Operation | None = None) -> None:
        self.reason = reason
        self.operation = operation
        super().__init__(reason)


class AuthorizationError(BallotError):
    """A non-controller identity attempted a controller-only operation."""

    def __init__(self, caller: Identity, operation: Operation | None = None) -> None:
        self.caller = caller
        super().__init__(f"Unauthorized account: {caller}", operation)


class NotRegisteredError(BallotError):
    """A non-voter attempted a voter-only operation."""

    def __init__(self, caller: Identity, operation: Operation | None = None) -> None:
        self.caller = caller
        super().__init__("You're not a voter", operation)


class AlreadyRegisteredError(BallotError):
    def __init__(self, identity: Identity, operation: Operation | None = None) -> None:
        self.identity = identity
        super().__init__("Already registered", operation)


class InvalidPhaseError(BallotError):
    """Operation attempted outside the phase that allows it.

    violation tells NOT_STARTED ("not yet"), CLOSED ("already closed") and
    NOT_ALLOWED ("not allowed now") apart without parsing the reason.
    """

    def __init__(
        self,
        reason: str,
        *,
        operation: Operation,
        current_status: WorkflowStatus,
        required_status: WorkflowStatus | None,
        violation: PhaseViolation,
    ) -> None:
        self.current_status = current_status
        self.required_status = required_status
        self.violation = violation
        super().__init__(reason, operation)


class ValidationError(BallotError):
    pass


class NotFoundError(BallotError):
    def __init__(self, index: int, operation: Operation | None = None) -> None:
        self.index = index
        super().__init__("Proposal not found", operation)


class AlreadyVotedError(BallotError):
    def __init__(self, caller: Identity, operation: Operation | None = None) -> None:
        self.caller = caller
        super().__init__("You have already voted", operation)
