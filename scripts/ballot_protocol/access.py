"""Single-controller access control."""

from __future__ import annotations

from ballot_protocol.errors import AuthorizationError
from ballot_protocol.types import Identity, Operation


class AccessControl:
    """Tracks the one controller identity, fixed at construction."""

    def __init__(self, controller: Identity) -> None:
        self._controller = controller

    @property
    def controller(self) -> Identity:
        return self._controller

    def is_controller(self, caller: Identity) -> bool:
        return caller == self._controller

    def require_controller(
        self, caller: Identity, operation: Operation | None = None
    ) -> None:
        """Raise AuthorizationError carrying caller unless it is the controller."""
        if not self.is_controller(caller):
            raise AuthorizationError(caller, operation)
