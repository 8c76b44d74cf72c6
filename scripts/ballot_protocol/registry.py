"""Voter and proposal registries.

Both registries write only to the shared BallotState they were given, and
only after every precondition of the call has passed.
"""

from __future__ import annotations

import logging

from ballot_protocol.access import AccessControl
from ballot_protocol.errors import (
    AlreadyRegisteredError,
    NotFoundError,
    NotRegisteredError,
    ValidationError,
)
from ballot_protocol.state_machine import BallotState, WorkflowStateMachine
from ballot_protocol.types import (
    GENESIS_DESCRIPTION,
    Identity,
    Operation,
    Proposal,
    ProposalRegistered,
    Voter,
    VoterRegistered,
)

logger = logging.getLogger(__name__)


class VoterRegistry:
    """Identity -> Voter mapping, written only during VOTERS_REGISTRATION.

    Records are never deleted; a vote replaces the record (see VotingEngine).
    """

    def __init__(
        self,
        state: BallotState,
        access: AccessControl,
        machine: WorkflowStateMachine,
    ) -> None:
        self._state = state
        self._access = access
        self._machine = machine

    def is_registered(self, identity: Identity) -> bool:
        voter = self._state.voters.get(identity)
        return voter is not None and voter.is_registered

    def require_voter(
        self, caller: Identity, operation: Operation | None = None
    ) -> Voter:
        """Return the caller's record or raise NotRegisteredError."""
        voter = self._state.voters.get(caller)
        if voter is None or not voter.is_registered:
            raise NotRegisteredError(caller, operation)
        return voter

    @property
    def voter_count(self) -> int:
        return len(self._state.voters)

    @property
    def voted_count(self) -> int:
        return sum(1 for v in self._state.voters.values() if v.has_voted)

    def add_voter(self, caller: Identity, target: Identity) -> VoterRegistered:
        op = Operation.ADD_VOTER
        self._access.require_controller(caller, op)
        self._machine.require(op)
        if self.is_registered(target):
            raise AlreadyRegisteredError(target, op)

        self._state.voters[target] = Voter(is_registered=True)
        logger.debug("Voter registered: %s", target)
        return VoterRegistered(voter=target)

    def get_voter(self, caller: Identity, target: Identity) -> Voter:
        """Return target's record; unknown targets read as an unregistered Voter()."""
        self.require_voter(caller, Operation.GET_VOTER)
        return self._state.voters.get(target, Voter())


class ProposalRegistry:
    """Append-only proposal list; the index is a proposal's permanent id.

    Index 0 is the GENESIS sentinel, seeded when proposal registration opens.
    """

    def __init__(
        self,
        state: BallotState,
        voters: VoterRegistry,
        machine: WorkflowStateMachine,
    ) -> None:
        self._state = state
        self._voters = voters
        self._machine = machine

    def __len__(self) -> int:
        return len(self._state.proposals)

    @property
    def proposals(self) -> tuple[Proposal, ...]:
        return tuple(self._state.proposals)

    def seed_genesis(self) -> None:
        """Append the GENESIS sentinel at index 0.

        Only valid on an empty list; called as part of
        start_proposals_registering after its checks have passed.
        """
        if self._state.proposals:
            raise ValueError("GENESIS proposal must be the first proposal")
        self._state.proposals.append(Proposal(description=GENESIS_DESCRIPTION))

    def require_proposal(self, index: int, operation: Operation | None = None) -> Proposal:
        if not 0 <= index < len(self._state.proposals):
            raise NotFoundError(index, operation)
        return self._state.proposals[index]

    def add_proposal(self, caller: Identity, description: str) -> ProposalRegistered:
        op = Operation.ADD_PROPOSAL
        self._voters.require_voter(caller, op)
        self._machine.require(op)
        if not description or not description.strip():
            raise ValidationError("Proposal description cannot be empty", op)

        self._state.proposals.append(Proposal(description=description))
        proposal_id = len(self._state.proposals) - 1
        logger.debug("Proposal %d registered by %s", proposal_id, caller)
        return ProposalRegistered(proposal_id=proposal_id)

    def get_one_proposal(self, caller: Identity, index: int) -> Proposal:
        op = Operation.GET_ONE_PROPOSAL
        self._voters.require_voter(caller, op)
        return self.require_proposal(index, op)
