"""Vote recording and tallying."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from ballot_protocol.access import AccessControl
from ballot_protocol.errors import AlreadyVotedError
from ballot_protocol.registry import ProposalRegistry, VoterRegistry
from ballot_protocol.state_machine import BallotState, TransitionRecord, WorkflowStateMachine
from ballot_protocol.types import Identity, Operation, Proposal, Voted

logger = logging.getLogger(__name__)


class VotingEngine:
    """Records exactly one vote per registered voter during VOTING_SESSION_STARTED."""

    def __init__(
        self,
        state: BallotState,
        voters: VoterRegistry,
        proposals: ProposalRegistry,
        machine: WorkflowStateMachine,
    ) -> None:
        self._state = state
        self._voters = voters
        self._proposals = proposals
        self._machine = machine

    def set_vote(self, caller: Identity, proposal_id: int) -> Voted:
        """Record caller's vote for proposal_id.

        Check order: voter, phase, not yet voted, proposal exists. Both the
        voter record and the proposal are replaced only after all four pass.
        A second call for the same voter always raises AlreadyVotedError.
        """
        op = Operation.SET_VOTE
        voter = self._voters.require_voter(caller, op)
        self._machine.require(op)
        if voter.has_voted:
            raise AlreadyVotedError(caller, op)
        proposal = self._proposals.require_proposal(proposal_id, op)

        self._state.voters[caller] = replace(
            voter, has_voted=True, voted_proposal_id=proposal_id
        )
        self._state.proposals[proposal_id] = replace(
            proposal, vote_count=proposal.vote_count + 1
        )
        logger.debug("Vote recorded: %s -> proposal %d", caller, proposal_id)
        return Voted(voter=caller, proposal_id=proposal_id)


def winning_index(proposals: Sequence[Proposal]) -> int:
    """Index of the first proposal holding the strictly greatest vote count.

    The scan is left to right and only a strictly greater count displaces
    the current leader, so the lowest index wins a tie.

    Raises:
        ValueError: proposals is empty.
    """
    if not proposals:
        raise ValueError("Cannot tally an empty proposal list")
    winner = 0
    for index, proposal in enumerate(proposals):
        if proposal.vote_count > proposals[winner].vote_count:
            winner = index
    return winner


class TallyEngine:
    """Selects the winning proposal once voting has closed."""

    def __init__(
        self,
        state: BallotState,
        access: AccessControl,
        machine: WorkflowStateMachine,
    ) -> None:
        self._state = state
        self._access = access
        self._machine = machine

    def tally_votes(self, caller: Identity) -> TransitionRecord:
        op = Operation.TALLY_VOTES
        self._access.require_controller(caller, op)
        self._machine.require(op)

        winner = winning_index(self._state.proposals)
        record = self._machine.advance(op, triggered_by=caller)
        self._state.winning_proposal_id = winner
        logger.info(
            "Votes tallied: proposal %d wins with %d vote(s)",
            winner,
            self._state.proposals[winner].vote_count,
        )
        return record
