"""Tests for ballot_protocol.access and ballot_protocol.registry.

Coverage:
    - AccessControl: controller check, AuthorizationError carries the caller
    - VoterRegistry: add_voter guards (controller, phase, duplicate), get_voter
      guard and default record for unknown targets
    - ProposalRegistry: GENESIS seeding, add_proposal guards (voter, phase,
      empty text), get_one_proposal bounds
"""

from __future__ import annotations

import pytest

from ballot_protocol.access import AccessControl
from ballot_protocol.ballot import Ballot
from ballot_protocol.errors import (
    AlreadyRegisteredError,
    AuthorizationError,
    InvalidPhaseError,
    NotFoundError,
    NotRegisteredError,
    ValidationError,
)
from ballot_protocol.registry import ProposalRegistry, VoterRegistry
from ballot_protocol.state_machine import BallotState, WorkflowStateMachine
from ballot_protocol.types import (
    GENESIS_DESCRIPTION,
    Operation,
    PhaseViolation,
    Proposal,
    ProposalRegistered,
    Voter,
    VoterRegistered,
    WorkflowStatus,
)

from conftest import CONTROLLER, OTHER_VOTER, OUTSIDER, VOTER, advance_to


# ─── AccessControl ────────────────────────────────────────────────────────────


class TestAccessControl:
    def test_controller_passes(self) -> None:
        access = AccessControl(CONTROLLER)
        access.require_controller(CONTROLLER)
        assert access.is_controller(CONTROLLER) is True

    def test_other_identity_raises_with_caller(self) -> None:
        access = AccessControl(CONTROLLER)
        with pytest.raises(AuthorizationError) as exc_info:
            access.require_controller(OUTSIDER, Operation.TALLY_VOTES)
        assert exc_info.value.caller == OUTSIDER
        assert exc_info.value.operation == Operation.TALLY_VOTES
        assert OUTSIDER in str(exc_info.value)

    def test_controller_is_read_only(self) -> None:
        access = AccessControl(CONTROLLER)
        with pytest.raises(AttributeError):
            access.controller = OUTSIDER  # type: ignore[misc]


# ─── VoterRegistry ────────────────────────────────────────────────────────────


def _make_voters() -> tuple[BallotState, VoterRegistry, WorkflowStateMachine]:
    state = BallotState(controller=CONTROLLER)
    machine = WorkflowStateMachine(state)
    return state, VoterRegistry(state, AccessControl(CONTROLLER), machine), machine


class TestVoterRegistry:
    def test_add_voter_creates_record_and_returns_event(self) -> None:
        state, voters, _ = _make_voters()
        event = voters.add_voter(CONTROLLER, VOTER)

        assert event == VoterRegistered(voter=VOTER)
        assert state.voters[VOTER] == Voter(
            is_registered=True, has_voted=False, voted_proposal_id=0
        )

    def test_add_voter_by_non_controller_raises(self) -> None:
        state, voters, _ = _make_voters()
        with pytest.raises(AuthorizationError) as exc_info:
            voters.add_voter(OUTSIDER, VOTER)
        assert exc_info.value.caller == OUTSIDER
        assert state.voters == {}

    def test_same_identity_twice_raises(self) -> None:
        _, voters, _ = _make_voters()
        voters.add_voter(CONTROLLER, VOTER)
        with pytest.raises(AlreadyRegisteredError, match="Already registered"):
            voters.add_voter(CONTROLLER, VOTER)
        assert voters.voter_count == 1

    def test_add_voter_after_registration_closed(self) -> None:
        state, voters, machine = _make_voters()
        machine.advance(Operation.START_PROPOSALS_REGISTERING, triggered_by=CONTROLLER)

        with pytest.raises(InvalidPhaseError, match="Voters registration is not open yet") as exc_info:
            voters.add_voter(CONTROLLER, VOTER)
        assert exc_info.value.violation == PhaseViolation.CLOSED
        assert state.voters == {}

    def test_controller_check_runs_before_phase_check(self) -> None:
        _, voters, machine = _make_voters()
        machine.advance(Operation.START_PROPOSALS_REGISTERING, triggered_by=CONTROLLER)
        with pytest.raises(AuthorizationError):
            voters.add_voter(OUTSIDER, VOTER)

    def test_get_voter_requires_registered_caller(self) -> None:
        _, voters, _ = _make_voters()
        voters.add_voter(CONTROLLER, VOTER)
        with pytest.raises(NotRegisteredError, match="You're not a voter"):
            voters.get_voter(OUTSIDER, VOTER)

    def test_controller_is_not_implicitly_a_voter(self) -> None:
        _, voters, _ = _make_voters()
        voters.add_voter(CONTROLLER, VOTER)
        with pytest.raises(NotRegisteredError):
            voters.get_voter(CONTROLLER, VOTER)

    def test_get_voter_returns_record(self) -> None:
        _, voters, _ = _make_voters()
        voters.add_voter(CONTROLLER, VOTER)
        voter = voters.get_voter(VOTER, VOTER)
        assert voter.is_registered is True
        assert voter.has_voted is False
        assert voter.voted_proposal_id == 0

    def test_get_voter_unknown_target_reads_as_unregistered(self) -> None:
        _, voters, _ = _make_voters()
        voters.add_voter(CONTROLLER, VOTER)
        assert voters.get_voter(VOTER, OUTSIDER) == Voter()

    def test_is_registered(self) -> None:
        _, voters, _ = _make_voters()
        voters.add_voter(CONTROLLER, VOTER)
        assert voters.is_registered(VOTER) is True
        assert voters.is_registered(OTHER_VOTER) is False


# ─── ProposalRegistry ─────────────────────────────────────────────────────────


class TestProposalRegistry:
    def test_genesis_seeded_when_registration_opens(self, ballot_proposing: Ballot) -> None:
        proposal = ballot_proposing.get_one_proposal(VOTER, 0)
        assert proposal == Proposal(description=GENESIS_DESCRIPTION, vote_count=0)
        assert proposal.description == "GENESIS"

    def test_no_proposals_before_registration_opens(self, ballot_with_voter: Ballot) -> None:
        assert ballot_with_voter.proposals == ()
        with pytest.raises(NotFoundError):
            ballot_with_voter.get_one_proposal(VOTER, 0)

    def test_seed_genesis_only_on_empty_list(self) -> None:
        state, voters, machine = _make_voters()
        proposals = ProposalRegistry(state, voters, machine)
        proposals.seed_genesis()
        with pytest.raises(ValueError):
            proposals.seed_genesis()
        assert len(proposals) == 1

    def test_add_proposal_returns_index_one(self, ballot_proposing: Ballot) -> None:
        assert ballot_proposing.add_proposal(VOTER, "testProp") == 1
        assert ballot_proposing.events[-1] == ProposalRegistered(proposal_id=1)

    def test_indices_follow_submission_order(self, ballot_proposing: Ballot) -> None:
        ids = [ballot_proposing.add_proposal(VOTER, name) for name in ("a", "b", "c")]
        assert ids == [1, 2, 3]
        assert [p.description for p in ballot_proposing.proposals] == [
            "GENESIS", "a", "b", "c",
        ]

    def test_add_proposal_by_non_voter_raises(self, ballot_proposing: Ballot) -> None:
        with pytest.raises(NotRegisteredError):
            ballot_proposing.add_proposal(OUTSIDER, "testProp")
        assert len(ballot_proposing.proposals) == 1

    @pytest.mark.parametrize("description", ["", "   ", "\n\t"])
    def test_empty_description_raises(self, ballot_proposing: Ballot, description: str) -> None:
        with pytest.raises(ValidationError):
            ballot_proposing.add_proposal(VOTER, description)
        assert len(ballot_proposing.proposals) == 1

    def test_add_proposal_before_registration_opens(self, ballot_with_voter: Ballot) -> None:
        with pytest.raises(InvalidPhaseError, match="Proposals are not allowed yet") as exc_info:
            ballot_with_voter.add_proposal(VOTER, "testProp")
        assert exc_info.value.violation == PhaseViolation.NOT_STARTED

    def test_add_proposal_after_registration_ends(self, ballot_proposing: Ballot) -> None:
        ballot_proposing.end_proposals_registering(CONTROLLER)
        with pytest.raises(InvalidPhaseError) as exc_info:
            ballot_proposing.add_proposal(VOTER, "late")
        assert exc_info.value.violation == PhaseViolation.CLOSED

    def test_voter_check_runs_before_phase_check(self, ballot_with_voter: Ballot) -> None:
        with pytest.raises(NotRegisteredError):
            ballot_with_voter.add_proposal(OUTSIDER, "testProp")

    @pytest.mark.parametrize("index", [-1, 1, 99])
    def test_get_one_proposal_out_of_range(self, ballot_proposing: Ballot, index: int) -> None:
        with pytest.raises(NotFoundError, match="Proposal not found") as exc_info:
            ballot_proposing.get_one_proposal(VOTER, index)
        assert exc_info.value.index == index

    def test_get_one_proposal_requires_voter(self, ballot_proposing: Ballot) -> None:
        with pytest.raises(NotRegisteredError):
            ballot_proposing.get_one_proposal(CONTROLLER, 0)

    def test_get_one_proposal_any_phase(self, ballot_proposing: Ballot) -> None:
        ballot_proposing.add_proposal(VOTER, "testProp")
        advance_to(ballot_proposing, WorkflowStatus.VOTES_TALLIED)
        assert ballot_proposing.get_one_proposal(VOTER, 1).description == "testProp"
