"""Shared pytest fixtures for the ballot_protocol test suite.

Provides common Ballot setup patterns used across multiple test files to
avoid repeated inline boilerplate and keep tests focused on behaviour.
"""

from __future__ import annotations

import pytest

from ballot_protocol.ballot import Ballot
from ballot_protocol.types import WorkflowStatus

CONTROLLER = "0xC0FFEE"
VOTER = "0xA11CE"
OTHER_VOTER = "0xB0B"
OUTSIDER = "0xBADBAD"


def advance_to(ballot: Ballot, target: WorkflowStatus) -> None:
    """Drive ballot forward (as the controller) until it reaches target."""
    while ballot.status < target:
        ballot.advance(ballot.controller, WorkflowStatus(ballot.status + 1))


@pytest.fixture
def ballot() -> Ballot:
    return Ballot(CONTROLLER)


@pytest.fixture
def ballot_with_voter(ballot: Ballot) -> Ballot:
    """Fresh ballot with VOTER registered."""
    ballot.add_voter(CONTROLLER, VOTER)
    return ballot


@pytest.fixture
def ballot_proposing(ballot_with_voter: Ballot) -> Ballot:
    """Ballot in PROPOSALS_REGISTRATION_STARTED with VOTER registered."""
    ballot_with_voter.start_proposals_registering(CONTROLLER)
    return ballot_with_voter


@pytest.fixture
def ballot_voting(ballot: Ballot) -> Ballot:
    """Ballot in VOTING_SESSION_STARTED.

    VOTER and OTHER_VOTER registered; proposals: 0 GENESIS, 1 "alpha", 2 "beta".
    """
    ballot.add_voter(CONTROLLER, VOTER)
    ballot.add_voter(CONTROLLER, OTHER_VOTER)
    ballot.start_proposals_registering(CONTROLLER)
    ballot.add_proposal(VOTER, "alpha")
    ballot.add_proposal(OTHER_VOTER, "beta")
    advance_to(ballot, WorkflowStatus.VOTING_SESSION_STARTED)
    return ballot
