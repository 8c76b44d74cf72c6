"""Ballot Protocol — public API.

A single-authority voting workflow: one controller admits voters and drives
the ballot through six ordered phases; voters submit proposals and vote once
each; the controller tallies the result.

Public API (re-exported from submodules):

Enums:
    WorkflowStatus  — 6 values: VOTERS_REGISTRATION (0) .. VOTES_TALLIED (5)
    Operation       — the ten caller-facing operations
    PhaseViolation  — NOT_STARTED, CLOSED, NOT_ALLOWED

Frozen Dataclasses:
    Voter, Proposal, OperationSpec

Event Types (frozen dataclasses):
    VoterRegistered, ProposalRegistered, Voted, WorkflowStatusChange

Canonical Lookup Dicts:
    OPERATION_SPECS       — dict[Operation, OperationSpec]
    TRANSITION_OPERATIONS — dict[WorkflowStatus, Operation]

Components:
    AccessControl, VoterRegistry, ProposalRegistry, WorkflowStateMachine,
    VotingEngine, TallyEngine

Facade:
    Ballot — the ten operations, notifications and read-only views

Notifications (from interfaces.py):
    NotificationSink (runtime_checkable Protocol), EventLog, LoggingSink

Errors (from errors.py):
    BallotError and its seven subclasses

The Temporal host lives in ballot_protocol.workflow and is not imported
here, so the core has no temporalio import cost.
"""

from ballot_protocol.access import AccessControl
from ballot_protocol.ballot import Ballot
from ballot_protocol.engine import TallyEngine, VotingEngine, winning_index
from ballot_protocol.errors import (
    AlreadyRegisteredError,
    AlreadyVotedError,
    AuthorizationError,
    BallotError,
    InvalidPhaseError,
    NotFoundError,
    NotRegisteredError,
    ValidationError,
)
from ballot_protocol.interfaces import EventLog, LoggingSink, NotificationSink
from ballot_protocol.registry import ProposalRegistry, VoterRegistry
from ballot_protocol.state_machine import (
    BallotSnapshot,
    BallotState,
    TransitionRecord,
    WorkflowStateMachine,
)
from ballot_protocol.types import (
    GENESIS_DESCRIPTION,
    OPERATION_SPECS,
    TRANSITION_OPERATIONS,
    BallotEvent,
    Identity,
    Operation,
    OperationSpec,
    PhaseViolation,
    Proposal,
    ProposalRegistered,
    Voted,
    Voter,
    VoterRegistered,
    WorkflowStatus,
    WorkflowStatusChange,
)

__all__ = [
    # Enums
    "WorkflowStatus",
    "Operation",
    "PhaseViolation",
    # Frozen dataclasses
    "Voter",
    "Proposal",
    "OperationSpec",
    # Event types
    "BallotEvent",
    "VoterRegistered",
    "ProposalRegistered",
    "Voted",
    "WorkflowStatusChange",
    # Canonical lookup dicts + constants
    "OPERATION_SPECS",
    "TRANSITION_OPERATIONS",
    "GENESIS_DESCRIPTION",
    "Identity",
    # Components
    "AccessControl",
    "VoterRegistry",
    "ProposalRegistry",
    "WorkflowStateMachine",
    "VotingEngine",
    "TallyEngine",
    "winning_index",
    # State
    "BallotState",
    "BallotSnapshot",
    "TransitionRecord",
    # Facade
    "Ballot",
    # Notifications
    "NotificationSink",
    "EventLog",
    "LoggingSink",
    # Errors
    "BallotError",
    "AuthorizationError",
    "NotRegisteredError",
    "AlreadyRegisteredError",
    "InvalidPhaseError",
    "ValidationError",
    "NotFoundError",
    "AlreadyVotedError",
]
