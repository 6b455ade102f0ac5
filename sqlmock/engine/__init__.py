"""Expectation engine: matching, ordered queue, session state machine, verifier."""

from sqlmock.engine.errors import (
    ExpectationUsageError,
    InteractionError,
    MismatchError,
    SessionClosedError,
    SqlMockError,
    UnmetExpectationsError,
)
from sqlmock.engine.expectations import Expectation, ExpectationKind, ExpectationQueue
from sqlmock.engine.session import MockSession, MockTransaction, PreparedStatement, SessionState
from sqlmock.engine.verifier import verify

__all__ = [
    "Expectation",
    "ExpectationKind",
    "ExpectationQueue",
    "ExpectationUsageError",
    "InteractionError",
    "MismatchError",
    "MockSession",
    "MockTransaction",
    "PreparedStatement",
    "SessionClosedError",
    "SessionState",
    "SqlMockError",
    "UnmetExpectationsError",
    "verify",
]
