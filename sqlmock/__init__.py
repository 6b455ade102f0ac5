"""Deterministic test double for async database drivers.

Declare the interactions a code path must perform, let it run against a mock
session opened through :func:`connect`, and closing the session verifies that
every expectation was consumed in order.
"""

from sqlmock.db.driver import MockDriver, get_mock_driver, new
from sqlmock.db.registry import DriverRegistry, connect, get_registry
from sqlmock.db.results import ExecResult, new_result
from sqlmock.db.rows import Record, Rows, new_rows
from sqlmock.engine import (
    Expectation,
    ExpectationKind,
    ExpectationUsageError,
    InteractionError,
    MismatchError,
    MockSession,
    SessionClosedError,
    SessionState,
    SqlMockError,
    UnmetExpectationsError,
)
from sqlmock.infra.logging.config import configure_logging
from sqlmock.infra.result import DatabaseError

__all__ = [
    "DatabaseError",
    "DriverRegistry",
    "ExecResult",
    "Expectation",
    "ExpectationKind",
    "ExpectationUsageError",
    "InteractionError",
    "MismatchError",
    "MockDriver",
    "MockSession",
    "Record",
    "Rows",
    "SessionClosedError",
    "SessionState",
    "SqlMockError",
    "UnmetExpectationsError",
    "configure_logging",
    "connect",
    "get_mock_driver",
    "get_registry",
    "new",
    "new_result",
    "new_rows",
]
