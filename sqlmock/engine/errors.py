"""Error hierarchy of the expectation engine.

Three disjoint families:

- :class:`ExpectationUsageError` is raised while a test declares expectations.
- :class:`InteractionError` subclasses are raised when the program under test
  drives the session in a way the queue does not allow.
- :class:`UnmetExpectationsError` is reported by the verifier.

Errors *programmed* into an expectation are not part of this hierarchy; they
are raised exactly as the test supplied them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from sqlmock.infra.result import Error

if TYPE_CHECKING:
    from sqlmock.engine.expectations import Expectation


class SqlMockError(Error):
    """Base class for every error the engine raises on its own behalf."""


class ExpectationUsageError(SqlMockError):
    """An expectation was declared or refined incorrectly."""


class InteractionError(SqlMockError):
    """A call from the program under test could not be served."""


class MismatchError(InteractionError):
    """The incoming call does not correspond to the head expectation."""

    def __init__(
        self,
        message: str,
        *,
        dimension: str,
        expected: Any = None,
        actual: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = {"dimension": dimension, "expected": expected, "actual": actual}
        ctx.update(context or {})
        super().__init__(message, context=ctx)
        self.dimension = dimension
        self.expected = expected
        self.actual = actual


class SessionClosedError(InteractionError):
    """The session was used after it had been closed."""


class UnmetExpectationsError(SqlMockError):
    """Some declared expectations were never consumed."""

    def __init__(self, unmet: Sequence["Expectation"]) -> None:
        self.unmet: tuple["Expectation", ...] = tuple(unmet)
        lines = [f"  - {expectation.describe()}" for expectation in self.unmet]
        message = (
            f"there are {len(self.unmet)} unmet expectation(s):\n" + "\n".join(lines)
        )
        super().__init__(
            message,
            context={"unmet": [expectation.describe() for expectation in self.unmet]},
        )


__all__ = [
    "ExpectationUsageError",
    "InteractionError",
    "MismatchError",
    "SessionClosedError",
    "SqlMockError",
    "UnmetExpectationsError",
]
