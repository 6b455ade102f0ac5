"""Mock session: the object a program under test talks to instead of a database.

Each call is matched against the head of the session's expectation queue.
The synchronous ``try_*`` methods return a tagged :class:`Result`; the async
methods form the connection surface and raise the error instead.
"""

from __future__ import annotations

import re
from enum import Enum
from types import TracebackType
from typing import Any, Callable, Sequence, TypeVar

import structlog

from sqlmock.db.results import ExecResult
from sqlmock.db.rows import Record, Rows
from sqlmock.engine.errors import (
    ExpectationUsageError,
    InteractionError,
    MismatchError,
    SessionClosedError,
    UnmetExpectationsError,
)
from sqlmock.engine.expectations import (
    Expectation,
    ExpectationKind,
    ExpectationQueue,
    Precondition,
    describe_call,
)
from sqlmock.engine.verifier import verify
from sqlmock.infra.logging.config import redact_dsn
from sqlmock.infra.result import Err, Ok, Result

LOGGER = structlog.get_logger(__name__)

T = TypeVar("T")


class SessionState(Enum):
    IDLE = "idle"
    IN_TRANSACTION = "in_transaction"
    CLOSED = "closed"


def _unwrap(result: Result[T, BaseException]) -> T:
    if isinstance(result, Err):
        raise result.error
    return result.value


class MockSession:
    """Stands in for a database connection during a test."""

    def __init__(
        self,
        dsn: str = "",
        *,
        on_close: Callable[["MockSession"], None] | None = None,
    ) -> None:
        self._dsn = dsn
        self._log_dsn = redact_dsn(dsn)
        self._queue = ExpectationQueue()
        self._state = SessionState.IDLE
        self._on_close = on_close

    @property
    def dsn(self) -> str:
        return self._dsn

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def in_transaction(self) -> bool:
        return self._state is SessionState.IN_TRANSACTION

    @property
    def closed(self) -> bool:
        return self._state is SessionState.CLOSED

    @property
    def expectations(self) -> tuple[Expectation, ...]:
        return tuple(self._queue)

    # --- declaration API ---

    def _declare(
        self, kind: ExpectationKind, pattern: str | re.Pattern[str] | None = None
    ) -> Expectation:
        expectation = Expectation(kind, pattern)
        # Checked under the queue lock so a racing close() cannot verify first.
        with self._queue.lock:
            if self._state is SessionState.CLOSED:
                raise ExpectationUsageError(
                    f"cannot declare a {kind.value} expectation on a closed session",
                    context={"dsn": self._log_dsn, "kind": kind.value},
                )
            self._queue.append(expectation)
            position = len(self._queue)
        LOGGER.debug(
            "sqlmock.expectation.declared",
            dsn=self._log_dsn,
            kind=kind.value,
            position=position,
        )
        return expectation

    def expect_begin(self) -> Expectation:
        return self._declare(ExpectationKind.BEGIN)

    def expect_query(self, pattern: str | re.Pattern[str] | None = None) -> Expectation:
        return self._declare(ExpectationKind.QUERY, pattern)

    def expect_exec(self, pattern: str | re.Pattern[str] | None = None) -> Expectation:
        return self._declare(ExpectationKind.EXEC, pattern)

    def expect_commit(self) -> Expectation:
        return self._declare(ExpectationKind.COMMIT)

    def expect_rollback(self) -> Expectation:
        return self._declare(ExpectationKind.ROLLBACK)

    # --- tagged-result core ---

    def _serve(
        self,
        kind: ExpectationKind,
        text: str | None = None,
        args: Sequence[Any] = (),
        *,
        precondition: Precondition | None = None,
        on_match: Callable[[Expectation], None] | None = None,
    ) -> Result[Expectation, InteractionError]:
        result: Result[Expectation, InteractionError]
        with self._queue.lock:
            if self._state is SessionState.CLOSED:
                result = Err(
                    SessionClosedError(
                        f"{describe_call(kind, text, args)} on a closed session",
                        context={"dsn": self._log_dsn},
                    )
                )
            else:
                consumed: Result[Expectation, MismatchError] = self._queue.try_consume(
                    kind, text, args, precondition=precondition
                )
                if isinstance(consumed, Ok) and on_match is not None:
                    on_match(consumed.value)
                result = consumed

        if isinstance(result, Ok):
            LOGGER.debug(
                "sqlmock.call.matched",
                dsn=self._log_dsn,
                kind=kind.value,
                expectation=result.value.describe(),
            )
        else:
            LOGGER.warning(
                "sqlmock.call.mismatch",
                dsn=self._log_dsn,
                kind=kind.value,
                error=result.error.message,
                context=result.error.log_safe_context(),
            )
        return result

    def _outcome(self, expectation: Expectation, default: T) -> Result[T, BaseException]:
        outcome = expectation.outcome
        if isinstance(outcome, BaseException):
            LOGGER.debug(
                "sqlmock.call.programmed_error",
                dsn=self._log_dsn,
                kind=expectation.kind.value,
                error=repr(outcome),
            )
            return Err(outcome)
        if outcome is None:
            return Ok(default)
        return Ok(outcome)  # type: ignore[arg-type]

    def _require_state(self, state: SessionState, reason: str) -> Precondition:
        def check(_: Expectation) -> str | None:
            return None if self._state is state else reason

        return check

    def _enter_transaction(self, expectation: Expectation) -> None:
        # A programmed failure means BEGIN itself failed.
        if not isinstance(expectation.outcome, BaseException):
            self._state = SessionState.IN_TRANSACTION

    def _leave_transaction(self, _: Expectation) -> None:
        self._state = SessionState.IDLE

    def try_begin(self) -> Result[None, BaseException]:
        return self._serve(
            ExpectationKind.BEGIN,
            precondition=self._require_state(
                SessionState.IDLE, "a transaction is already in progress"
            ),
            on_match=self._enter_transaction,
        ).and_then(lambda expectation: self._outcome(expectation, None))

    def try_query(self, text: str, args: Sequence[Any] = ()) -> Result[Rows, BaseException]:
        return self._serve(ExpectationKind.QUERY, text, tuple(args)).and_then(
            lambda expectation: self._outcome(expectation, Rows(()))
        )

    def try_execute(
        self, text: str, args: Sequence[Any] = ()
    ) -> Result[ExecResult, BaseException]:
        return self._serve(ExpectationKind.EXEC, text, tuple(args)).and_then(
            lambda expectation: self._outcome(expectation, ExecResult(0, 0))
        )

    def try_commit(self) -> Result[None, BaseException]:
        return self._serve(
            ExpectationKind.COMMIT,
            precondition=self._require_state(
                SessionState.IN_TRANSACTION, "no transaction is in progress"
            ),
            on_match=self._leave_transaction,
        ).and_then(lambda expectation: self._outcome(expectation, None))

    def try_rollback(self) -> Result[None, BaseException]:
        return self._serve(
            ExpectationKind.ROLLBACK,
            precondition=self._require_state(
                SessionState.IN_TRANSACTION, "no transaction is in progress"
            ),
            on_match=self._leave_transaction,
        ).and_then(lambda expectation: self._outcome(expectation, None))

    # --- connection surface ---
    # ``timeout`` mirrors asyncpg and is ignored: no call ever waits.

    async def begin(self) -> None:
        _unwrap(self.try_begin())

    async def query(self, text: str, *args: Any, timeout: float | None = None) -> Rows:
        return _unwrap(self.try_query(text, args))

    async def execute(self, text: str, *args: Any, timeout: float | None = None) -> ExecResult:
        return _unwrap(self.try_execute(text, args))

    async def commit(self) -> None:
        _unwrap(self.try_commit())

    async def rollback(self) -> None:
        _unwrap(self.try_rollback())

    async def fetch(self, text: str, *args: Any, timeout: float | None = None) -> list[Record]:
        return (await self.query(text, *args)).fetchall()

    async def fetchrow(
        self, text: str, *args: Any, timeout: float | None = None
    ) -> Record | None:
        return (await self.query(text, *args)).fetchone()

    async def fetchval(
        self, text: str, *args: Any, column: int = 0, timeout: float | None = None
    ) -> Any:
        row = await self.fetchrow(text, *args)
        return None if row is None else row[column]

    def transaction(
        self,
        *,
        isolation: str | None = None,
        readonly: bool = False,
        deferrable: bool = False,
    ) -> "MockTransaction":
        """Transaction handle; the asyncpg options are accepted and not modelled."""
        return MockTransaction(self)

    async def prepare(self, text: str, *, timeout: float | None = None) -> "PreparedStatement":
        with self._queue.lock:
            if self._state is SessionState.CLOSED:
                raise SessionClosedError(
                    f"cannot prepare {text!r} on a closed session",
                    context={"dsn": self._log_dsn},
                )
        return PreparedStatement(self, text)

    def expectations_were_met(self) -> None:
        _unwrap(verify(self._queue))

    async def close(self) -> None:
        """Close the session and verify every expectation was consumed.

        The session ends up closed even when verification fails; the
        :class:`UnmetExpectationsError` is raised afterwards. Closing twice is
        a no-op.
        """
        with self._queue.lock:
            if self._state is SessionState.CLOSED:
                return
            self._state = SessionState.CLOSED

        outcome = verify(self._queue)
        LOGGER.info(
            "sqlmock.session.closed",
            dsn=self._log_dsn,
            declared=len(self._queue),
            verified=outcome.is_ok(),
        )
        if self._on_close is not None:
            self._on_close(self)
        _unwrap(outcome)

    async def __aenter__(self) -> "MockSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None:
            await self.close()
            return
        # Keep the original failure; unmet expectations are only logged here.
        try:
            await self.close()
        except UnmetExpectationsError as unmet:
            LOGGER.debug(
                "sqlmock.session.close_during_error",
                dsn=self._log_dsn,
                unmet=len(unmet.unmet),
            )

    def __repr__(self) -> str:
        return (
            f"<MockSession dsn={self._dsn!r} state={self._state.value} "
            f"expectations={len(self._queue)}>"
        )


class MockTransaction:
    """``asyncpg``-style transaction handle mapped onto BEGIN/COMMIT/ROLLBACK."""

    def __init__(self, session: MockSession) -> None:
        self._session = session
        self._finished = False

    async def start(self) -> None:
        await self._session.begin()

    async def commit(self) -> None:
        try:
            await self._session.commit()
        finally:
            self._finished = True

    async def rollback(self) -> None:
        try:
            await self._session.rollback()
        finally:
            self._finished = True

    async def __aenter__(self) -> "MockTransaction":
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._finished:
            return
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()


class PreparedStatement:
    """Prepared text; matching happens when it is queried or executed."""

    def __init__(self, session: MockSession, text: str) -> None:
        self._session = session
        self._text = text

    @property
    def text(self) -> str:
        return self._text

    def get_query(self) -> str:
        return self._text

    async def query(self, *args: Any, timeout: float | None = None) -> Rows:
        return await self._session.query(self._text, *args)

    async def execute(self, *args: Any, timeout: float | None = None) -> ExecResult:
        return await self._session.execute(self._text, *args)

    async def fetch(self, *args: Any, timeout: float | None = None) -> list[Record]:
        return await self._session.fetch(self._text, *args)

    async def fetchrow(self, *args: Any, timeout: float | None = None) -> Record | None:
        return await self._session.fetchrow(self._text, *args)

    async def fetchval(self, *args: Any, column: int = 0, timeout: float | None = None) -> Any:
        return await self._session.fetchval(self._text, *args, column=column)


__all__ = [
    "MockSession",
    "MockTransaction",
    "PreparedStatement",
    "SessionState",
]
