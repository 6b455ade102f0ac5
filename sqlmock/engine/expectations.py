"""Expectations and the ordered queue that consumes them head-first."""

from __future__ import annotations

import re
import threading
from enum import Enum
from typing import Any, Callable, Iterator, Self, Sequence

from sqlmock.db.results import ExecResult
from sqlmock.db.rows import Rows
from sqlmock.engine.errors import ExpectationUsageError, MismatchError
from sqlmock.engine.matching import args_match, compile_pattern, pattern_matches
from sqlmock.infra.result import DatabaseError, Err, Ok, Result


class ExpectationKind(str, Enum):
    BEGIN = "BeginTransaction"
    QUERY = "Query"
    EXEC = "Exec"
    COMMIT = "Commit"
    ROLLBACK = "Rollback"

    @property
    def takes_statement(self) -> bool:
        """Query/Exec carry text, a pattern and arguments; the others do not."""
        return self in (ExpectationKind.QUERY, ExpectationKind.EXEC)


Outcome = Rows | ExecResult | BaseException

_ALLOWED_OUTCOMES: dict[ExpectationKind, tuple[type, ...]] = {
    ExpectationKind.BEGIN: (BaseException,),
    ExpectationKind.QUERY: (Rows, BaseException),
    ExpectationKind.EXEC: (ExecResult, BaseException),
    ExpectationKind.COMMIT: (BaseException,),
    ExpectationKind.ROLLBACK: (BaseException,),
}


class Expectation:
    """One declared unit of expected interaction.

    The object doubles as the builder handle returned by the ``expect_*``
    methods of a session; each refinement returns ``self`` so calls chain.
    """

    __slots__ = ("kind", "pattern", "expected_args", "outcome", "fulfilled")

    def __init__(
        self,
        kind: ExpectationKind,
        pattern: str | re.Pattern[str] | None = None,
    ) -> None:
        if pattern is not None and not kind.takes_statement:
            raise ExpectationUsageError(
                f"{kind.value} expectations cannot carry a query pattern",
                context={"kind": kind.value},
            )
        self.kind = kind
        self.pattern: re.Pattern[str] | None = compile_pattern(pattern)
        self.expected_args: tuple[Any, ...] | None = None
        self.outcome: Outcome | None = None
        self.fulfilled = False

    def _ensure_open(self, action: str) -> None:
        if self.fulfilled:
            raise ExpectationUsageError(
                f"cannot {action} on {self.describe()}: it was already fulfilled",
                context={"kind": self.kind.value},
            )

    def with_args(self, *args: Any) -> Self:
        self._ensure_open("attach arguments")
        if not self.kind.takes_statement:
            raise ExpectationUsageError(
                f"{self.kind.value} expectations do not accept arguments",
                context={"kind": self.kind.value},
            )
        if self.expected_args is not None:
            raise ExpectationUsageError(
                f"arguments were already attached to {self.describe()}",
                context={"kind": self.kind.value},
            )
        self.expected_args = tuple(args)
        return self

    def _attach(self, outcome: Outcome, label: str) -> Self:
        self._ensure_open(f"attach {label}")
        if self.outcome is not None:
            raise ExpectationUsageError(
                f"{self.describe()} already returns {self._outcome_label()}; "
                f"cannot also return {label}",
                context={"kind": self.kind.value},
            )
        if not isinstance(outcome, _ALLOWED_OUTCOMES[self.kind]):
            raise ExpectationUsageError(
                f"{self.kind.value} expectations cannot return {label}",
                context={"kind": self.kind.value, "outcome": type(outcome).__name__},
            )
        self.outcome = outcome
        return self

    def will_return_rows(self, rows: Rows) -> Self:
        return self._attach(rows, "rows")

    def will_return_result(self, result: ExecResult) -> Self:
        return self._attach(result, "a result")

    def will_return_error(self, error: BaseException | str) -> Self:
        if isinstance(error, str):
            error = DatabaseError(error)
        return self._attach(error, "an error")

    def _outcome_label(self) -> str:
        if isinstance(self.outcome, Rows):
            return "rows"
        if isinstance(self.outcome, ExecResult):
            return "a result"
        if isinstance(self.outcome, BaseException):
            return "an error"
        return "nothing"

    def describe(self) -> str:
        parts: list[str] = []
        if self.pattern is not None:
            parts.append(f"pattern={self.pattern.pattern!r}")
        if self.expected_args is not None:
            parts.append(f"args={list(self.expected_args)!r}")
        return f"{self.kind.value}({', '.join(parts)})" if parts else self.kind.value

    def __repr__(self) -> str:
        state = "fulfilled" if self.fulfilled else "pending"
        return f"<Expectation {self.describe()} {state}>"


def describe_call(kind: ExpectationKind, text: str | None, args: Sequence[Any]) -> str:
    if not kind.takes_statement:
        return f"call to {kind.value}"
    rendered = f"call to {kind.value} {text!r}"
    if args:
        rendered += f" with args {list(args)!r}"
    return rendered


Precondition = Callable[[Expectation], str | None]


class ExpectationQueue:
    """Ordered expectations; insertion order is match order."""

    def __init__(self) -> None:
        self._items: list[Expectation] = []
        self._head = 0
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def append(self, expectation: Expectation) -> Expectation:
        with self._lock:
            self._items.append(expectation)
        return expectation

    @property
    def head(self) -> Expectation | None:
        with self._lock:
            if self._head < len(self._items):
                return self._items[self._head]
            return None

    def try_consume(
        self,
        kind: ExpectationKind,
        text: str | None = None,
        args: Sequence[Any] = (),
        *,
        precondition: Precondition | None = None,
    ) -> Result[Expectation, MismatchError]:
        """Match the call against the head and consume it on success.

        The whole inspect/decide/advance sequence runs under the queue lock.
        ``precondition`` lets the caller veto the match (for example when the
        session is in the wrong transaction state) by returning a reason.
        """
        call = describe_call(kind, text, args)
        with self._lock:
            head = self.head
            if head is None:
                return Err(
                    MismatchError(
                        f"{call} was not expected: all {len(self._items)} "
                        "expectation(s) were already consumed",
                        dimension="exhausted",
                        actual=call,
                    )
                )

            pending = f"next expectation is {head.describe()}"
            if head.kind is not kind:
                return Err(
                    MismatchError(
                        f"{call} was not expected: {pending}",
                        dimension="kind",
                        expected=head.kind.value,
                        actual=kind.value,
                    )
                )

            if precondition is not None:
                reason = precondition(head)
                if reason is not None:
                    return Err(
                        MismatchError(
                            f"{call} was not expected: {reason}; {pending}",
                            dimension="state",
                            expected=head.describe(),
                            actual=call,
                        )
                    )

            if kind.takes_statement:
                text = text or ""
                if head.pattern is not None and not pattern_matches(head.pattern, text):
                    return Err(
                        MismatchError(
                            f"{call} was not expected: query text does not match "
                            f"pattern {head.pattern.pattern!r}; {pending}",
                            dimension="pattern",
                            expected=head.pattern.pattern,
                            actual=text,
                        )
                    )
                if not args_match(head.expected_args, args):
                    return Err(
                        MismatchError(
                            f"{call} was not expected: arguments {list(args)!r} do not "
                            f"match {list(head.expected_args or ())!r}; {pending}",
                            dimension="args",
                            expected=list(head.expected_args or ()),
                            actual=list(args),
                        )
                    )

            head.fulfilled = True
            self._head += 1
            return Ok(head)

    def unmet(self) -> list[Expectation]:
        with self._lock:
            return [expectation for expectation in self._items if not expectation.fulfilled]

    def __iter__(self) -> Iterator[Expectation]:
        with self._lock:
            return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)


__all__ = [
    "Expectation",
    "ExpectationKind",
    "ExpectationQueue",
    "Outcome",
    "describe_call",
]
