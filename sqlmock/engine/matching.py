"""Value and pattern matching used to compare calls against expectations."""

from __future__ import annotations

import datetime
import re
from typing import Any, Sequence

from sqlmock.engine.errors import ExpectationUsageError

# Scalars compared by value; the type must match exactly, so 1, True and "1"
# are three different arguments.
_SCALAR_TYPES: tuple[type, ...] = (str, bytes, int, float, bool)

# Known limitation: timestamps only need to share a type. Fixtures rarely know
# the exact instant the code under test will bind. Do not add types here.
_TIMESTAMP_TYPES: tuple[type, ...] = (datetime.datetime, datetime.date, datetime.time)


def values_match(expected: Any, actual: Any) -> bool:
    """Compare one bound argument with the value a test declared for its slot."""
    if expected is None or actual is None:
        return expected is None and actual is None
    if type(expected) is not type(actual):
        return False
    if isinstance(expected, _TIMESTAMP_TYPES):
        return True
    if isinstance(expected, _SCALAR_TYPES):
        return bool(expected == actual)
    return False


def args_match(expected: Sequence[Any] | None, actual: Sequence[Any]) -> bool:
    if expected is None:
        return True
    if len(expected) != len(actual):
        return False
    return all(values_match(e, a) for e, a in zip(expected, actual))


def compile_pattern(pattern: str | re.Pattern[str] | None) -> re.Pattern[str] | None:
    """Compile a query pattern at declaration time."""
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ExpectationUsageError(
            f"invalid query pattern {pattern!r}: {exc}",
            context={"pattern": pattern},
            cause=exc,
        ) from exc


def pattern_matches(pattern: re.Pattern[str] | None, text: str) -> bool:
    """Partial match: the pattern may hit anywhere in ``text``."""
    if pattern is None:
        return True
    return pattern.search(text) is not None


__all__ = ["args_match", "compile_pattern", "pattern_matches", "values_match"]
