from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExecResult:
    """Summary of a statement execution."""

    last_insert_id: int
    rows_affected: int


def new_result(last_insert_id: int, rows_affected: int) -> ExecResult:
    """Build an :class:`ExecResult` from two literal integers."""
    if isinstance(last_insert_id, bool) or not isinstance(last_insert_id, int):
        raise TypeError(f"last_insert_id must be an int, got {type(last_insert_id).__name__}")
    if isinstance(rows_affected, bool) or not isinstance(rows_affected, int):
        raise TypeError(f"rows_affected must be an int, got {type(rows_affected).__name__}")
    return ExecResult(last_insert_id=last_insert_id, rows_affected=rows_affected)


__all__ = ["ExecResult", "new_result"]
