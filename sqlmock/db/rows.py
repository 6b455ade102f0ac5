"""Canned row sets handed out by query expectations."""

from __future__ import annotations

import csv
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")


def _convert_field(raw: str) -> int | float | str:
    """Text-vs-numeric heuristic applied to each CSV field."""
    field = raw.strip()
    if _INT_RE.match(field):
        return int(field)
    if _FLOAT_RE.match(field):
        return float(field)
    return field


class Record(Mapping[str, Any]):
    """Read-only record addressable by column name or by position."""

    __slots__ = ("_columns", "_values", "_index")

    def __init__(self, columns: Sequence[str], values: Sequence[Any]) -> None:
        self._columns = tuple(columns)
        self._values = tuple(values)
        self._index = {name: position for position, name in enumerate(self._columns)}

    def __getitem__(self, key: str | int) -> Any:
        if isinstance(key, int):
            return self._values[key]
        return self._values[self._index[key]]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self._columns == other._columns and self._values == other._values
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = " ".join(f"{name}={value!r}" for name, value in zip(self._columns, self._values))
        return f"<Record {fields}>"


class Rows:
    """Ordered, named-column records fetched sequentially.

    A ``Rows`` object is handed out by reference: fetching from it advances a
    single shared cursor, just like a driver's result set.
    """

    def __init__(self, columns: Sequence[str]) -> None:
        self._columns: tuple[str, ...] = tuple(columns)
        if len(set(self._columns)) != len(self._columns):
            raise ValueError(f"duplicate column names in {self._columns!r}")
        self._records: list[Record] = []
        self._position = 0

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    def add_row(self, *values: Any) -> "Rows":
        if len(values) != len(self._columns):
            raise ValueError(
                f"expected {len(self._columns)} values for columns {list(self._columns)}, "
                f"got {len(values)}"
            )
        self._records.append(Record(self._columns, values))
        return self

    def from_csv(self, text: str) -> "Rows":
        """Append one record per non-blank line of comma-separated ``text``."""
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            fields = next(csv.reader([line], skipinitialspace=True))
            self.add_row(*(_convert_field(f) for f in fields))
        return self

    def fetchone(self) -> Record | None:
        if self._position >= len(self._records):
            return None
        record = self._records[self._position]
        self._position += 1
        return record

    def fetchall(self) -> list[Record]:
        remaining = self._records[self._position :]
        self._position = len(self._records)
        return remaining

    def __iter__(self) -> Iterator[Record]:
        return self

    def __next__(self) -> Record:
        record = self.fetchone()
        if record is None:
            raise StopIteration
        return record

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"<Rows columns={list(self._columns)} rows={len(self._records)}>"


def new_rows(columns: Sequence[str]) -> Rows:
    """Start an empty row set with the given column names."""
    return Rows(columns)


__all__ = ["Record", "Rows", "new_rows"]
