"""Lightweight typing protocols for the driver capability surface.

Only the surface host code actually uses is described here. The mock session
and real ``asyncpg`` connections both satisfy these protocols structurally, so
nothing here is a runtime dependency.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterator, Protocol, Sequence, runtime_checkable


@runtime_checkable
class RowsProtocol(Protocol):
    @property
    def columns(self) -> Sequence[str]: ...

    def fetchone(self) -> Any | None: ...

    def __iter__(self) -> Iterator[Any]: ...


@runtime_checkable
class ConnectionProtocol(Protocol):
    async def fetch(self, query: str, *args: Any, timeout: float | None = None) -> list[Any]: ...

    async def fetchrow(self, query: str, *args: Any, timeout: float | None = None) -> Any: ...

    async def fetchval(
        self, query: str, *args: Any, column: int = 0, timeout: float | None = None
    ) -> Any: ...

    async def execute(self, query: str, *args: Any, timeout: float | None = None) -> Any: ...

    def transaction(
        self, *, isolation: str | None = None, readonly: bool = False, deferrable: bool = False
    ) -> Any: ...

    async def close(self) -> None: ...


DriverFactory = Callable[[str], Awaitable[Any]]
"""Opens a connection for a DSN; registered in :class:`DriverRegistry`."""


__all__ = [
    "ConnectionProtocol",
    "DriverFactory",
    "RowsProtocol",
]
