from __future__ import annotations

import threading
import uuid

import structlog

from sqlmock.config.settings import get_settings
from sqlmock.engine.session import MockSession
from sqlmock.infra.logging.config import redact_dsn

LOGGER = structlog.get_logger(__name__)


class MockDriver:
    """Hands out :class:`MockSession` objects keyed by DSN.

    Opening a DSN that already has a live session returns that session, so a
    test can declare expectations on it and the program under test reaches
    the same object through an ordinary ``connect`` call. Closed sessions are
    forgotten; the next open starts from an empty queue.
    """

    def __init__(self, scheme: str) -> None:
        self._scheme = scheme
        self._sessions: dict[str, MockSession] = {}
        self._lock = threading.Lock()

    @property
    def scheme(self) -> str:
        return self._scheme

    async def open(self, dsn: str) -> MockSession:
        return self.session_for(dsn)

    def session_for(self, dsn: str) -> MockSession:
        with self._lock:
            session = self._sessions.get(dsn)
            if session is None or session.closed:
                session = MockSession(dsn, on_close=self._forget)
                self._sessions[dsn] = session
                LOGGER.debug("sqlmock.driver.session_opened", dsn=redact_dsn(dsn))
            return session

    def new(self, name: str | None = None) -> MockSession:
        """Create a session under ``<scheme>://<name>``; a random name if omitted."""
        return self.session_for(f"{self._scheme}://{name or uuid.uuid4().hex}")

    def open_sessions(self) -> list[MockSession]:
        with self._lock:
            return list(self._sessions.values())

    def _forget(self, session: MockSession) -> None:
        with self._lock:
            if self._sessions.get(session.dsn) is session:
                del self._sessions[session.dsn]


_DRIVER: MockDriver | None = None
_DRIVER_LOCK = threading.Lock()


def get_mock_driver() -> MockDriver:
    global _DRIVER
    if _DRIVER is not None:
        return _DRIVER
    with _DRIVER_LOCK:
        if _DRIVER is None:
            _DRIVER = MockDriver(get_settings().driver_name)
        return _DRIVER


def new(name: str | None = None) -> MockSession:
    """Create a mock session reachable through ``connect(session.dsn)``."""
    return get_mock_driver().new(name)


__all__ = ["MockDriver", "get_mock_driver", "new"]
