from __future__ import annotations

import structlog

from sqlmock.engine.errors import UnmetExpectationsError
from sqlmock.engine.expectations import ExpectationQueue
from sqlmock.infra.result import Err, Ok, Result

LOGGER = structlog.get_logger(__name__)


def verify(queue: ExpectationQueue) -> Result[None, UnmetExpectationsError]:
    """Fail when any declared expectation was never consumed.

    Unmet expectations are reported in declaration order.
    """
    unmet = queue.unmet()
    if not unmet:
        return Ok(None)
    error = UnmetExpectationsError(unmet)
    LOGGER.error(
        "sqlmock.verify.unmet",
        unmet=len(unmet),
        declared=len(queue),
        context=error.log_safe_context(),
    )
    return Err(error)


__all__ = ["verify"]
