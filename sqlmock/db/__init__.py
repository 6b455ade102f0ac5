"""Driver-facing collaborators: rows, exec results and the driver registry."""

from sqlmock.db.results import ExecResult, new_result
from sqlmock.db.rows import Record, Rows, new_rows

__all__ = ["ExecResult", "Record", "Rows", "new_result", "new_rows"]
