"""
Shared SQLite helpers.

Timestamps are stored as fixed-width UTC ISO-8601 strings, so comparing
and ordering the TEXT columns gives chronological results.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

DEFAULT_TIMEOUT_SECONDS = 10.0

_DT_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def format_dt(dt: datetime | None) -> str | None:
    """Serialize to UTC; naive datetimes are taken to be UTC already."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).strftime(_DT_FORMAT)


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s) if s else None


def parse_uuid(s: str | None) -> UUID | None:
    """Parse UUID string."""
    return UUID(s) if s else None


def _py_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, *, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.db_path = db_path
        self.timeout = timeout

    def _get_conn(self) -> sqlite3.Connection:
        """Open a connection returning dict rows, with py_lower registered."""
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        # Unicode-aware lower() for case-insensitive matching.
        conn.create_function("py_lower", 1, _py_lower, deterministic=True)
        return conn

    def _close(self, conn: sqlite3.Connection) -> None:
        conn.close()
