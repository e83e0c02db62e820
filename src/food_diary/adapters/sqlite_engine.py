"""SQLite storage engine."""

import asyncio
import logging
import sqlite3
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from food_diary.domain.errors import MigrationError, StorageError
from food_diary.services.log_store import StatementResult, StorageEngine

_T = TypeVar("_T")

_logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open a connection in autocommit mode with dict-friendly rows."""
    if str(db_path) != MEMORY_DATABASE:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False, isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn


@dataclass
class SqliteStorageEngine(StorageEngine):
    """Single-connection SQLite engine driven from worker threads."""

    connection: sqlite3.Connection
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    @classmethod
    def create(cls, db_path: Path | str) -> "SqliteStorageEngine":
        """Open the database file (or ``:memory:``)."""
        return cls(connection=connect(db_path))

    async def execute(
        self, sql: str, params: Sequence[object] = ()
    ) -> StatementResult:
        """Run a single statement that returns no rows."""

        def run() -> StatementResult:
            cursor = self.connection.execute(sql, tuple(params))
            return StatementResult(
                last_row_id=cursor.lastrowid, row_count=cursor.rowcount
            )

        return await self._run(run)

    async def query_all(
        self, sql: str, params: Sequence[object] = ()
    ) -> list[dict[str, object]]:
        """Run a query and return every row as a dict."""

        def run() -> list[dict[str, object]]:
            rows = self.connection.execute(sql, tuple(params)).fetchall()
            return [dict(row) for row in rows]

        return await self._run(run)

    async def get_schema_version(self) -> int:
        """Return ``PRAGMA user_version``."""

        def run() -> int:
            row = self.connection.execute("PRAGMA user_version").fetchone()
            return int(row[0]) if row else 0

        return await self._run(run)

    async def apply_migration(self, version: int, statements: Sequence[str]) -> None:
        """Apply statements and advance the schema version in one transaction."""

        def run() -> None:
            conn = self.connection
            conn.execute("BEGIN")
            try:
                for statement in statements:
                    conn.execute(statement)
                conn.execute(f"PRAGMA user_version = {int(version)}")
            except sqlite3.Error:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

        try:
            await self._run(run)
        except StorageError as exc:
            raise MigrationError(version, str(exc.__cause__ or exc)) from exc

    async def close(self) -> None:
        """Close the connection."""
        async with self._lock:
            await asyncio.to_thread(self.connection.close)

    async def _run(self, func: Callable[[], _T]) -> _T:
        async with self._lock:
            try:
                return await asyncio.to_thread(func)
            except sqlite3.Error as exc:
                _logger.warning("SQLite operation failed: %s", exc)
                raise StorageError(str(exc)) from exc
