"""Date-indexed persistent store for food log entries."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, time
from typing import Protocol

from food_diary.domain.diary import LogEntry, NewLogEntry
from food_diary.domain.errors import (
    CorruptSnapshotError,
    MigrationError,
    NotFoundError,
    StorageError,
)
from food_diary.services.snapshots import deserialize_snapshot, serialize_snapshot

_logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

MIGRATIONS: Mapping[int, tuple[str, ...]] = {
    1: (
        """
        CREATE TABLE IF NOT EXISTS logged_foods (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            date TEXT,
            time TEXT,
            amount INTEGER,
            food_id INTEGER,
            food_data TEXT
        )
        """,
    ),
}

_COLUMNS = "id, date, time, amount, food_id, food_data"


@dataclass(frozen=True)
class StatementResult:
    """Outcome of a statement that returns no rows."""

    last_row_id: int | None
    row_count: int


class StorageEngine(Protocol):
    """Relational engine used by the log store."""

    async def execute(
        self, sql: str, params: Sequence[object] = ()
    ) -> StatementResult:
        """Run a statement and report the affected rows."""

    async def query_all(
        self, sql: str, params: Sequence[object] = ()
    ) -> list[dict[str, object]]:
        """Run a query and return all rows."""

    async def get_schema_version(self) -> int:
        """Return the stored schema version, 0 for a fresh database."""

    async def apply_migration(self, version: int, statements: Sequence[str]) -> None:
        """Run statements and set the schema version atomically."""


@dataclass
class LogStore:
    """Persists log entries and keeps the schema current."""

    engine: StorageEngine
    schema_version: int = SCHEMA_VERSION
    migrations: Mapping[int, Sequence[str]] = field(default_factory=lambda: MIGRATIONS)

    async def initialize(self) -> None:
        """Apply pending migrations in ascending order."""
        current = await self.engine.get_schema_version()
        if current > self.schema_version:
            _logger.warning(
                "Database schema version %s is newer than supported version %s",
                current,
                self.schema_version,
            )
            return
        for version in sorted(self.migrations):
            if current < version <= self.schema_version:
                try:
                    await self.engine.apply_migration(
                        version, self.migrations[version]
                    )
                except MigrationError:
                    raise
                except StorageError as exc:
                    raise MigrationError(version, str(exc)) from exc
                _logger.info("Applied schema migration %s", version)
                current = version

    async def append(self, entry: NewLogEntry) -> LogEntry:
        """Persist a new entry and return it with its assigned id."""
        result = await self.engine.execute(
            "INSERT INTO logged_foods (date, time, amount, food_id, food_data) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                entry.date.isoformat(),
                entry.time.isoformat(timespec="seconds"),
                entry.amount_grams,
                entry.food_id,
                serialize_snapshot(entry.snapshot),
            ),
        )
        if result.last_row_id is None:
            raise StorageError("Failed to create log entry")
        _logger.info(
            "Logged food %s (%sg) on %s as entry %s",
            entry.food_id,
            entry.amount_grams,
            entry.date,
            result.last_row_id,
        )
        return LogEntry(
            id=result.last_row_id,
            date=entry.date,
            time=entry.time.replace(microsecond=0),
            amount_grams=entry.amount_grams,
            food_id=entry.food_id,
            snapshot=entry.snapshot,
        )

    async def list_by_date(
        self, day: date, *, skip_corrupt: bool = False
    ) -> list[LogEntry]:
        """Return entries for a day ordered by time."""
        rows = await self.engine.query_all(
            f"SELECT {_COLUMNS} FROM logged_foods WHERE date = ? ORDER BY time, id",
            (day.isoformat(),),
        )
        entries: list[LogEntry] = []
        for row in rows:
            try:
                entries.append(_parse_row(row))
            except CorruptSnapshotError as exc:
                if not skip_corrupt:
                    raise
                _logger.warning("Skipping log entry: %s", exc)
        return entries

    async def get(self, entry_id: int) -> LogEntry:
        """Return a single entry by id."""
        rows = await self.engine.query_all(
            f"SELECT {_COLUMNS} FROM logged_foods WHERE id = ? LIMIT 1",
            (entry_id,),
        )
        if not rows:
            raise NotFoundError(entry_id)
        return _parse_row(rows[0])

    async def update_amount(self, entry_id: int, amount_grams: int) -> None:
        """Change the logged amount of an entry."""
        result = await self.engine.execute(
            "UPDATE logged_foods SET amount = ? WHERE id = ?",
            (amount_grams, entry_id),
        )
        if result.row_count == 0:
            raise NotFoundError(entry_id)
        _logger.info("Updated entry %s to %sg", entry_id, amount_grams)

    async def delete(self, entry_id: int) -> None:
        """Remove an entry."""
        result = await self.engine.execute(
            "DELETE FROM logged_foods WHERE id = ?", (entry_id,)
        )
        if result.row_count == 0:
            raise NotFoundError(entry_id)
        _logger.info("Deleted entry %s", entry_id)


def _parse_row(row: Mapping[str, object]) -> LogEntry:
    entry_id = int(row["id"])
    try:
        snapshot = deserialize_snapshot(row["food_data"])
        return LogEntry(
            id=entry_id,
            date=date.fromisoformat(str(row["date"])),
            time=time.fromisoformat(str(row["time"])),
            amount_grams=int(row["amount"]),
            food_id=int(row["food_id"]),
            snapshot=snapshot,
        )
    except (TypeError, ValueError) as exc:
        raise CorruptSnapshotError(entry_id, str(exc)) from exc
