"""Data access layer for training-tracker.

Repositories do no validation: they read and write whole records on the
connection they are given. Invariants are enforced by the services.
"""

import json
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import Any, Generic, Protocol, TypeVar

import aiosqlite

from ..models.log import WorkoutLog
from ..models.program import Level, Move, Program
from ..models.settings import SETTINGS_ID, UserSettings
from ..models.sync import SyncConflict, SyncQueueItem


class Record(Protocol):
    id: str

    def to_dict(self) -> dict: ...


T = TypeVar("T", bound=Record)


@dataclass(frozen=True)
class Collection(Generic[T]):
    """Describes how one record type maps onto its table."""

    table: str
    from_dict: Callable[[dict], T]
    # Indexed columns and how to read each one from a record
    columns: tuple[tuple[str, Callable[[Any], Any]], ...]

    @property
    def column_names(self) -> list[str]:
        return [name for name, _ in self.columns]


PROGRAMS = Collection[Program](
    table="programs",
    from_dict=Program.from_dict,
    columns=(
        ("name", lambda p: p.name),
        ("created_at", lambda p: p.created_at),
        ("updated_at", lambda p: p.updated_at),
    ),
)

LEVELS = Collection[Level](
    table="levels",
    from_dict=Level.from_dict,
    columns=(
        ("program_id", lambda lv: lv.program_id),
        ("sort_order", lambda lv: lv.order),
        ("created_at", lambda lv: lv.created_at),
        ("updated_at", lambda lv: lv.updated_at),
    ),
)

MOVES = Collection[Move](
    table="moves",
    from_dict=Move.from_dict,
    columns=(
        ("level_id", lambda m: m.level_id),
        ("sort_order", lambda m: m.order),
        ("created_at", lambda m: m.created_at),
        ("updated_at", lambda m: m.updated_at),
    ),
)

LOGS = Collection[WorkoutLog](
    table="logs",
    from_dict=WorkoutLog.from_dict,
    columns=(
        ("program_id", lambda log: log.program_id),
        ("level_id", lambda log: log.level_id),
        ("move_id", lambda log: log.move_id),
        ("date", lambda log: log.date),
        ("created_at", lambda log: log.created_at),
        ("updated_at", lambda log: log.updated_at),
    ),
)

SYNC_QUEUE = Collection[SyncQueueItem](
    table="sync_queue",
    from_dict=SyncQueueItem.from_dict,
    columns=(
        ("entity", lambda item: item.entity),
        ("entity_id", lambda item: item.entity_id),
        ("operation", lambda item: item.operation.value),
        ("created_at", lambda item: item.created_at),
    ),
)

CONFLICTS = Collection[SyncConflict](
    table="conflicts",
    from_dict=SyncConflict.from_dict,
    columns=(
        ("entity", lambda c: c.entity),
        ("entity_id", lambda c: c.entity_id),
        ("created_at", lambda c: c.created_at),
    ),
)


class Repository(Generic[T]):
    """Generic CRUD for one collection, bound to an open connection."""

    def __init__(self, db: aiosqlite.Connection, collection: Collection[T]):
        self.db = db
        self.collection = collection

    @property
    def table(self) -> str:
        return self.collection.table

    async def get(self, record_id: str) -> T | None:
        """Get a record by ID."""
        cursor = await self.db.execute(
            f"SELECT data FROM {self.table} WHERE id = ?", (record_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    async def list_all(self) -> list[T]:
        """List all records in insertion order."""
        cursor = await self.db.execute(f"SELECT data FROM {self.table} ORDER BY rowid")
        rows = await cursor.fetchall()
        return [self._row_to_record(row) for row in rows]

    async def count(self) -> int:
        """Count records in the collection."""
        cursor = await self.db.execute(f"SELECT COUNT(*) FROM {self.table}")
        row = await cursor.fetchone()
        return row[0]

    async def find_by(self, column: str, value: Any) -> list[T]:
        """Get all records whose indexed column equals value."""
        self._check_column(column)
        cursor = await self.db.execute(
            f"SELECT data FROM {self.table} WHERE {column} = ? ORDER BY rowid",
            (value,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_record(row) for row in rows]

    async def find_in(self, column: str, values: Iterable[Any]) -> list[T]:
        """Get all records whose indexed column is one of values."""
        self._check_column(column)
        values = list(values)
        if not values:
            return []
        placeholders = ", ".join("?" for _ in values)
        cursor = await self.db.execute(
            f"SELECT data FROM {self.table} WHERE {column} IN ({placeholders}) ORDER BY rowid",
            values,
        )
        rows = await cursor.fetchall()
        return [self._row_to_record(row) for row in rows]

    async def put(self, record: T) -> None:
        """Insert a record, or replace the stored record with the same ID."""
        await self.db.execute(self._upsert_sql(), self._record_params(record))

    async def bulk_put(self, records: Iterable[T]) -> None:
        """Insert or replace many records."""
        params = [self._record_params(record) for record in records]
        if params:
            await self.db.executemany(self._upsert_sql(), params)

    async def delete(self, record_id: str) -> None:
        """Delete a record by ID. Missing IDs are ignored."""
        await self.db.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))

    async def delete_by(self, column: str, value: Any) -> int:
        """Delete all records whose indexed column equals value."""
        self._check_column(column)
        cursor = await self.db.execute(
            f"DELETE FROM {self.table} WHERE {column} = ?", (value,)
        )
        return cursor.rowcount

    async def delete_in(self, column: str, values: Iterable[Any]) -> int:
        """Delete all records whose indexed column is one of values."""
        self._check_column(column)
        values = list(values)
        if not values:
            return 0
        placeholders = ", ".join("?" for _ in values)
        cursor = await self.db.execute(
            f"DELETE FROM {self.table} WHERE {column} IN ({placeholders})", values
        )
        return cursor.rowcount

    async def clear(self) -> None:
        """Delete every record in the collection."""
        await self.db.execute(f"DELETE FROM {self.table}")

    def _upsert_sql(self) -> str:
        # ON CONFLICT keeps the rowid, so insertion order survives updates
        names = ["id", "data", *self.collection.column_names]
        placeholders = ", ".join("?" for _ in names)
        updates = ", ".join(f"{name} = excluded.{name}" for name in names[1:])
        return (
            f"INSERT INTO {self.table} ({', '.join(names)}) VALUES ({placeholders}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}"
        )

    def _record_params(self, record: T) -> tuple:
        values = [getter(record) for _, getter in self.collection.columns]
        return (record.id, json.dumps(record.to_dict()), *values)

    def _check_column(self, column: str) -> None:
        if column != "id" and column not in self.collection.column_names:
            raise ValueError(f"{self.table} has no indexed column {column!r}")

    def _row_to_record(self, row: aiosqlite.Row) -> T:
        """Convert a database row to a record."""
        return self.collection.from_dict(json.loads(row[0]))


class SettingsStore:
    """Single-row store for the user settings record."""

    def __init__(self, db: aiosqlite.Connection):
        self.db = db

    async def get(self) -> UserSettings | None:
        """Get the stored settings, if any."""
        cursor = await self.db.execute(
            "SELECT data FROM settings WHERE id = ?", (SETTINGS_ID,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return UserSettings.from_dict(json.loads(row[0]))

    async def put(self, settings: UserSettings) -> None:
        """Store settings, always under the fixed settings ID."""
        if settings.id != SETTINGS_ID:
            settings = replace(settings, id=SETTINGS_ID)
        await self.db.execute(
            """
            INSERT INTO settings (id, data, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET data = excluded.data, updated_at = excluded.updated_at
            """,
            (SETTINGS_ID, json.dumps(settings.to_dict()), settings.updated_at),
        )

    async def clear(self) -> None:
        """Remove the stored settings."""
        await self.db.execute("DELETE FROM settings")
