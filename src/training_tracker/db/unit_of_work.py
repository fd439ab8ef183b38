"""Transaction boundary shared by every multi-record operation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from ..errors import TransactionError
from .engine import get_db_path
from .repositories import (
    CONFLICTS,
    LEVELS,
    LOGS,
    MOVES,
    PROGRAMS,
    SYNC_QUEUE,
    Repository,
    SettingsStore,
)


class UnitOfWork:
    """Repositories for every collection, bound to one open transaction."""

    def __init__(self, db: aiosqlite.Connection):
        self.db = db
        self.programs = Repository(db, PROGRAMS)
        self.levels = Repository(db, LEVELS)
        self.moves = Repository(db, MOVES)
        self.logs = Repository(db, LOGS)
        self.settings = SettingsStore(db)
        self.sync_queue = Repository(db, SYNC_QUEUE)
        self.conflicts = Repository(db, CONFLICTS)


class Store:
    """Entry point to the database file."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    @asynccontextmanager
    async def transaction(self, write: bool = True) -> AsyncIterator[UnitOfWork]:
        """Open a transaction spanning all collections.

        Commits when the block exits normally and rolls back on any
        exception, so callers never observe a partial write. Database
        errors are re-raised as TransactionError; other exceptions
        propagate unchanged after the rollback.
        """
        async with aiosqlite.connect(self.db_path, isolation_level=None) as db:
            try:
                await db.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            except aiosqlite.Error as e:
                raise TransactionError(f"Could not start transaction: {e}") from e

            try:
                yield UnitOfWork(db)
            except aiosqlite.Error as e:
                await _rollback(db)
                raise TransactionError(f"Transaction rolled back: {e}") from e
            except BaseException:
                await _rollback(db)
                raise

            try:
                await db.execute("COMMIT")
            except aiosqlite.Error as e:
                await _rollback(db)
                raise TransactionError(f"Transaction could not commit: {e}") from e


async def _rollback(db: aiosqlite.Connection) -> None:
    # SQLite may already have ended the transaction after some errors
    if db.in_transaction:
        await db.execute("ROLLBACK")
