"""Database engine setup and initialization."""

import json
import os
from pathlib import Path

import aiosqlite

from ..models.settings import SETTINGS_ID, UserSettings

# Default data directory, overridable with TRAINING_TRACKER_DATA_DIR
DATA_DIR = Path("data")
DATA_DIR_ENV = "TRAINING_TRACKER_DATA_DIR"
DB_FILENAME = "training_tracker.db"

# Each collection keeps the full record as JSON in `data`; the other
# columns are copies of fields needed for scans and sorting.
SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS programs (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        name TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS levels (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        program_id TEXT NOT NULL,
        sort_order INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS moves (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        level_id TEXT NOT NULL,
        sort_order INTEGER NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS logs (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        program_id TEXT NOT NULL,
        level_id TEXT NOT NULL,
        move_id TEXT,
        date TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS settings (
        id TEXT PRIMARY KEY CHECK (id = 'settings'),
        data TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    # Sync extension points (not used by the engine itself)
    """
    CREATE TABLE IF NOT EXISTS sync_queue (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        entity TEXT NOT NULL,
        entity_id TEXT NOT NULL,
        operation TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS conflicts (
        id TEXT PRIMARY KEY,
        data TEXT NOT NULL,
        entity TEXT NOT NULL,
        entity_id TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_programs_created ON programs(created_at)",
    "CREATE INDEX IF NOT EXISTS idx_levels_program ON levels(program_id, sort_order)",
    "CREATE INDEX IF NOT EXISTS idx_moves_level ON moves(level_id, sort_order)",
    "CREATE INDEX IF NOT EXISTS idx_logs_program ON logs(program_id)",
    "CREATE INDEX IF NOT EXISTS idx_logs_level ON logs(level_id)",
    "CREATE INDEX IF NOT EXISTS idx_logs_move ON logs(move_id)",
    "CREATE INDEX IF NOT EXISTS idx_logs_date ON logs(date)",
    "CREATE INDEX IF NOT EXISTS idx_sync_queue_entity ON sync_queue(entity, entity_id)",
    "CREATE INDEX IF NOT EXISTS idx_conflicts_entity ON conflicts(entity, entity_id)",
]


def get_data_dir() -> Path:
    """Get the data directory, honouring the environment override."""
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else DATA_DIR


def get_db_path(data_dir: Path | None = None, create: bool = True) -> Path:
    """Get the database file path.

    Args:
        data_dir: Directory holding the database (default: get_data_dir())
        create: Create the directory if it is missing
    """
    if data_dir is None:
        data_dir = get_data_dir()
    if create:
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / DB_FILENAME


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema and seed default settings."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        for statement in SCHEMA:
            await db.execute(statement)

        defaults = UserSettings.default()
        await db.execute(
            "INSERT OR IGNORE INTO settings (id, data, updated_at) VALUES (?, ?, ?)",
            (SETTINGS_ID, json.dumps(defaults.to_dict()), defaults.updated_at),
        )

        await db.commit()
