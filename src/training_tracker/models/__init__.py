"""Data models for training-tracker."""

from .common import new_id, now_iso, parse_timestamp
from .export import ExportEnvelope, ExportMode, ImportMode, ImportSummary
from .log import WorkoutLog
from .program import Difficulty, Level, Move, MoveType, Program
from .settings import SETTINGS_ID, UnitPreference, UserSettings
from .sync import SyncConflict, SyncOperation, SyncQueueItem

__all__ = [
    "Difficulty",
    "ExportEnvelope",
    "ExportMode",
    "ImportMode",
    "ImportSummary",
    "Level",
    "Move",
    "MoveType",
    "new_id",
    "now_iso",
    "parse_timestamp",
    "Program",
    "SETTINGS_ID",
    "SyncConflict",
    "SyncOperation",
    "SyncQueueItem",
    "UnitPreference",
    "UserSettings",
    "WorkoutLog",
]
