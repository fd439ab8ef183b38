"""Services for training-tracker."""

from .authoring import (
    LevelInput,
    LevelTree,
    MoveInput,
    ProgramAuthoringService,
    ProgramInput,
    ProgramTree,
)
from .export_import import EXPORT_SCHEMA_VERSION, EXPORT_VERSION, ExportImportService
from .logs import LogInput, WorkoutLogService
from .settings import SettingsService

__all__ = [
    "EXPORT_SCHEMA_VERSION",
    "EXPORT_VERSION",
    "ExportImportService",
    "LevelInput",
    "LevelTree",
    "LogInput",
    "MoveInput",
    "ProgramAuthoringService",
    "ProgramInput",
    "ProgramTree",
    "SettingsService",
    "WorkoutLogService",
]
