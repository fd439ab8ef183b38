"""Export envelope: the versioned container used for backup and restore."""

from dataclasses import dataclass, field
from enum import Enum

from .log import WorkoutLog
from .program import Level, Move, Program
from .settings import UserSettings


class ExportMode(str, Enum):
    """What an envelope contains."""

    FULL = "full"  # Entire dataset
    PROGRAM = "program"  # One program subtree


class ImportMode(str, Enum):
    """How an envelope is applied to the store."""

    MERGE = "merge"  # Keep whichever record has the newer updatedAt
    REPLACE = "replace"  # Wipe everything, then write the payload verbatim


@dataclass
class ExportEnvelope:
    """A complete export, ready to be serialised as JSON."""

    version: str
    schema_version: str
    export_mode: ExportMode
    export_date: str
    programs: list[Program]
    levels: list[Level]
    moves: list[Move]
    logs: list[WorkoutLog]
    settings: UserSettings

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "version": self.version,
            "schemaVersion": self.schema_version,
            "exportMode": self.export_mode.value,
            "exportDate": self.export_date,
            "data": {
                "programs": [p.to_dict() for p in self.programs],
                "levels": [lv.to_dict() for lv in self.levels],
                "moves": [m.to_dict() for m in self.moves],
                "logs": [log.to_dict() for log in self.logs],
                "settings": self.settings.to_dict(),
            },
        }


@dataclass
class ImportSummary:
    """Number of records written per collection by an import."""

    programs: int = 0
    levels: int = 0
    moves: int = 0
    logs: int = 0
    settings: int = 0
    skipped: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.programs + self.levels + self.moves + self.logs + self.settings

    def to_dict(self) -> dict:
        return {
            "programs": self.programs,
            "levels": self.levels,
            "moves": self.moves,
            "logs": self.logs,
            "settings": self.settings,
        }
