"""Training program hierarchy models: Program -> Level -> Move."""

from dataclasses import dataclass, field
from enum import Enum


class Difficulty(str, Enum):
    """How demanding a program is."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class MoveType(str, Enum):
    """Kind of activity a move represents."""

    STRENGTH = "Strength"
    CARDIO = "Cardio"
    MOBILITY = "Mobility"
    STRETCHING = "Stretching"
    OTHER = "Other"


@dataclass
class Program:
    """A training plan. Root of the hierarchy; programs are unordered."""

    id: str
    name: str
    created_at: str
    updated_at: str
    description: str = ""
    goal: str = ""
    duration: str = ""
    difficulty: Difficulty = Difficulty.BEGINNER
    tags: list[str] = field(default_factory=list)
    color: str | None = None
    custom_fields: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "goal": self.goal,
            "duration": self.duration,
            "difficulty": self.difficulty.value,
            "tags": list(self.tags),
            "color": self.color,
            "customFields": dict(self.custom_fields),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Program":
        """Create from the wire representation."""
        return cls(
            id=data["id"],
            name=data["name"],
            created_at=data["createdAt"],
            updated_at=data["updatedAt"],
            description=data.get("description", ""),
            goal=data.get("goal", ""),
            duration=data.get("duration", ""),
            difficulty=Difficulty(data.get("difficulty", "Beginner")),
            tags=list(data.get("tags", [])),
            color=data.get("color"),
            custom_fields=dict(data.get("customFields") or {}),
        )


@dataclass
class Level:
    """An ordered phase (e.g. a week) within a program."""

    id: str
    program_id: str
    name: str
    order: int
    created_at: str
    updated_at: str
    description: str = ""
    duration: str = ""
    rest_days: int = 0
    notes: str = ""
    custom_fields: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "programId": self.program_id,
            "name": self.name,
            "description": self.description,
            "order": self.order,
            "duration": self.duration,
            "restDays": self.rest_days,
            "notes": self.notes,
            "customFields": dict(self.custom_fields),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Level":
        """Create from the wire representation."""
        return cls(
            id=data["id"],
            program_id=data["programId"],
            name=data["name"],
            order=int(data["order"]),
            created_at=data["createdAt"],
            updated_at=data["updatedAt"],
            description=data.get("description", ""),
            duration=data.get("duration", ""),
            rest_days=data.get("restDays", 0),
            notes=data.get("notes", ""),
            custom_fields=dict(data.get("customFields") or {}),
        )


@dataclass
class Move:
    """An ordered exercise within a level."""

    id: str
    level_id: str
    name: str
    order: int
    created_at: str
    updated_at: str
    description: str = ""
    type: MoveType = MoveType.STRENGTH
    target_sets: int | None = None
    target_reps: str | None = None  # "8-12", "AMRAP", ...
    target_weight: str | None = None
    target_time: str | None = None
    rest_between_sets: str | None = None
    video_url: str | None = None
    image_url: str | None = None
    equipment: list[str] = field(default_factory=list)
    notes: str = ""
    custom_fields: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "levelId": self.level_id,
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "targetSets": self.target_sets,
            "targetReps": self.target_reps,
            "targetWeight": self.target_weight,
            "targetTime": self.target_time,
            "restBetweenSets": self.rest_between_sets,
            "videoUrl": self.video_url,
            "imageUrl": self.image_url,
            "equipment": list(self.equipment),
            "notes": self.notes,
            "order": self.order,
            "customFields": dict(self.custom_fields),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Move":
        """Create from the wire representation."""
        return cls(
            id=data["id"],
            level_id=data["levelId"],
            name=data["name"],
            order=int(data["order"]),
            created_at=data["createdAt"],
            updated_at=data["updatedAt"],
            description=data.get("description", ""),
            type=MoveType(data.get("type", "Strength")),
            target_sets=data.get("targetSets"),
            target_reps=data.get("targetReps"),
            target_weight=data.get("targetWeight"),
            target_time=data.get("targetTime"),
            rest_between_sets=data.get("restBetweenSets"),
            video_url=data.get("videoUrl"),
            image_url=data.get("imageUrl"),
            equipment=list(data.get("equipment", [])),
            notes=data.get("notes", ""),
            custom_fields=dict(data.get("customFields") or {}),
        )
