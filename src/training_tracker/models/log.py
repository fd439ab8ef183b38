"""Workout log model."""

from dataclasses import dataclass


@dataclass
class WorkoutLog:
    """Actual performance recorded against a program level (and optionally a move).

    Logs reference the hierarchy but are not owned by it: they are removed
    only when their level or program is deleted.
    """

    id: str
    program_id: str
    level_id: str
    date: str
    created_at: str
    updated_at: str
    move_id: str | None = None
    actual_sets: int | None = None
    actual_reps: str | None = None
    actual_weight: str | None = None
    perceived_effort: int | None = None  # RPE, 1-10
    notes: str = ""
    completed: bool = False

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "programId": self.program_id,
            "levelId": self.level_id,
            "moveId": self.move_id,
            "date": self.date,
            "actualSets": self.actual_sets,
            "actualReps": self.actual_reps,
            "actualWeight": self.actual_weight,
            "perceivedEffort": self.perceived_effort,
            "notes": self.notes,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutLog":
        """Create from the wire representation."""
        return cls(
            id=data["id"],
            program_id=data["programId"],
            level_id=data["levelId"],
            date=data["date"],
            created_at=data["createdAt"],
            updated_at=data["updatedAt"],
            move_id=data.get("moveId") or None,
            actual_sets=data.get("actualSets"),
            actual_reps=data.get("actualReps"),
            actual_weight=data.get("actualWeight"),
            perceived_effort=data.get("perceivedEffort"),
            notes=data.get("notes", ""),
            completed=bool(data.get("completed", False)),
        )
