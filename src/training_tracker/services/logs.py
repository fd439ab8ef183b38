"""Workout log recording."""

import logging
from dataclasses import dataclass, replace
from operator import attrgetter

from ..db import Store
from ..errors import NotFoundError, ReferentialIntegrityError
from ..models.common import new_id, now_iso
from ..models.log import WorkoutLog

logger = logging.getLogger(__name__)


@dataclass
class LogInput:
    """Fields for a new log entry, or a patch when updating one."""

    program_id: str | None = None
    level_id: str | None = None
    move_id: str | None = None
    date: str | None = None  # Defaults to now on create
    actual_sets: int | None = None
    actual_reps: str | None = None
    actual_weight: str | None = None
    perceived_effort: int | None = None
    notes: str | None = None
    completed: bool | None = None


class WorkoutLogService:
    """Records actual performance against the program hierarchy."""

    def __init__(self, store: Store):
        self.store = store

    async def create_log(self, data: LogInput) -> WorkoutLog:
        """Record a workout against a program level (and optionally a move)."""
        async with self.store.transaction() as uow:
            program = await uow.programs.get(data.program_id)
            if program is None:
                raise NotFoundError("Program", data.program_id)

            level = await uow.levels.get(data.level_id)
            if level is None:
                raise NotFoundError("Level", data.level_id)
            if level.program_id != program.id:
                raise ReferentialIntegrityError(
                    f"Level {level.id} does not belong to program {program.id}"
                )

            if data.move_id:
                move = await uow.moves.get(data.move_id)
                if move is None:
                    raise NotFoundError("Move", data.move_id)
                if move.level_id != level.id:
                    raise ReferentialIntegrityError(
                        f"Move {move.id} does not belong to level {level.id}"
                    )

            timestamp = now_iso()
            log = WorkoutLog(
                id=new_id(),
                program_id=program.id,
                level_id=level.id,
                move_id=data.move_id or None,
                date=data.date or timestamp,
                actual_sets=data.actual_sets,
                actual_reps=data.actual_reps,
                actual_weight=data.actual_weight,
                perceived_effort=data.perceived_effort,
                notes=(data.notes or "").strip(),
                completed=bool(data.completed),
                created_at=timestamp,
                updated_at=timestamp,
            )
            await uow.logs.put(log)

        logger.info("Logged workout %s for level %s", log.id, log.level_id)
        return log

    async def update_log(self, log_id: str, patch: LogInput) -> WorkoutLog:
        """Update the performance fields of a log entry.

        The program/level/move a log points at cannot be changed.
        """
        async with self.store.transaction() as uow:
            existing = await uow.logs.get(log_id)
            if existing is None:
                raise NotFoundError("Log", log_id)

            changes = {
                name: getattr(patch, name)
                for name in (
                    "date", "actual_sets", "actual_reps", "actual_weight",
                    "perceived_effort", "completed",
                )
                if getattr(patch, name) is not None
            }
            if patch.notes is not None:
                changes["notes"] = patch.notes.strip()

            updated = replace(existing, **changes, updated_at=now_iso())
            await uow.logs.put(updated)

        return updated

    async def delete_log(self, log_id: str) -> None:
        """Delete a log entry."""
        async with self.store.transaction() as uow:
            if await uow.logs.get(log_id) is None:
                raise NotFoundError("Log", log_id)
            await uow.logs.delete(log_id)

    async def list_logs(
        self, program_id: str | None = None, level_id: str | None = None
    ) -> list[WorkoutLog]:
        """List logs by date, optionally filtered by program and/or level."""
        async with self.store.transaction(write=False) as uow:
            if level_id is not None:
                logs = await uow.logs.find_by("level_id", level_id)
            elif program_id is not None:
                logs = await uow.logs.find_by("program_id", program_id)
            else:
                logs = await uow.logs.list_all()

        if program_id is not None:
            logs = [log for log in logs if log.program_id == program_id]
        return sorted(logs, key=attrgetter("date"))
