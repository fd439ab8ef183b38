"""Program authoring: hierarchy-aware CRUD for programs, levels and moves.

Every mutation runs inside a single store transaction. Preconditions
(the record or its parent exists, names are non-empty) are checked
inside that transaction before anything is written, and any failure
rolls the whole operation back.
"""

import logging
from dataclasses import dataclass, field, replace
from operator import attrgetter

from ..db import Store, UnitOfWork
from ..errors import NotFoundError, ReferentialIntegrityError, ValidationError
from ..models.common import new_id, now_iso
from ..models.program import Difficulty, Level, Move, MoveType, Program
from .ordering import clamp_insertion_order, renumber, reorder, sort_by_order

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"


@dataclass
class ProgramInput:
    """Fields for creating a program, or a patch when updating one.

    Fields left as None are not changed by an update.
    """

    name: str | None = None
    description: str | None = None
    goal: str | None = None
    duration: str | None = None
    difficulty: Difficulty | str | None = None
    tags: list[str] | None = None
    color: str | None = None
    custom_fields: dict | None = None


@dataclass
class LevelInput:
    """Fields for creating a level, or a patch when updating one."""

    name: str | None = None
    description: str | None = None
    duration: str | None = None
    rest_days: int | None = None
    notes: str | None = None
    order: int | None = None  # None appends on create, keeps position on update
    custom_fields: dict | None = None


@dataclass
class MoveInput:
    """Fields for creating a move, or a patch when updating one."""

    name: str | None = None
    description: str | None = None
    type: MoveType | str | None = None
    target_sets: int | None = None
    target_reps: str | None = None
    target_weight: str | None = None
    target_time: str | None = None
    rest_between_sets: str | None = None
    video_url: str | None = None
    image_url: str | None = None
    equipment: list[str] | None = None
    notes: str | None = None
    order: int | None = None
    custom_fields: dict | None = None


@dataclass
class ProgramTree:
    """A program with its levels and moves, each sorted by order."""

    program: Program
    levels: list[Level] = field(default_factory=list)
    moves: list[Move] = field(default_factory=list)


@dataclass
class LevelTree:
    """A level with its moves sorted by order."""

    level: Level
    moves: list[Move] = field(default_factory=list)


def _trim(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


def _required_name(name: str | None, entity: str) -> str:
    trimmed = _trim(name)
    if not trimmed:
        raise ValidationError(f"{entity} name is required")
    return trimmed


def _pick(value, fallback):
    """Patch helper: take value unless it was not provided."""
    return fallback if value is None else value


def _difficulty(value: Difficulty | str) -> Difficulty:
    try:
        return Difficulty(value)
    except ValueError:
        raise ValidationError(f"Unknown difficulty: {value}") from None


def _move_type(value: MoveType | str) -> MoveType:
    try:
        return MoveType(value)
    except ValueError:
        raise ValidationError(f"Unknown move type: {value}") from None


def _find(records: list, record_id: str):
    return next(r for r in records if r.id == record_id)


class ProgramAuthoringService:
    """Creates, edits, duplicates and deletes the program hierarchy."""

    def __init__(self, store: Store):
        self.store = store

    # Programs

    async def list_programs(self) -> list[Program]:
        """List all programs, oldest first."""
        async with self.store.transaction(write=False) as uow:
            programs = await uow.programs.list_all()
        return sorted(programs, key=attrgetter("created_at"))

    async def get_program(self, program_id: str) -> Program:
        """Get a program by ID."""
        async with self.store.transaction(write=False) as uow:
            return await self._require_program(uow, program_id)

    async def get_program_tree(self, program_id: str) -> ProgramTree:
        """Get a program with all its levels and moves."""
        async with self.store.transaction(write=False) as uow:
            program = await self._require_program(uow, program_id)
            levels, moves = await self._load_subtree(uow, program_id)
        return ProgramTree(program=program, levels=levels, moves=moves)

    async def create_program(self, data: ProgramInput) -> Program:
        """Create a new program."""
        timestamp = now_iso()
        program = Program(
            id=new_id(),
            name=_required_name(data.name, "Program"),
            description=_trim(data.description) or "",
            goal=_trim(data.goal) or "",
            duration=_trim(data.duration) or "",
            difficulty=_difficulty(data.difficulty or Difficulty.BEGINNER),
            tags=list(data.tags or []),
            color=data.color,
            custom_fields=dict(data.custom_fields or {}),
            created_at=timestamp,
            updated_at=timestamp,
        )

        async with self.store.transaction() as uow:
            await uow.programs.put(program)

        logger.info("Created program %s (%s)", program.id, program.name)
        return program

    async def update_program(self, program_id: str, patch: ProgramInput) -> Program:
        """Update the provided fields of a program."""
        async with self.store.transaction() as uow:
            existing = await self._require_program(uow, program_id)
            updated = replace(
                existing,
                name=existing.name if patch.name is None else _required_name(patch.name, "Program"),
                description=_pick(_trim(patch.description), existing.description),
                goal=_pick(_trim(patch.goal), existing.goal),
                duration=_pick(_trim(patch.duration), existing.duration),
                difficulty=existing.difficulty if patch.difficulty is None else _difficulty(patch.difficulty),
                tags=_pick(patch.tags, existing.tags),
                color=_pick(patch.color, existing.color),
                custom_fields=_pick(patch.custom_fields, existing.custom_fields),
                updated_at=now_iso(),
            )
            await uow.programs.put(updated)

        logger.info("Updated program %s", program_id)
        return updated

    async def delete_program(self, program_id: str) -> None:
        """Delete a program with its levels, moves and logs."""
        async with self.store.transaction() as uow:
            await self._require_program(uow, program_id)
            levels = await uow.levels.find_by("program_id", program_id)
            level_ids = [level.id for level in levels]
            moves = await uow.moves.find_in("level_id", level_ids)
            move_ids = [move.id for move in moves]

            logs_deleted = await uow.logs.delete_by("program_id", program_id)
            logs_deleted += await uow.logs.delete_in("level_id", level_ids)
            logs_deleted += await uow.logs.delete_in("move_id", move_ids)
            await uow.moves.delete_in("level_id", level_ids)
            await uow.levels.delete_by("program_id", program_id)
            await uow.programs.delete(program_id)

        logger.info(
            "Deleted program %s (%d levels, %d moves, %d logs)",
            program_id, len(level_ids), len(move_ids), logs_deleted,
        )

    async def duplicate_program(self, program_id: str) -> ProgramTree:
        """Deep-copy a program, its levels and its moves under fresh IDs."""
        async with self.store.transaction() as uow:
            program = await self._require_program(uow, program_id)
            levels, moves = await self._load_subtree(uow, program_id)

            timestamp = now_iso()
            copy = replace(
                program,
                id=new_id(),
                name=f"{program.name}{COPY_SUFFIX}",
                created_at=timestamp,
                updated_at=timestamp,
            )

            level_ids: dict[str, str] = {}
            copied_levels = []
            for position, level in enumerate(levels, start=1):
                level_ids[level.id] = new_id()
                copied_levels.append(replace(
                    level,
                    id=level_ids[level.id],
                    program_id=copy.id,
                    order=position,
                    created_at=timestamp,
                    updated_at=timestamp,
                ))

            copied_moves = []
            for level in levels:
                level_moves = renumber(m for m in moves if m.level_id == level.id)
                copied_moves.extend(
                    replace(
                        move,
                        id=new_id(),
                        level_id=level_ids[level.id],
                        created_at=timestamp,
                        updated_at=timestamp,
                    )
                    for move in level_moves
                )

            await uow.programs.put(copy)
            await uow.levels.bulk_put(copied_levels)
            await uow.moves.bulk_put(copied_moves)

        logger.info("Duplicated program %s as %s", program_id, copy.id)
        return ProgramTree(program=copy, levels=copied_levels, moves=copied_moves)

    # Levels

    async def list_levels(self, program_id: str) -> list[Level]:
        """List a program's levels by order."""
        async with self.store.transaction(write=False) as uow:
            levels = await uow.levels.find_by("program_id", program_id)
        return sort_by_order(levels)

    async def create_level(self, program_id: str, data: LevelInput) -> Level:
        """Create a level, inserting it at data.order (default: last)."""
        name = _required_name(data.name, "Level")

        async with self.store.transaction() as uow:
            await self._require_program(uow, program_id)
            siblings = await uow.levels.find_by("program_id", program_id)
            order = clamp_insertion_order(data.order, len(siblings))

            timestamp = now_iso()
            level = Level(
                id=new_id(),
                program_id=program_id,
                name=name,
                order=order,
                description=_trim(data.description) or "",
                duration=_trim(data.duration) or "",
                rest_days=data.rest_days or 0,
                notes=_trim(data.notes) or "",
                custom_fields=dict(data.custom_fields or {}),
                created_at=timestamp,
                updated_at=timestamp,
            )

            normalized = reorder([*siblings, level], level.id, order)
            await uow.levels.bulk_put(normalized)

        created = _find(normalized, level.id)
        logger.info("Created level %s at position %d in program %s", created.id, created.order, program_id)
        return created

    async def update_level(self, level_id: str, patch: LevelInput) -> Level:
        """Update a level; changing order moves it within its program."""
        async with self.store.transaction() as uow:
            existing = await self._require_level(uow, level_id)
            siblings = await uow.levels.find_by("program_id", existing.program_id)
            desired = clamp_insertion_order(_pick(patch.order, existing.order), len(siblings))

            updated = replace(
                existing,
                name=existing.name if patch.name is None else _required_name(patch.name, "Level"),
                description=_pick(_trim(patch.description), existing.description),
                duration=_pick(_trim(patch.duration), existing.duration),
                rest_days=_pick(patch.rest_days, existing.rest_days),
                notes=_pick(_trim(patch.notes), existing.notes),
                custom_fields=_pick(patch.custom_fields, existing.custom_fields),
                updated_at=now_iso(),
            )

            normalized = reorder(
                [updated if s.id == level_id else s for s in siblings], level_id, desired
            )
            await uow.levels.bulk_put(normalized)

        return _find(normalized, level_id)

    async def delete_level(self, level_id: str) -> None:
        """Delete a level with its moves and logs, then close the gap."""
        async with self.store.transaction() as uow:
            level = await self._require_level(uow, level_id)
            moves = await uow.moves.find_by("level_id", level_id)

            await uow.logs.delete_by("level_id", level_id)
            await uow.logs.delete_in("move_id", [move.id for move in moves])
            await uow.moves.delete_by("level_id", level_id)
            await uow.levels.delete(level_id)

            siblings = await uow.levels.find_by("program_id", level.program_id)
            await uow.levels.bulk_put(renumber(siblings))

        logger.info("Deleted level %s from program %s", level_id, level.program_id)

    async def duplicate_level(self, level_id: str) -> LevelTree:
        """Copy a level and its moves, placing the copy right after the source."""
        async with self.store.transaction() as uow:
            level = await self._require_level(uow, level_id)
            siblings = await uow.levels.find_by("program_id", level.program_id)
            moves = sort_by_order(await uow.moves.find_by("level_id", level_id))

            timestamp = now_iso()
            copy = replace(
                level,
                id=new_id(),
                name=f"{level.name}{COPY_SUFFIX}",
                order=level.order + 1,
                created_at=timestamp,
                updated_at=timestamp,
            )
            normalized = reorder([*siblings, copy], copy.id, copy.order)
            copied_moves = [
                replace(move, id=new_id(), level_id=copy.id, created_at=timestamp, updated_at=timestamp)
                for move in renumber(moves)
            ]

            await uow.levels.bulk_put(normalized)
            await uow.moves.bulk_put(copied_moves)

        return LevelTree(level=_find(normalized, copy.id), moves=copied_moves)

    # Moves

    async def list_moves(self, level_id: str) -> list[Move]:
        """List a level's moves by order."""
        async with self.store.transaction(write=False) as uow:
            moves = await uow.moves.find_by("level_id", level_id)
        return sort_by_order(moves)

    async def create_move(self, level_id: str, data: MoveInput) -> Move:
        """Create a move, inserting it at data.order (default: last)."""
        name = _required_name(data.name, "Move")
        move_type = _move_type(data.type or MoveType.STRENGTH)

        async with self.store.transaction() as uow:
            await self._require_level(uow, level_id)
            siblings = await uow.moves.find_by("level_id", level_id)
            order = clamp_insertion_order(data.order, len(siblings))

            timestamp = now_iso()
            move = Move(
                id=new_id(),
                level_id=level_id,
                name=name,
                order=order,
                description=_trim(data.description) or "",
                type=move_type,
                target_sets=data.target_sets,
                target_reps=data.target_reps,
                target_weight=data.target_weight,
                target_time=data.target_time,
                rest_between_sets=data.rest_between_sets,
                video_url=data.video_url,
                image_url=data.image_url,
                equipment=list(data.equipment or []),
                notes=_trim(data.notes) or "",
                custom_fields=dict(data.custom_fields or {}),
                created_at=timestamp,
                updated_at=timestamp,
            )

            normalized = reorder([*siblings, move], move.id, order)
            await uow.moves.bulk_put(normalized)

        created = _find(normalized, move.id)
        logger.info("Created move %s at position %d in level %s", created.id, created.order, level_id)
        return created

    async def update_move(self, move_id: str, patch: MoveInput) -> Move:
        """Update a move; changing order moves it within its level."""
        async with self.store.transaction() as uow:
            existing = await self._require_move(uow, move_id)
            siblings = await uow.moves.find_by("level_id", existing.level_id)
            desired = clamp_insertion_order(_pick(patch.order, existing.order), len(siblings))

            updated = replace(
                existing,
                name=existing.name if patch.name is None else _required_name(patch.name, "Move"),
                description=_pick(_trim(patch.description), existing.description),
                type=existing.type if patch.type is None else _move_type(patch.type),
                target_sets=_pick(patch.target_sets, existing.target_sets),
                target_reps=_pick(patch.target_reps, existing.target_reps),
                target_weight=_pick(patch.target_weight, existing.target_weight),
                target_time=_pick(patch.target_time, existing.target_time),
                rest_between_sets=_pick(patch.rest_between_sets, existing.rest_between_sets),
                video_url=_pick(patch.video_url, existing.video_url),
                image_url=_pick(patch.image_url, existing.image_url),
                equipment=_pick(patch.equipment, existing.equipment),
                notes=_pick(_trim(patch.notes), existing.notes),
                custom_fields=_pick(patch.custom_fields, existing.custom_fields),
                updated_at=now_iso(),
            )

            normalized = reorder(
                [updated if s.id == move_id else s for s in siblings], move_id, desired
            )
            await uow.moves.bulk_put(normalized)

        return _find(normalized, move_id)

    async def delete_move(self, move_id: str) -> None:
        """Delete a move, detach logs that referenced it, and close the gap."""
        async with self.store.transaction() as uow:
            move = await self._require_move(uow, move_id)

            timestamp = now_iso()
            logs = await uow.logs.find_by("move_id", move_id)
            await uow.logs.bulk_put(
                replace(log, move_id=None, updated_at=timestamp) for log in logs
            )
            await uow.moves.delete(move_id)

            siblings = await uow.moves.find_by("level_id", move.level_id)
            await uow.moves.bulk_put(renumber(siblings))

        logger.info("Deleted move %s (%d logs detached)", move_id, len(logs))

    async def duplicate_move(self, move_id: str) -> Move:
        """Copy a move, placing the copy right after the source."""
        async with self.store.transaction() as uow:
            move = await self._require_move(uow, move_id)
            siblings = await uow.moves.find_by("level_id", move.level_id)

            timestamp = now_iso()
            copy = replace(
                move,
                id=new_id(),
                name=f"{move.name}{COPY_SUFFIX}",
                order=move.order + 1,
                created_at=timestamp,
                updated_at=timestamp,
            )
            normalized = reorder([*siblings, copy], copy.id, copy.order)
            await uow.moves.bulk_put(normalized)

        return _find(normalized, copy.id)

    # Guards

    async def _load_subtree(self, uow: UnitOfWork, program_id: str) -> tuple[list[Level], list[Move]]:
        levels = sort_by_order(await uow.levels.find_by("program_id", program_id))
        moves = await uow.moves.find_in("level_id", [level.id for level in levels])
        return levels, sort_by_order(moves)

    async def _require_program(self, uow: UnitOfWork, program_id: str) -> Program:
        program = await uow.programs.get(program_id)
        if program is None:
            raise NotFoundError("Program", program_id)
        return program

    async def _require_level(self, uow: UnitOfWork, level_id: str) -> Level:
        level = await uow.levels.get(level_id)
        if level is None:
            raise NotFoundError("Level", level_id)
        if await uow.programs.get(level.program_id) is None:
            raise ReferentialIntegrityError(
                f"Level {level_id} references missing program {level.program_id}"
            )
        return level

    async def _require_move(self, uow: UnitOfWork, move_id: str) -> Move:
        move = await uow.moves.get(move_id)
        if move is None:
            raise NotFoundError("Move", move_id)
        if await uow.levels.get(move.level_id) is None:
            raise ReferentialIntegrityError(
                f"Move {move_id} references missing level {move.level_id}"
            )
        return move
