"""Export and import of the whole dataset (or one program) as a versioned envelope.

Imports are validated completely before the store is touched, then applied
inside one transaction spanning every collection: either the whole payload
lands or nothing does.
"""

import json
import logging
from collections.abc import Callable
from operator import attrgetter
from typing import Any, TypeVar

from ..db import Repository, Store
from ..errors import (
    InvalidFormatError,
    NotFoundError,
    ReferentialIntegrityError,
    SchemaVersionMismatchError,
    ValidationError,
)
from ..models.common import now_iso, parse_timestamp
from ..models.export import ExportEnvelope, ExportMode, ImportMode, ImportSummary
from ..models.log import WorkoutLog
from ..models.program import Level, Move, Program
from ..models.settings import UserSettings
from .ordering import is_contiguous, renumber, sort_by_order

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
EXPORT_SCHEMA_VERSION = "1.0.0"

COLLECTIONS = ("programs", "levels", "moves", "logs")

# Wire fields whose type is checked before a record is parsed.
# Optional fields may also be null or absent.
FIELD_TYPES: dict[str, dict[str, type]] = {
    "programs": {"id": str, "name": str, "createdAt": str, "updatedAt": str},
    "levels": {
        "id": str, "programId": str, "name": str, "order": int, "createdAt": str, "updatedAt": str,
    },
    "moves": {
        "id": str, "levelId": str, "name": str, "order": int, "createdAt": str, "updatedAt": str,
    },
    "logs": {
        "id": str, "programId": str, "levelId": str, "date": str, "createdAt": str, "updatedAt": str,
    },
    "settings": {"updatedAt": str},
}
OPTIONAL_FIELD_TYPES: dict[str, dict[str, type]] = {
    "logs": {"moveId": str},
}

R = TypeVar("R")


def major_version(version: str) -> str:
    """Get the major component of a dotted version string."""
    return version.split(".")[0]


def is_newer_record(incoming: Any, existing: Any | None) -> bool:
    """Decide whether an incoming record should overwrite the stored one.

    Compares updated_at as dates; if either value does not parse, falls
    back to comparing the raw strings. Ties go to the incoming record.
    """
    if existing is None:
        return True

    incoming_time = parse_timestamp(incoming.updated_at)
    existing_time = parse_timestamp(existing.updated_at)
    if incoming_time is None or existing_time is None:
        logger.warning(
            "Unparseable updatedAt on %s (%r vs %r), comparing as strings",
            incoming.id, incoming.updated_at, existing.updated_at,
        )
        return str(incoming.updated_at) >= str(existing.updated_at)

    return incoming_time >= existing_time


def _sort_by_updated(records: list[R]) -> list[R]:
    return sorted(records, key=attrgetter("updated_at"))


def _assert_envelope(payload: Any) -> None:
    """Check the envelope's shape. Raises InvalidFormatError."""
    if not isinstance(payload, dict):
        raise InvalidFormatError("Invalid export format: root payload must be an object")

    if not isinstance(payload.get("version"), str) or not isinstance(payload.get("schemaVersion"), str):
        raise InvalidFormatError("Invalid export format: version fields are required")

    if payload.get("exportMode") not in {mode.value for mode in ExportMode}:
        raise InvalidFormatError('Invalid export format: exportMode must be "full" or "program"')

    data = payload.get("data")
    if not isinstance(data, dict):
        raise InvalidFormatError("Invalid export format: data object is required")

    for name in COLLECTIONS:
        if not isinstance(data.get(name), list):
            raise InvalidFormatError(f"Invalid export format: data.{name} must be an array")

    if not isinstance(data.get("settings"), dict):
        raise InvalidFormatError("Invalid export format: data.settings object is required")


def _has_type(value: Any, expected: type) -> bool:
    # bool is an int subclass but never a valid order
    return isinstance(value, expected) and not isinstance(value, bool)


def _check_field_types(item: dict, name: str, label: str) -> None:
    for key, expected in FIELD_TYPES.get(name, {}).items():
        if not _has_type(item.get(key), expected):
            raise InvalidFormatError(
                f"Invalid export format: {label}.{key} must be {expected.__name__}, "
                f"got {type(item.get(key)).__name__}"
            )

    for key, expected in OPTIONAL_FIELD_TYPES.get(name, {}).items():
        value = item.get(key)
        if value is not None and not _has_type(value, expected):
            raise InvalidFormatError(
                f"Invalid export format: {label}.{key} must be {expected.__name__} or null, "
                f"got {type(value).__name__}"
            )


def _parse_records(items: list, from_dict: Callable[[dict], R], name: str) -> list[R]:
    records = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InvalidFormatError(f"Invalid export format: data.{name}[{index}] must be an object")
        _check_field_types(item, name, f"data.{name}[{index}]")
        try:
            records.append(from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidFormatError(
                f"Invalid export format: data.{name}[{index}] is malformed ({e})"
            ) from e
    return records


def _validate_references(
    programs: list[Program],
    levels: list[Level],
    moves: list[Move],
    logs: list[WorkoutLog],
) -> None:
    """Check that every reference in the payload points inside the payload."""
    program_ids = {program.id for program in programs}
    level_ids = {level.id for level in levels}
    move_ids = {move.id for move in moves}

    for level in levels:
        if level.program_id not in program_ids:
            raise ReferentialIntegrityError(
                f"Referential integrity failed: missing program {level.program_id} for level {level.id}"
            )

    for move in moves:
        if move.level_id not in level_ids:
            raise ReferentialIntegrityError(
                f"Referential integrity failed: missing level {move.level_id} for move {move.id}"
            )

    for log in logs:
        if log.program_id not in program_ids:
            raise ReferentialIntegrityError(
                f"Referential integrity failed: missing program {log.program_id} for log {log.id}"
            )
        if log.level_id not in level_ids:
            raise ReferentialIntegrityError(
                f"Referential integrity failed: missing level {log.level_id} for log {log.id}"
            )
        if log.move_id and log.move_id not in move_ids:
            raise ReferentialIntegrityError(
                f"Referential integrity failed: missing move {log.move_id} for log {log.id}"
            )


def _warn_on_gaps(levels: list[Level], moves: list[Move]) -> None:
    # Replace mode writes orders verbatim; gaps are only reported
    groups: dict[tuple[str, str], list] = {}
    for level in levels:
        groups.setdefault(("program", level.program_id), []).append(level)
    for move in moves:
        groups.setdefault(("level", move.level_id), []).append(move)

    for (kind, parent_id), siblings in groups.items():
        if not is_contiguous(siblings):
            logger.warning("Imported orders under %s %s are not contiguous", kind, parent_id)


async def _close_gaps(repo: Repository, column: str, parent_ids: set[str]) -> None:
    """Renumber every sibling group under parent_ids that is no longer 1..N.

    Merged records keep their incoming order, which can collide with siblings
    added or shifted locally since the export was taken.
    """
    for parent_id in sorted(parent_ids):
        siblings = await repo.find_by(column, parent_id)
        if is_contiguous(siblings):
            continue
        logger.info("Renumbering %d merged siblings with %s %s", len(siblings), column, parent_id)
        await repo.bulk_put(renumber(siblings))


class ExportImportService:
    """Serialises the store to an envelope and restores it from one."""

    def __init__(self, store: Store, schema_version: str = EXPORT_SCHEMA_VERSION):
        self.store = store
        self.schema_version = schema_version

    async def export_all(self) -> ExportEnvelope:
        """Export every record plus settings."""
        async with self.store.transaction(write=False) as uow:
            programs = await uow.programs.list_all()
            levels = await uow.levels.list_all()
            moves = await uow.moves.list_all()
            logs = await uow.logs.list_all()
            settings = await uow.settings.get() or UserSettings.default()

        return self._envelope(
            ExportMode.FULL,
            programs=_sort_by_updated(programs),
            levels=sort_by_order(levels),
            moves=sort_by_order(moves),
            logs=_sort_by_updated(logs),
            settings=settings,
        )

    async def export_program(self, program_id: str, include_logs: bool = True) -> ExportEnvelope:
        """Export one program with its levels, moves and (optionally) logs."""
        async with self.store.transaction(write=False) as uow:
            program = await uow.programs.get(program_id)
            if program is None:
                raise NotFoundError("Program", program_id)

            levels = sort_by_order(await uow.levels.find_by("program_id", program_id))
            moves = await uow.moves.find_in("level_id", [level.id for level in levels])
            logs = await uow.logs.find_by("program_id", program_id) if include_logs else []
            settings = await uow.settings.get() or UserSettings.default()

        return self._envelope(
            ExportMode.PROGRAM,
            programs=[program],
            levels=levels,
            moves=sort_by_order(moves),
            logs=_sort_by_updated(logs),
            settings=settings,
        )

    async def import_json(self, text: str, mode: ImportMode | str) -> ImportSummary:
        """Parse JSON text and import it."""
        try:
            payload = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise InvalidFormatError(f"Import failed: invalid JSON ({e})") from e
        return await self.import_data(payload, mode)

    async def import_data(self, payload: Any, mode: ImportMode | str) -> ImportSummary:
        """Validate an envelope and apply it to the store.

        Args:
            payload: Envelope as a dict (or an ExportEnvelope)
            mode: MERGE keeps the newer record per ID; REPLACE wipes the store first

        Returns:
            Per-collection counts of records written

        Raises:
            InvalidFormatError: If the envelope or a record is malformed
            SchemaVersionMismatchError: If the major schema version differs
            ReferentialIntegrityError: If a record references something missing from the payload
        """
        try:
            mode = ImportMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown import mode: {mode}") from None

        if isinstance(payload, ExportEnvelope):
            payload = payload.to_dict()

        _assert_envelope(payload)

        schema_version = payload["schemaVersion"]
        if major_version(schema_version) != major_version(self.schema_version):
            raise SchemaVersionMismatchError(schema_version, self.schema_version)

        data = payload["data"]
        programs = _parse_records(data["programs"], Program.from_dict, "programs")
        levels = _parse_records(data["levels"], Level.from_dict, "levels")
        moves = _parse_records(data["moves"], Move.from_dict, "moves")
        logs = _parse_records(data["logs"], WorkoutLog.from_dict, "logs")
        settings = _parse_records([data["settings"]], UserSettings.from_dict, "settings")[0]

        _validate_references(programs, levels, moves, logs)

        if mode is ImportMode.REPLACE:
            _warn_on_gaps(levels, moves)
            summary = await self._replace(programs, levels, moves, logs, settings)
        else:
            summary = await self._merge(programs, levels, moves, logs, settings)

        logger.info("Imported %s payload (%s): %s", payload["exportMode"], mode.value, summary.to_dict())
        return summary

    async def _replace(self, programs, levels, moves, logs, settings) -> ImportSummary:
        async with self.store.transaction() as uow:
            for repo in (uow.programs, uow.levels, uow.moves, uow.logs):
                await repo.clear()
            await uow.settings.clear()

            await uow.programs.bulk_put(programs)
            await uow.levels.bulk_put(levels)
            await uow.moves.bulk_put(moves)
            await uow.logs.bulk_put(logs)
            await uow.settings.put(settings)

        return ImportSummary(
            programs=len(programs),
            levels=len(levels),
            moves=len(moves),
            logs=len(logs),
            settings=1,
        )

    async def _merge(self, programs, levels, moves, logs, settings) -> ImportSummary:
        summary = ImportSummary()
        async with self.store.transaction() as uow:
            await self._merge_into(uow.programs, programs, summary, "programs")
            touched_levels = await self._merge_into(uow.levels, levels, summary, "levels")
            touched_moves = await self._merge_into(uow.moves, moves, summary, "moves")
            await self._merge_into(uow.logs, logs, summary, "logs")

            await _close_gaps(uow.levels, "program_id", {level.program_id for level in touched_levels})
            await _close_gaps(uow.moves, "level_id", {move.level_id for move in touched_moves})

            if is_newer_record(settings, await uow.settings.get()):
                await uow.settings.put(settings)
                summary.settings = 1
            else:
                summary.skipped["settings"] = 1

        return summary

    async def _merge_into(self, repo: Repository, records: list, summary: ImportSummary, name: str) -> list:
        """Write each incoming record that wins against the stored one.

        Sets the summary count for name. Returns the written records together
        with the stored versions they replaced, so every sibling group that
        changed can be found.
        """
        touched = []
        written = 0
        for record in records:
            existing = await repo.get(record.id)
            if is_newer_record(record, existing):
                await repo.put(record)
                written += 1
                touched.append(record)
                if existing is not None:
                    touched.append(existing)

        setattr(summary, name, written)
        if written < len(records):
            summary.skipped[name] = len(records) - written
        return touched

    def _envelope(self, mode: ExportMode, **data) -> ExportEnvelope:
        return ExportEnvelope(
            version=EXPORT_VERSION,
            schema_version=self.schema_version,
            export_mode=mode,
            export_date=now_iso(),
            **data,
        )
