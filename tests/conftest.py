"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from training_tracker.db import Store, init_db
from training_tracker.models.common import now_iso
from training_tracker.models.log import WorkoutLog
from training_tracker.models.program import Difficulty, Level, Move, MoveType, Program
from training_tracker.services import (
    ExportImportService,
    ProgramAuthoringService,
    SettingsService,
    WorkoutLogService,
)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def store(temp_db_path):
    """An initialized store backed by a temporary database."""
    await init_db(temp_db_path)
    return Store(temp_db_path)


@pytest.fixture
def authoring(store):
    return ProgramAuthoringService(store)


@pytest.fixture
def transfer(store):
    return ExportImportService(store)


@pytest.fixture
def log_service(store):
    return WorkoutLogService(store)


@pytest.fixture
def settings_service(store):
    return SettingsService(store)


def make_program(id="program-1", name="Strength Builder", updated_at=None) -> Program:
    timestamp = now_iso()
    return Program(
        id=id,
        name=name,
        description="Build strength",
        goal="Gain strength",
        duration="8 weeks",
        difficulty=Difficulty.BEGINNER,
        tags=["strength"],
        created_at=timestamp,
        updated_at=updated_at or timestamp,
    )


def make_level(id="level-1", program_id="program-1", order=1, name="Week 1") -> Level:
    timestamp = now_iso()
    return Level(
        id=id,
        program_id=program_id,
        name=name,
        order=order,
        description="Intro week",
        duration="1 week",
        rest_days=2,
        created_at=timestamp,
        updated_at=timestamp,
    )


def make_move(id="move-1", level_id="level-1", order=1, name="Squat") -> Move:
    timestamp = now_iso()
    return Move(
        id=id,
        level_id=level_id,
        name=name,
        order=order,
        description="Barbell squat",
        type=MoveType.STRENGTH,
        target_sets=5,
        target_reps="5",
        equipment=["barbell"],
        created_at=timestamp,
        updated_at=timestamp,
    )


def make_log(id="log-1", program_id="program-1", level_id="level-1", move_id=None) -> WorkoutLog:
    timestamp = now_iso()
    return WorkoutLog(
        id=id,
        program_id=program_id,
        level_id=level_id,
        move_id=move_id,
        date="2024-01-15T08:00:00.000Z",
        perceived_effort=7,
        completed=True,
        created_at=timestamp,
        updated_at=timestamp,
    )
