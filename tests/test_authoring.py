"""Tests for the program authoring service."""

import pytest

from training_tracker.errors import NotFoundError, ReferentialIntegrityError, ValidationError
from training_tracker.models.program import Difficulty, MoveType
from training_tracker.services import LevelInput, LogInput, MoveInput, ProgramInput
from training_tracker.services.ordering import is_contiguous


async def snapshot(store) -> dict:
    """Every collection's records, for before/after comparisons."""
    async with store.transaction(write=False) as uow:
        return {
            "programs": await uow.programs.list_all(),
            "levels": await uow.levels.list_all(),
            "moves": await uow.moves.list_all(),
            "logs": await uow.logs.list_all(),
        }


@pytest.fixture
async def program(authoring):
    return await authoring.create_program(ProgramInput(name="Strength Builder"))


class TestPrograms:
    """Tests for program CRUD."""

    async def test_create_program_defaults(self, authoring):
        program = await authoring.create_program(ProgramInput(name="  Strength Builder  "))

        assert program.name == "Strength Builder"
        assert program.difficulty == Difficulty.BEGINNER
        assert program.tags == []
        assert program.created_at == program.updated_at

    async def test_create_program_requires_name(self, authoring):
        with pytest.raises(ValidationError):
            await authoring.create_program(ProgramInput(name="   "))
        with pytest.raises(ValidationError):
            await authoring.create_program(ProgramInput())

    async def test_create_program_bad_difficulty(self, authoring):
        with pytest.raises(ValidationError):
            await authoring.create_program(ProgramInput(name="X", difficulty="Legendary"))

    async def test_update_program_merges_fields(self, authoring, program):
        updated = await authoring.update_program(
            program.id, ProgramInput(goal="Get strong", difficulty="Advanced")
        )

        assert updated.name == "Strength Builder"
        assert updated.goal == "Get strong"
        assert updated.difficulty == Difficulty.ADVANCED
        assert updated.updated_at >= program.updated_at
        assert (await authoring.get_program(program.id)) == updated

    async def test_update_missing_program(self, authoring):
        with pytest.raises(NotFoundError):
            await authoring.update_program("missing", ProgramInput(name="X"))

    async def test_list_programs_by_creation(self, authoring):
        first = await authoring.create_program(ProgramInput(name="First"))
        second = await authoring.create_program(ProgramInput(name="Second"))
        await authoring.update_program(first.id, ProgramInput(name="First, edited"))

        assert [p.id for p in await authoring.list_programs()] == [first.id, second.id]


class TestLevelOrdering:
    """Tests for level ordering."""

    async def test_reorder_scenario(self, authoring, program):
        """Test moving Week 2 in front of Week 1."""
        week1 = await authoring.create_level(program.id, LevelInput(name="Week 1"))
        week2 = await authoring.create_level(program.id, LevelInput(name="Week 2"))
        assert week1.order == 1
        assert week2.order == 2

        moved = await authoring.update_level(week2.id, LevelInput(order=1))
        assert moved.order == 1

        levels = await authoring.list_levels(program.id)
        assert [(lv.name, lv.order) for lv in levels] == [("Week 2", 1), ("Week 1", 2)]

    async def test_create_level_at_position(self, authoring, program):
        for name in ("A", "B", "C"):
            await authoring.create_level(program.id, LevelInput(name=name))

        inserted = await authoring.create_level(program.id, LevelInput(name="Inserted", order=2))

        assert inserted.order == 2
        levels = await authoring.list_levels(program.id)
        assert [lv.name for lv in levels] == ["A", "Inserted", "B", "C"]
        assert [lv.order for lv in levels] == [1, 2, 3, 4]

    async def test_create_level_order_clamped(self, authoring, program):
        await authoring.create_level(program.id, LevelInput(name="A"))
        high = await authoring.create_level(program.id, LevelInput(name="B", order=40))
        low = await authoring.create_level(program.id, LevelInput(name="C", order=-3))

        assert high.order == 2
        assert low.order == 1
        assert [lv.name for lv in await authoring.list_levels(program.id)] == ["C", "A", "B"]

    async def test_create_level_requires_program(self, authoring, store):
        before = await snapshot(store)

        with pytest.raises(NotFoundError) as excinfo:
            await authoring.create_level("missing", LevelInput(name="Week 1"))

        assert excinfo.value.entity == "Program"
        assert await snapshot(store) == before

    async def test_update_level_fields_keep_position(self, authoring, program):
        a = await authoring.create_level(program.id, LevelInput(name="A"))
        await authoring.create_level(program.id, LevelInput(name="B"))

        updated = await authoring.update_level(a.id, LevelInput(notes="  easy week ", rest_days=3))

        assert updated.order == 1
        assert updated.notes == "easy week"
        assert updated.rest_days == 3

    async def test_delete_level_closes_gap(self, authoring, program):
        levels = [
            await authoring.create_level(program.id, LevelInput(name=name))
            for name in ("A", "B", "C")
        ]

        await authoring.delete_level(levels[1].id)

        remaining = await authoring.list_levels(program.id)
        assert [(lv.name, lv.order) for lv in remaining] == [("A", 1), ("C", 2)]

    async def test_duplicate_level_inserted_after_source(self, authoring, program):
        a = await authoring.create_level(program.id, LevelInput(name="A"))
        await authoring.create_level(program.id, LevelInput(name="B"))
        await authoring.create_move(a.id, MoveInput(name="Squat"))
        await authoring.create_move(a.id, MoveInput(name="Bench"))

        tree = await authoring.duplicate_level(a.id)

        assert tree.level.name == "A (Copy)"
        assert tree.level.order == 2
        assert [lv.name for lv in await authoring.list_levels(program.id)] == ["A", "A (Copy)", "B"]
        copied = await authoring.list_moves(tree.level.id)
        assert [(m.name, m.order) for m in copied] == [("Squat", 1), ("Bench", 2)]
        assert {m.id for m in copied}.isdisjoint({m.id for m in await authoring.list_moves(a.id)})

    async def test_contiguity_after_mixed_operations(self, authoring, program):
        """Test orders stay 1..N through create/update/delete/duplicate."""
        ids = []
        for i in range(5):
            level = await authoring.create_level(program.id, LevelInput(name=f"L{i}", order=1 + (i % 3)))
            ids.append(level.id)
            assert is_contiguous(await authoring.list_levels(program.id))

        await authoring.update_level(ids[0], LevelInput(order=5))
        assert is_contiguous(await authoring.list_levels(program.id))
        await authoring.delete_level(ids[2])
        assert is_contiguous(await authoring.list_levels(program.id))
        await authoring.duplicate_level(ids[3])
        assert is_contiguous(await authoring.list_levels(program.id))
        await authoring.update_level(ids[4], LevelInput(order=0))
        levels = await authoring.list_levels(program.id)
        assert is_contiguous(levels)
        assert levels[0].id == ids[4]


class TestMoves:
    """Tests for move operations."""

    @pytest.fixture
    async def level(self, authoring, program):
        return await authoring.create_level(program.id, LevelInput(name="Week 1"))

    async def test_create_move(self, authoring, level):
        move = await authoring.create_move(level.id, MoveInput(
            name="Squat",
            type="Strength",
            target_sets=5,
            target_reps="5",
            equipment=["barbell"],
        ))

        assert move.order == 1
        assert move.type == MoveType.STRENGTH
        assert move.equipment == ["barbell"]

    async def test_create_move_requires_level(self, authoring):
        with pytest.raises(NotFoundError) as excinfo:
            await authoring.create_move("missing", MoveInput(name="Squat"))
        assert excinfo.value.entity == "Level"

    async def test_create_move_bad_type(self, authoring, level):
        with pytest.raises(ValidationError):
            await authoring.create_move(level.id, MoveInput(name="Squat", type="Juggling"))

    async def test_move_reorder_and_delete(self, authoring, level):
        moves = [
            await authoring.create_move(level.id, MoveInput(name=name))
            for name in ("Squat", "Bench", "Row")
        ]

        await authoring.update_move(moves[2].id, MoveInput(order=1))
        assert [m.name for m in await authoring.list_moves(level.id)] == ["Row", "Squat", "Bench"]

        await authoring.delete_move(moves[0].id)
        remaining = await authoring.list_moves(level.id)
        assert [(m.name, m.order) for m in remaining] == [("Row", 1), ("Bench", 2)]

    async def test_duplicate_move(self, authoring, level):
        squat = await authoring.create_move(level.id, MoveInput(name="Squat"))
        await authoring.create_move(level.id, MoveInput(name="Bench"))

        copy = await authoring.duplicate_move(squat.id)

        assert copy.name == "Squat (Copy)"
        assert copy.order == 2
        assert [m.name for m in await authoring.list_moves(level.id)] == ["Squat", "Squat (Copy)", "Bench"]

    async def test_delete_move_detaches_logs(self, authoring, log_service, program, level):
        squat = await authoring.create_move(level.id, MoveInput(name="Squat"))
        log = await log_service.create_log(
            LogInput(program_id=program.id, level_id=level.id, move_id=squat.id)
        )

        await authoring.delete_move(squat.id)

        logs = await log_service.list_logs(program_id=program.id)
        assert [entry.id for entry in logs] == [log.id]
        assert logs[0].move_id is None

    async def test_orphaned_level_reported(self, authoring, store, level):
        """Test a level whose program vanished is an integrity violation."""
        async with store.transaction() as uow:
            await uow.programs.delete(level.program_id)

        with pytest.raises(ReferentialIntegrityError):
            await authoring.create_move(level.id, MoveInput(name="Squat"))


class TestCascadeAndDuplicate:
    """Tests for cascading deletes and deep copies."""

    @pytest.fixture
    async def tree(self, authoring, log_service, program):
        week1 = await authoring.create_level(program.id, LevelInput(name="Week 1"))
        week2 = await authoring.create_level(program.id, LevelInput(name="Week 2"))
        squat = await authoring.create_move(week1.id, MoveInput(name="Squat"))
        await authoring.create_move(week1.id, MoveInput(name="Bench"))
        await authoring.create_move(week2.id, MoveInput(name="Deadlift"))
        await log_service.create_log(LogInput(program_id=program.id, level_id=week1.id, move_id=squat.id))
        await log_service.create_log(LogInput(program_id=program.id, level_id=week2.id))
        return program, week1, week2

    async def test_delete_program_cascades(self, authoring, store, tree):
        program, _, _ = tree
        other = await authoring.create_program(ProgramInput(name="Other"))
        other_level = await authoring.create_level(other.id, LevelInput(name="Keep"))

        await authoring.delete_program(program.id)

        state = await snapshot(store)
        assert [p.id for p in state["programs"]] == [other.id]
        assert [lv.id for lv in state["levels"]] == [other_level.id]
        assert state["moves"] == []
        assert state["logs"] == []

    async def test_delete_missing_program_writes_nothing(self, authoring, store, tree):
        before = await snapshot(store)

        with pytest.raises(NotFoundError):
            await authoring.delete_program("missing")

        assert await snapshot(store) == before

    async def test_delete_level_cascades(self, authoring, log_service, store, tree):
        program, week1, week2 = tree

        await authoring.delete_level(week1.id)

        state = await snapshot(store)
        assert [m.name for m in state["moves"]] == ["Deadlift"]
        assert all(log.level_id != week1.id for log in state["logs"])
        assert len(state["logs"]) == 1
        assert (await authoring.list_levels(program.id))[0].id == week2.id
        assert (await authoring.list_levels(program.id))[0].order == 1

    async def test_duplicate_program(self, authoring, tree):
        program, _, _ = tree

        copy = await authoring.duplicate_program(program.id)

        assert copy.program.name == "Strength Builder (Copy)"
        assert copy.program.id != program.id
        assert [(lv.name, lv.order) for lv in copy.levels] == [("Week 1", 1), ("Week 2", 2)]
        assert all(lv.program_id == copy.program.id for lv in copy.levels)

        new_level_ids = {lv.id for lv in copy.levels}
        assert all(m.level_id in new_level_ids for m in copy.moves)
        assert sorted(m.name for m in copy.moves) == ["Bench", "Deadlift", "Squat"]

        stored = await authoring.get_program_tree(copy.program.id)
        week1_copy = stored.levels[0]
        assert [m.name for m in stored.moves if m.level_id == week1_copy.id] == ["Squat", "Bench"]

        # The source tree is untouched
        original = await authoring.get_program_tree(program.id)
        assert len(original.levels) == 2
        assert len(original.moves) == 3

    async def test_duplicate_missing_program(self, authoring):
        with pytest.raises(NotFoundError):
            await authoring.duplicate_program("missing")

    async def test_get_program_tree(self, authoring, tree):
        program, week1, _ = tree

        result = await authoring.get_program_tree(program.id)

        assert result.program.id == program.id
        assert [lv.name for lv in result.levels] == ["Week 1", "Week 2"]
        assert len(result.moves) == 3
