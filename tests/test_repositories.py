"""Tests for the repository layer and transaction boundary."""

import sqlite3

import pytest

from training_tracker.errors import NotFoundError, TransactionError
from training_tracker.models.common import now_iso
from training_tracker.models.settings import SETTINGS_ID, UnitPreference, UserSettings
from training_tracker.models.sync import SyncConflict, SyncOperation, SyncQueueItem

from conftest import make_level, make_log, make_move, make_program


class TestInitDb:
    """Tests for schema creation."""

    async def test_tables_created(self, store, temp_db_path):
        conn = sqlite3.connect(temp_db_path)
        cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in cursor.fetchall()}
        conn.close()

        assert {"programs", "levels", "moves", "logs", "settings", "sync_queue", "conflicts"} <= tables

    async def test_default_settings_seeded(self, store):
        async with store.transaction(write=False) as uow:
            settings = await uow.settings.get()

        assert settings is not None
        assert settings.id == SETTINGS_ID


class TestRepository:
    """Tests for generic CRUD."""

    async def test_crud(self, store):
        """Test put, get, replace and delete."""
        program = make_program()

        async with store.transaction() as uow:
            await uow.programs.put(program)

        async with store.transaction() as uow:
            saved = await uow.programs.get(program.id)
            assert saved == program

            program.name = "Strength Builder Updated"
            await uow.programs.put(program)

        async with store.transaction() as uow:
            assert (await uow.programs.get(program.id)).name == "Strength Builder Updated"
            assert await uow.programs.count() == 1

            await uow.programs.delete(program.id)
            assert await uow.programs.get(program.id) is None

    async def test_get_missing(self, store):
        async with store.transaction(write=False) as uow:
            assert await uow.levels.get("nope") is None

    async def test_list_keeps_insertion_order_after_update(self, store):
        """Test upserts do not move a record to the end."""
        first = make_program("p1", "First")
        second = make_program("p2", "Second")

        async with store.transaction() as uow:
            await uow.programs.bulk_put([first, second])
            first.name = "First (edited)"
            await uow.programs.put(first)
            listed = await uow.programs.list_all()

        assert [p.id for p in listed] == ["p1", "p2"]

    async def test_find_and_delete_by_column(self, store):
        """Test scans by indexed column."""
        async with store.transaction() as uow:
            await uow.levels.bulk_put([
                make_level("l1", "p1", 1),
                make_level("l2", "p1", 2),
                make_level("l3", "p2", 1),
            ])

            assert {lv.id for lv in await uow.levels.find_by("program_id", "p1")} == {"l1", "l2"}
            assert {lv.id for lv in await uow.levels.find_in("id", ["l1", "l3"])} == {"l1", "l3"}
            assert await uow.levels.find_in("program_id", []) == []

            assert await uow.levels.delete_by("program_id", "p1") == 2
            assert await uow.levels.delete_in("id", []) == 0
            assert [lv.id for lv in await uow.levels.list_all()] == ["l3"]

    async def test_unknown_column_rejected(self, store):
        async with store.transaction(write=False) as uow:
            with pytest.raises(ValueError):
                await uow.moves.find_by("name; DROP TABLE moves", "x")

    async def test_clear(self, store):
        async with store.transaction() as uow:
            await uow.moves.bulk_put([make_move("m1"), make_move("m2", order=2)])
            await uow.moves.clear()
            assert await uow.moves.count() == 0


class TestSettingsStore:
    """Tests for the single-row settings store."""

    async def test_put_always_uses_fixed_id(self, store):
        settings = UserSettings(id="something-else", updated_at=now_iso(), dark_mode=False)

        async with store.transaction() as uow:
            await uow.settings.put(settings)

        async with store.transaction(write=False) as uow:
            stored = await uow.settings.get()

        assert stored.id == SETTINGS_ID
        assert stored.dark_mode is False

    async def test_put_replaces(self, store):
        async with store.transaction() as uow:
            await uow.settings.put(UserSettings(updated_at=now_iso(), unit_preference=UnitPreference.METRIC))
            await uow.settings.put(UserSettings(updated_at=now_iso(), unit_preference=UnitPreference.IMPERIAL))
            stored = await uow.settings.get()

        assert stored.unit_preference == UnitPreference.IMPERIAL

    async def test_clear(self, store):
        async with store.transaction() as uow:
            await uow.settings.clear()
            assert await uow.settings.get() is None


class TestSyncExtensionTables:
    """Tests for the sync queue and conflict log."""

    async def test_queue_and_conflicts(self, store):
        item = SyncQueueItem(
            id="q1",
            entity="program",
            entity_id="p1",
            operation=SyncOperation.CREATE,
            created_at=now_iso(),
        )
        conflict = SyncConflict(
            id="c1",
            entity="level",
            entity_id="l1",
            local_updated_at="2024-01-01T00:00:00.000Z",
            remote_updated_at="2024-01-02T00:00:00.000Z",
            created_at=now_iso(),
        )

        async with store.transaction() as uow:
            await uow.sync_queue.put(item)
            await uow.conflicts.put(conflict)

        async with store.transaction(write=False) as uow:
            assert await uow.sync_queue.find_by("entity_id", "p1") == [item]
            assert await uow.conflicts.find_by("entity", "level") == [conflict]


class TestTransaction:
    """Tests for the unit-of-work boundary."""

    async def test_rollback_on_domain_error(self, store):
        """Test a raised exception discards every write in the block."""
        with pytest.raises(NotFoundError):
            async with store.transaction() as uow:
                await uow.programs.put(make_program())
                await uow.levels.put(make_level())
                raise NotFoundError("Program", "x")

        async with store.transaction(write=False) as uow:
            assert await uow.programs.count() == 0
            assert await uow.levels.count() == 0

    async def test_database_error_becomes_transaction_error(self, store):
        """Test a constraint failure rolls back and surfaces as TransactionError."""
        broken = make_log(program_id=None)

        with pytest.raises(TransactionError):
            async with store.transaction() as uow:
                await uow.programs.put(make_program())
                await uow.logs.put(broken)

        async with store.transaction(write=False) as uow:
            assert await uow.programs.count() == 0
            assert await uow.logs.count() == 0
