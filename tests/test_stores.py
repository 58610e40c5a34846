"""Tests for the facility store backends and their factory."""

import json
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from poolfinder.availability.closures import is_closed
from poolfinder.availability.engine import is_open
from poolfinder.config import Settings
from poolfinder.database.connection import DatabaseManager
from poolfinder.models.base import Backend, LegacyClosure, Occurrence, VersionSnapshot
from poolfinder.services.gateway import PersistenceGateway
from poolfinder.stores.factory import StoreFactory, StoreType
from poolfinder.stores.local import LocalFacilityStore
from poolfinder.stores.postgres import PostgresFacilityStore

from conftest import make_record


def snapshot(snapshot_id: str, facility_id: str = "pool-1") -> VersionSnapshot:
    return VersionSnapshot(
        id=snapshot_id,
        facility_id=facility_id,
        data=make_record(facility_id),
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestLocalFacilityStore:
    """JSON document store."""

    @pytest.mark.asyncio
    async def test_write_replaces_whole_record(self, local_store):
        await local_store.write(make_record(name="v1", phone="02-000-0000"))
        await local_store.write(make_record(name="v2"))

        records = await local_store.read_all()
        assert len(records) == 1
        assert records[0].name == "v2"
        assert records[0].phone == ""

    @pytest.mark.asyncio
    async def test_delete(self, local_store):
        await local_store.write(make_record())

        assert await local_store.delete("pool-1") is True
        assert await local_store.delete("pool-1") is False
        assert await local_store.read_all() == []

    @pytest.mark.asyncio
    async def test_persists_to_file(self, tmp_path):
        path = tmp_path / "data" / "facilities.json"
        store = LocalFacilityStore(path)
        await store.write(make_record(closed_days="매주 월요일"))
        await store.append_snapshot(snapshot("s1"))

        reopened = LocalFacilityStore(path)
        records = await reopened.read_all()
        snapshots = await reopened.list_snapshots("pool-1")

        assert records[0].closed_days.text == "매주 월요일"
        assert [item.id for item in snapshots] == ["s1"]
        document = json.loads(path.read_text(encoding="utf-8"))
        assert set(document) == {"facilities", "history"}

    @pytest.mark.asyncio
    async def test_reads_records_written_by_older_clients(self, tmp_path):
        path = tmp_path / "facilities.json"
        weekday_morning = [{"day_class": "평일(월-금)", "start_time": "06:00", "end_time": "09:00"}]
        path.write_text(json.dumps({
            "facilities": [
                {
                    "id": "old",
                    "closed_days": "매주 일요일",
                    "is_public": None,
                    "free_swim_schedule": weekday_morning,
                },
                {
                    "id": "rule-string",
                    "closed_days": '[{"type":"WEEKLY","weekNumber":0,"dayOfWeek":1}]',
                    "free_swim_schedule": weekday_morning,
                },
                {
                    "id": "form-options",
                    "closed_days": "",
                    "holidayOptions": {
                        "regularHolidayEnabled": True,
                        "specificHolidayEnabled": False,
                        "publicHolidayEnabled": True,
                        "temporaryHolidayEnabled": False,
                        "rules": [{"type": "MONTHLY", "weekNumber": 2, "dayOfWeek": 0}],
                    },
                    "free_swim_schedule": weekday_morning,
                },
            ],
        }, ensure_ascii=False), encoding="utf-8")

        records = {record.id: record for record in await LocalFacilityStore(path).read_all()}

        assert records["old"].is_public is True
        assert records["old"].closed_days.kind == "legacy"

        assert records["rule-string"].closed_days.kind == "structured"
        assert not is_open(records["rule-string"], datetime(2024, 1, 8, 7, 0))
        assert is_open(records["rule-string"], datetime(2024, 1, 9, 7, 0))

        policy = records["form-options"].closed_days.policy
        assert policy.public_holidays_enabled is True
        assert policy.rules[0].occurrence == Occurrence.MONTHLY
        assert is_closed(records["form-options"].closed_days, date(2024, 1, 14))
        assert not is_closed(records["form-options"].closed_days, date(2024, 1, 7))

    @pytest.mark.asyncio
    async def test_one_malformed_closure_does_not_hide_the_collection(self, tmp_path):
        path = tmp_path / "facilities.json"
        path.write_text(json.dumps({
            "facilities": [
                {"id": "good", "closed_days": "매주 월요일"},
                {"id": "rule-list", "closed_days": [{"day_of_week": 1}]},
                {"id": "garbled-list", "closed_days": ["closed", 3]},
                {"id": "number", "closed_days": 42},
            ],
        }, ensure_ascii=False), encoding="utf-8")
        gateway = PersistenceGateway(None, LocalFacilityStore(path))

        result = await gateway.read()

        records = {record.id: record for record in result.value}
        assert result.backend == Backend.SECONDARY
        assert set(records) == {"good", "rule-list", "garbled-list", "number"}
        monday = date(2024, 1, 8)
        assert is_closed(records["good"].closed_days, monday)
        assert is_closed(records["rule-list"].closed_days, monday)
        assert isinstance(records["garbled-list"].closed_days, LegacyClosure)
        assert not is_closed(records["garbled-list"].closed_days, monday)
        assert records["number"].closed_days == LegacyClosure(text="42")

    @pytest.mark.asyncio
    async def test_orders_by_creation_time(self, local_store):
        older = make_record("older", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        newer = make_record("newer", created_at=datetime(2024, 2, 1, tzinfo=timezone.utc))
        undated = make_record("undated")

        await local_store.write(newer)
        await local_store.write(undated)
        await local_store.write(older)

        assert [record.id for record in await local_store.read_all()] == ["newer", "older", "undated"]

    @pytest.mark.asyncio
    async def test_unbounded_history(self):
        store = LocalFacilityStore(history_limit=None)
        for index in range(120):
            await store.append_snapshot(snapshot(f"s{index}"))
        assert store.snapshot_count == 120


class TestPostgresFacilityStore:
    """SQL issued against a mocked database manager."""

    @pytest.fixture
    def db(self):
        manager = MagicMock()
        manager.execute_query = AsyncMock(return_value=[])
        manager.execute_command = AsyncMock(return_value="INSERT 0 1")
        manager.close = AsyncMock()
        return manager

    @pytest.mark.asyncio
    async def test_read_all(self, db):
        record = make_record()
        db.execute_query.return_value = [{"data": record.model_dump_json()}]

        records = await PostgresFacilityStore(db).read_all()

        assert records == [record]
        assert "ORDER BY created_at DESC" in db.execute_query.call_args.args[0]

    @pytest.mark.asyncio
    async def test_write_upserts(self, db):
        record = make_record()

        await PostgresFacilityStore(db).write(record)

        query, facility_id, data, is_public, created_at = db.execute_command.call_args.args
        assert "ON CONFLICT (id) DO UPDATE" in query
        assert facility_id == "pool-1"
        assert json.loads(data)["id"] == "pool-1"
        assert is_public is True
        assert created_at is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag,expected", [("DELETE 1", True), ("DELETE 0", False)])
    async def test_delete(self, db, tag, expected):
        db.execute_command.return_value = tag
        assert await PostgresFacilityStore(db).delete("pool-1") is expected

    @pytest.mark.asyncio
    async def test_list_snapshots(self, db):
        created = datetime(2024, 1, 1, tzinfo=timezone.utc)
        db.execute_query.return_value = [{
            "id": "s1",
            "facility_id": "pool-1",
            "data": make_record().model_dump_json(),
            "created_at": created,
        }]

        snapshots = await PostgresFacilityStore(db).list_snapshots("pool-1")

        assert snapshots[0].id == "s1"
        assert snapshots[0].data.id == "pool-1"
        assert db.execute_query.call_args.args[1] == "pool-1"

    @pytest.mark.asyncio
    async def test_health_check(self, db):
        db.health_check = AsyncMock(return_value=False)

        assert await PostgresFacilityStore(db).health_check() is False
        db.health_check.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close(self, db):
        await PostgresFacilityStore(db).close()
        db.close.assert_awaited_once()


class TestDatabaseManager:
    """Connection pool bookkeeping."""

    @pytest.mark.asyncio
    async def test_health_check_before_initialize(self):
        manager = DatabaseManager("postgresql://localhost/poolfinder")

        assert manager.is_initialized is False
        assert await manager.health_check() is False


class TestStoreFactory:
    """Building stores from settings."""

    def test_supported_types(self):
        assert StoreFactory.get_supported_types() == [StoreType.POSTGRES.value, StoreType.LOCAL.value]

    @pytest.mark.asyncio
    async def test_primary_not_configured(self):
        assert await StoreFactory.create_primary(Settings(database_url=None)) is None

    @pytest.mark.asyncio
    async def test_primary_unreachable(self):
        settings = Settings(database_url="postgresql://localhost/poolfinder")
        with patch("poolfinder.stores.factory.DatabaseManager") as manager_cls:
            manager = manager_cls.return_value
            manager.initialize = AsyncMock(side_effect=OSError("connection refused"))
            manager.close = AsyncMock()

            assert await StoreFactory.create_primary(settings) is None
            manager.close.assert_awaited_once()

    def test_secondary(self):
        store = StoreFactory.create_secondary(Settings(local_store_path=None, history_limit=5))
        assert isinstance(store, LocalFacilityStore)
        assert store.history_limit == 5
        assert StoreFactory.create_secondary(Settings(fallback_enabled=False)) is None

    def test_validate_environment(self):
        valid, problems = StoreFactory.validate_environment(Settings(database_url=None))
        assert valid
        assert problems == ["DATABASE_URL"]

        valid, problems = StoreFactory.validate_environment(
            Settings(database_url=None, fallback_enabled=False)
        )
        assert not valid
        assert "no storage backend enabled" in problems
