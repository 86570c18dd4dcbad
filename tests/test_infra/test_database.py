"""Tests for the Database handle: transactions, retries and SQLite setup."""

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError, IntegrityError

from plm.infra.database import Database, is_retryable
from plm.models import GarmentMaterial, Material


class _DriverError(Exception):
    def __init__(self, sqlstate: str | None) -> None:
        super().__init__(f"driver error {sqlstate}")
        self.sqlstate = sqlstate


def _dbapi_error(sqlstate: str | None) -> DBAPIError:
    return DBAPIError("UPDATE garments SET name = ?", None, _DriverError(sqlstate))


class TestIsRetryable:
    @pytest.mark.parametrize("sqlstate", ["40001", "40P01"])
    def test_serialization_and_deadlock_retryable(self, sqlstate):
        assert is_retryable(_dbapi_error(sqlstate))

    def test_other_sqlstate_not_retryable(self):
        assert not is_retryable(_dbapi_error("23505"))
        assert not is_retryable(_dbapi_error(None))

    def test_non_driver_error_not_retryable(self):
        assert not is_retryable(ValueError("nope"))


class TestTransaction:
    """Commit on success, rollback on any exception."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self, db: Database):
        async with db.transaction() as session:
            session.add(Material(name="Cotton"))

        async with db.transaction() as session:
            names = (await session.execute(select(Material.name))).scalars().all()
        assert names == ["Cotton"]

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, db: Database):
        with pytest.raises(RuntimeError):
            async with db.transaction() as session:
                session.add(Material(name="Linen"))
                await session.flush()
                raise RuntimeError("abort")

        async with db.transaction() as session:
            count = len((await session.execute(select(Material))).scalars().all())
        assert count == 0

    @pytest.mark.asyncio
    async def test_foreign_keys_enforced(self, db: Database):
        with pytest.raises(IntegrityError):
            async with db.transaction() as session:
                session.add(GarmentMaterial(garment_id=999, material_id=999, percentage=10))
                await session.flush()


class TestRun:
    @pytest.mark.asyncio
    async def test_retries_serialization_failure(self, db: Database):
        attempts = []

        async def work(session):
            attempts.append(1)
            if len(attempts) == 1:
                raise _dbapi_error("40001")
            return (await session.execute(text("SELECT 1"))).scalar()

        assert await db.run(work) == 1
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_configured_attempts(self, db: Database):
        attempts = []

        async def work(session):
            attempts.append(1)
            raise _dbapi_error("40P01")

        with pytest.raises(DBAPIError):
            await db.run(work)
        assert len(attempts) == db.serialization_retries

    @pytest.mark.asyncio
    async def test_non_retryable_error_raised_immediately(self, db: Database):
        attempts = []

        async def work(session):
            attempts.append(1)
            raise _dbapi_error("23505")

        with pytest.raises(DBAPIError):
            await db.run(work)
        assert len(attempts) == 1

    @pytest.mark.asyncio
    async def test_read_only_does_not_wait_for_open_writer(self, db: Database):
        async def read_names(session):
            return (await session.execute(select(Material.name))).scalars().all()

        async with db.transaction() as writer:
            writer.add(Material(name="Cotton"))
            await writer.flush()

            names = await asyncio.wait_for(db.run(read_names, read_only=True), timeout=2)
            assert names == []

        assert await db.run(read_names, read_only=True) == ["Cotton"]


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_verify_connection(self, db: Database):
        assert await db.verify_connection() is True

    def test_sqlite_detected(self, db: Database):
        assert db.is_sqlite is True

    @pytest.mark.asyncio
    async def test_audit_logs_modifying_statements(self, tmp_path):
        database = Database(f"sqlite+aiosqlite:///{tmp_path / 'audit.db'}", audit=True)
        await database.create_all()
        try:
            with patch("plm.infra.audit.logger", MagicMock()) as audit_logger:
                async with database.transaction() as session:
                    session.add(Material(name="Wool"))
                    await session.flush()
                    await session.execute(select(Material))

            events = [c for c in audit_logger.info.call_args_list if c.args[0] == "db_audit"]
            assert len(events) == 1
            assert events[0].kwargs["query"].startswith("INSERT INTO materials")
            assert "Wool" in events[0].kwargs["values"]
        finally:
            await database.dispose()
