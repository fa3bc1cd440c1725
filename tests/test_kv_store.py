"""
Tests for the key/value persistence boundary (SQL-backed and in-memory).
"""
from __future__ import annotations

import pytest

from app.core.errors import PersistenceReadError, PersistenceWriteError
from app.db.base import make_engine, make_session_factory
from app.models.kv_entry import KeyValueEntry
from app.services.kv_store import MemoryKeyValueStore, SqlKeyValueStore


class TestSqlKeyValueStore:
    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, sql_store):
        assert await sql_store.get("@nothing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, sql_store):
        await sql_store.set("@life_os_streak_data", '{"currentStreak": 1}')
        assert await sql_store.get("@life_os_streak_data") == '{"currentStreak": 1}'

    @pytest.mark.asyncio
    async def test_set_overwrites_single_row(self, sql_store, session_factory):
        await sql_store.set("k", "one")
        await sql_store.set("k", "two")
        assert await sql_store.get("k") == "two"
        with session_factory() as db:
            assert db.query(KeyValueEntry).filter(KeyValueEntry.key == "k").count() == 1

    @pytest.mark.asyncio
    async def test_delete(self, sql_store):
        await sql_store.set("k", "v")
        await sql_store.delete("k")
        assert await sql_store.get("k") is None
        # Deleting a missing key is a no-op.
        await sql_store.delete("k")

    @pytest.mark.asyncio
    async def test_read_failure_wrapped(self, tmp_path):
        # Fresh database without the table → driver error on every call.
        factory = make_session_factory(make_engine(f"sqlite:///{tmp_path / 'empty.db'}"))
        store = SqlKeyValueStore(factory)
        with pytest.raises(PersistenceReadError) as exc_info:
            await store.get("k")
        assert exc_info.value.key == "k"
        assert exc_info.value.code == "PERSISTENCE_READ_ERROR"

    @pytest.mark.asyncio
    async def test_write_failure_wrapped(self, tmp_path):
        factory = make_session_factory(make_engine(f"sqlite:///{tmp_path / 'empty.db'}"))
        store = SqlKeyValueStore(factory)
        with pytest.raises(PersistenceWriteError) as exc_info:
            await store.set("k", "v")
        assert exc_info.value.code == "PERSISTENCE_WRITE_ERROR"


class TestMemoryKeyValueStore:
    @pytest.mark.asyncio
    async def test_roundtrip_and_delete(self):
        store = MemoryKeyValueStore({"a": "1"})
        assert await store.get("a") == "1"
        await store.set("b", "2")
        assert store.data == {"a": "1", "b": "2"}
        await store.delete("a")
        await store.delete("missing")
        assert await store.get("a") is None
