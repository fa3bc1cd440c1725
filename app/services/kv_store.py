"""
Key/value persistence boundary.

The core only ever needs "get string by key" and "set string by key".
Both are awaitable so callers can treat storage as non-blocking.

SqlKeyValueStore runs the blocking SQLAlchemy work in a worker thread and
opens one short-lived session per call. Driver failures are re-raised as
PersistenceReadError / PersistenceWriteError; the owning service decides
whether to degrade.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import PersistenceReadError, PersistenceWriteError
from app.models.kv_entry import KeyValueEntry


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SqlKeyValueStore:
    """`key_value_store` table accessed through a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    # -- blocking implementations -------------------------------------------

    def _get(self, key: str) -> Optional[str]:
        with self._session_factory() as db:
            entry = db.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    def _set(self, key: str, value: str) -> None:
        with self._session_factory() as db:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
                entry.updated_at = datetime.now(tz=timezone.utc)
            db.commit()

    def _delete(self, key: str) -> None:
        with self._session_factory() as db:
            entry = db.get(KeyValueEntry, key)
            if entry is not None:
                db.delete(entry)
                db.commit()

    # -- awaitable API -------------------------------------------------------

    async def get(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._get, key)
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceReadError(key, str(exc)) from exc

    async def set(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._set, key, value)
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceWriteError(key, str(exc)) from exc

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._delete, key)
        except (SQLAlchemyError, OSError) as exc:
            raise PersistenceWriteError(key, str(exc)) from exc
