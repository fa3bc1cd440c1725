"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no external database is required.
"Today" is pinned by injecting a fixed clock into Calendar; nothing patches
datetime globally.
"""
import pytest

from app.db.base import Base, make_engine, make_session_factory
from app.models.kv_entry import KeyValueEntry
from app.services.calendar import Calendar
from app.services.kv_store import MemoryKeyValueStore, SqlKeyValueStore
from tests.helpers import BERLIN, MovableClock, berlin

SQLITE_URL = "sqlite:///./test_lifeos.db"

engine = make_engine(SQLITE_URL)
TestingSessionLocal = make_session_factory(engine)


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session_factory():
    yield TestingSessionLocal
    with TestingSessionLocal() as db:
        db.query(KeyValueEntry).delete()
        db.commit()


@pytest.fixture()
def sql_store(session_factory):
    return SqlKeyValueStore(session_factory)


@pytest.fixture()
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture()
def clock():
    """Starts at 2026-06-01 10:00 Berlin; tests move `clock.now`."""
    return MovableClock(berlin(2026, 6, 1, 10, 0))


@pytest.fixture()
def calendar(clock):
    return Calendar(BERLIN, clock=clock)
