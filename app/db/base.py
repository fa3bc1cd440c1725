"""
Database wiring: declarative Base, engine and session factory.

SQLite needs `check_same_thread=False` because the key/value store runs
its blocking session work in a worker thread.
"""
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.core.config import settings


class Base(DeclarativeBase):
    pass


def make_engine(url: str) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, future=True)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


engine = make_engine(settings.DATABASE_URL)
SessionLocal = make_session_factory(engine)


def init_db(bind: Engine | None = None) -> None:
    """Create missing tables. Alembic migrations do the same in deployments."""
    import app.models  # noqa: F401  (register mappers)

    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
