"""
Application session: one explicit object owning the streak tracker and the
notification inbox, replacing app-wide ambient state. Whatever needs them
receives the session (or one of its parts) by reference.
"""
from __future__ import annotations

from typing import Optional

from app.core.config import settings
from app.core.logging import get_logger, setup_logging
from app.db.base import SessionLocal, init_db
from app.services.calendar import Calendar
from app.services.inbox import NotificationInbox
from app.services.kv_store import KeyValueStore, SqlKeyValueStore
from app.services.streak import StreakTracker

logger = get_logger(__name__)


class LifeOSSession:

    def __init__(self, store: KeyValueStore, calendar: Optional[Calendar] = None):
        self.store = store
        self.calendar = calendar or Calendar()
        self.streak = StreakTracker(store, self.calendar)
        self.inbox = NotificationInbox(store, self.calendar)

    @classmethod
    def from_settings(cls, create_tables: bool = True) -> "LifeOSSession":
        """SQL-backed session using DATABASE_URL and REFERENCE_TIMEZONE."""
        setup_logging(settings.LOG_LEVEL, json=settings.LOG_JSON)
        if create_tables:
            init_db()
        return cls(
            store=SqlKeyValueStore(SessionLocal),
            calendar=Calendar(settings.reference_zone),
        )

    async def load(self) -> None:
        """Run once at session start."""
        await self.streak.load()
        await self.inbox.load()
        logger.info(
            "session_loaded",
            today=str(self.calendar.today()),
            zone=str(self.calendar.zone),
            streak_state=self.streak.state.value,
            current_streak=self.streak.data.current_streak,
        )
