"""
Streak State Machine — daily check-in streak for the single local user.

States
------
  uninitialized → loaded | broken          (load)
  any loaded state → continuing             (new check-in today)
  any loaded state → idle                   (repeat check-in, same day)

Load
----
Reads the persisted StreakData once. If the last check-in is neither today
nor yesterday the streak is broken: current_streak drops to 0 in memory,
while longest_streak, streak_dates and total_check_ins are kept.

Check-in
--------
  same day as last check-in     → no-op, returns False
  first ever, or yesterday      → current_streak + 1
  gap of 2+ days                → current_streak = 1
then longest_streak = max(longest, current), today is appended to
streak_dates, total_check_ins + 1, and the full record is persisted.

Persistence failures are logged and never raised: a failed load degrades to
an empty record, a failed save keeps the in-memory record for this session.
"""
from __future__ import annotations

import asyncio
import enum
from datetime import date
from typing import Optional

from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import PersistenceReadError, PersistenceWriteError
from app.core.logging import get_logger
from app.schemas.streak import StreakData
from app.services.calendar import Calendar, are_consecutive_days
from app.services.kv_store import KeyValueStore

logger = get_logger(__name__)


class StreakState(str, enum.Enum):
    uninitialized = "uninitialized"
    loaded = "loaded"
    broken = "broken"
    continuing = "continuing"
    idle = "idle"


class StreakTracker:
    """Owns the StreakData record; the only writer of its storage key."""

    def __init__(
        self,
        store: KeyValueStore,
        calendar: Optional[Calendar] = None,
        storage_key: Optional[str] = None,
    ):
        self.store = store
        self.calendar = calendar or Calendar()
        self.storage_key = storage_key or settings.STREAK_STORAGE_KEY
        self.data = StreakData()
        self.state = StreakState.uninitialized
        # Serialises load and check-in so one day is only recorded once.
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self.state is not StreakState.uninitialized

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> StreakData:
        async with self._lock:
            return await self._load()

    async def _load(self) -> StreakData:
        data = StreakData()
        try:
            raw = await self.store.get(self.storage_key)
            if raw:
                data = StreakData.from_json(raw)
        except PersistenceReadError as exc:
            logger.error("streak_load_failed", key=self.storage_key, error=exc.message)
        except ValidationError as exc:
            logger.error(
                "streak_record_invalid",
                key=self.storage_key,
                errors=exc.error_count(),
            )

        self.data = data
        self.state = StreakState.loaded
        self._break_if_stale(self.calendar.today())
        return self.data

    async def save(self) -> bool:
        """Persist the current record. Returns False if the write failed."""
        try:
            await self.store.set(self.storage_key, self.data.to_json())
        except PersistenceWriteError as exc:
            logger.error("streak_save_failed", key=self.storage_key, error=exc.message)
            return False
        return True

    def _break_if_stale(self, today: date) -> None:
        last = self.data.last_check_in_date
        if last is None or last == today or are_consecutive_days(last, today):
            return
        logger.info(
            "streak_broken",
            last_check_in=str(last),
            today=str(today),
            lost_streak=self.data.current_streak,
        )
        self.data.current_streak = 0
        self.state = StreakState.broken

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def has_checked_in(self, day: date) -> bool:
        return self.data.last_check_in_date == day or day in self.data.streak_dates

    async def record_check_in(self) -> bool:
        """
        Record today's check-in. Returns True if a check-in was recorded,
        False for a repeat on the same calendar day.
        """
        async with self._lock:
            return await self._record_check_in()

    async def _record_check_in(self) -> bool:
        if not self.is_loaded:
            await self._load()

        today = self.calendar.today()
        current = self.data
        if self.has_checked_in(today):
            logger.debug("streak_check_in_repeat", day=str(today))
            self.state = StreakState.idle
            return False

        last = current.last_check_in_date
        continuous = last is None or are_consecutive_days(last, today)
        streak = current.current_streak + 1 if continuous else 1

        self.data = StreakData(
            current_streak=streak,
            longest_streak=max(current.longest_streak, streak),
            last_check_in_date=today,
            streak_dates=[*current.streak_dates, today],
            total_check_ins=current.total_check_ins + 1,
        )
        self.state = StreakState.continuing
        logger.info(
            "streak_check_in_recorded",
            day=str(today),
            current_streak=streak,
            restarted=not continuous,
        )

        await self.save()
        return True
