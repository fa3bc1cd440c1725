"""
Notification inbox: the session's current list of notifications plus the
user's dismiss/snooze choices.

Notifications themselves are never stored; they are re-derived from the
contacts on every refresh. Only two small records are persisted, each under
its own key:

  dismissed  → JSON list of notification ids
  snoozed    → JSON object {notification id: ISO-8601 wake-up time}

Because ids are deterministic ("birthday-<contactId>"), those choices stick
to the re-derived notifications across refreshes and restarts.

Storage failures are logged and never raised; the in-memory state stays
authoritative for the rest of the session.
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from app.core.config import settings
from app.core.errors import ParseError, PersistenceReadError, PersistenceWriteError
from app.core.logging import get_logger
from app.schemas.contact import Contact
from app.schemas.notification import Notification, SnoozeOption
from app.services.calendar import Calendar
from app.services.kv_store import KeyValueStore
from app.services.notification_rules import derive_notifications
from app.services.ranking import select_banner, sort_by_priority
from app.services.snooze import is_snooze_expired, snooze_until

logger = get_logger(__name__)


class NotificationInbox:

    def __init__(
        self,
        store: KeyValueStore,
        calendar: Optional[Calendar] = None,
        dismissed_key: Optional[str] = None,
        snoozed_key: Optional[str] = None,
    ):
        self.store = store
        self.calendar = calendar or Calendar()
        self.dismissed_key = dismissed_key or settings.DISMISSED_STORAGE_KEY
        self.snoozed_key = snoozed_key or settings.SNOOZED_STORAGE_KEY
        self.notifications: list[Notification] = []
        self.dismissed_ids: set[str] = set()
        self.snoozed: dict[str, datetime] = {}

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _read_json(self, key: str):
        try:
            raw = await self.store.get(key)
        except PersistenceReadError as exc:
            logger.error("inbox_load_failed", key=key, error=exc.message)
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.error("inbox_record_invalid", key=key)
            return None

    async def _write_json(self, key: str, payload) -> bool:
        try:
            await self.store.set(key, json.dumps(payload))
        except PersistenceWriteError as exc:
            logger.error("inbox_save_failed", key=key, error=exc.message)
            return False
        return True

    async def load(self) -> None:
        dismissed = await self._read_json(self.dismissed_key)
        if isinstance(dismissed, list):
            self.dismissed_ids = {str(i) for i in dismissed}

        snoozed = await self._read_json(self.snoozed_key)
        if isinstance(snoozed, dict):
            self.snoozed = {}
            for notification_id, raw in snoozed.items():
                try:
                    self.snoozed[notification_id] = self.calendar.to_reference(raw)
                except ParseError:
                    logger.error(
                        "inbox_snooze_invalid",
                        notification_id=notification_id,
                        value=str(raw),
                    )
            if self._prune_snoozes() or len(self.snoozed) != len(snoozed):
                await self._save_snoozed()

    def _prune_snoozes(self) -> list[str]:
        """Drop elapsed snoozes from memory; returns the removed ids."""
        now_utc = self.calendar.now().astimezone(timezone.utc)
        expired = [
            i for i, until in self.snoozed.items() if until.astimezone(timezone.utc) <= now_utc
        ]
        for notification_id in expired:
            del self.snoozed[notification_id]
        return expired

    async def _save_dismissed(self) -> bool:
        return await self._write_json(self.dismissed_key, sorted(self.dismissed_ids))

    async def _save_snoozed(self) -> bool:
        return await self._write_json(
            self.snoozed_key,
            {i: until.isoformat() for i, until in self.snoozed.items()},
        )

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def refresh(
        self,
        contacts: Iterable[Contact],
        extra: Iterable[Notification] = (),
    ) -> list[Notification]:
        """
        Replace the list with a fresh derivation from `contacts`, merged with
        externally supplied notifications (insights, achievements...).
        A derived notification wins over an extra one with the same id.
        """
        now = self.calendar.now()
        # Extras are copied; the caller keeps its own objects untouched.
        merged = {n.id: n.model_copy() for n in extra}
        merged.update(
            (n.id, n) for n in derive_notifications(contacts, self.calendar.today(), now)
        )

        # Elapsed snoozes are forgotten so the notification can be a banner again.
        # The stored record catches up on the next snooze write or load.
        self._prune_snoozes()

        kept: list[Notification] = []
        for n in merged.values():
            if n.id in self.dismissed_ids:
                n.is_dismissed = True
            if n.id in self.snoozed:
                n.snoozed_until = self.snoozed[n.id]
            elif n.snoozed_until is not None and is_snooze_expired(n, self.calendar):
                n.snoozed_until = None
            if n.snoozed_until is not None:
                continue
            kept.append(n)

        self.notifications = sort_by_priority(kept)
        return self.notifications

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def get(self, notification_id: str) -> Optional[Notification]:
        for n in self.notifications:
            if n.id == notification_id:
                return n
        return None

    async def dismiss(self, notification_id: str) -> bool:
        n = self.get(notification_id)
        if n is not None:
            n.is_dismissed = True
        self.dismissed_ids.add(notification_id)
        return await self._save_dismissed()

    async def mark_as_actioned(self, notification_id: str) -> bool:
        """The user acted on it (e.g. sent birthday wishes)."""
        return await self.dismiss(notification_id)

    async def snooze(
        self,
        notification_id: str,
        option: Union[SnoozeOption, str],
    ) -> datetime:
        until = snooze_until(option, self.calendar)
        n = self.get(notification_id)
        if n is not None:
            n.snoozed_until = until
        self.snoozed[notification_id] = until
        await self._save_snoozed()
        return until

    def mark_as_read(self, notification_id: str) -> None:
        n = self.get(notification_id)
        if n is not None:
            n.is_read = True

    async def clear_all(self) -> bool:
        for n in self.notifications:
            n.is_dismissed = True
            self.dismissed_ids.add(n.id)
        return await self._save_dismissed()

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def active(self) -> list[Notification]:
        return [
            n for n in self.notifications
            if not n.is_dismissed and is_snooze_expired(n, self.calendar)
        ]

    @property
    def banner(self) -> Optional[Notification]:
        return select_banner(self.active)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.active if not n.is_read)
