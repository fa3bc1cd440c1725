"""
Notification ranking and banner selection.

Order: priority (high < medium < low), then birthdays before every other
type, then newest first. Python's sort is stable, so sorting an already
sorted list is a no-op and equal keys keep their input order.

Only one notification is ever surfaced as the banner: the top-ranked one
that is high priority, not dismissed and not snoozed. Everything else
stays in the list but is never auto-surfaced.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from app.schemas.notification import (
    Notification,
    NotificationPriority,
    NotificationType,
)

PRIORITY_RANK: dict[NotificationPriority, int] = {
    NotificationPriority.high: 0,
    NotificationPriority.medium: 1,
    NotificationPriority.low: 2,
}


def _timestamp(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _sort_key(n: Notification) -> tuple[int, int, float]:
    return (
        PRIORITY_RANK[n.priority],
        0 if n.type == NotificationType.birthday else 1,
        -_timestamp(n.created_at),
    )


def sort_by_priority(notifications: Iterable[Notification]) -> list[Notification]:
    """Return a new, ranked list; the input is left untouched."""
    return sorted(notifications, key=_sort_key)


def is_banner_eligible(n: Notification) -> bool:
    return (
        n.priority == NotificationPriority.high
        and not n.is_dismissed
        and n.snoozed_until is None
    )


def select_banner(notifications: Iterable[Notification]) -> Optional[Notification]:
    for n in sort_by_priority(notifications):
        if is_banner_eligible(n):
            return n
    return None
