"""
Notification Rule Engine — derive notifications from contacts.

Rules (evaluated per contact, independently)
--------------------------------------------
  1. BIRTHDAY  (needs date_of_birth; only month + day matter)
     today             → high    "<name> is celebrating today!"
     tomorrow          → high    "<name>'s birthday is tomorrow"
     in 2–3 days       → medium  "<name>'s birthday is in <N> days"
     further away      → nothing

  2. CONTACT REMINDER  (needs contact_again_date)
     n = days until the date (negative = overdue)
     n <= -1           → high    "Reach out <|n|> day(s) overdue"
     n == 0            → high    "Reach out today"
     n == 1            → high    "Due tomorrow"
     2 <= n <= 3       → medium  "Due in <n> days"
     4 <= n <= 7       → low     "Due in <n> days"
     n > 7             → nothing

Idempotency
-----------
Ids are "birthday-<contactId>" and "reminder-<contactId>". Priority, title
and subtitle depend only on the contact and `today`, so re-deriving with
the same inputs yields the same notifications (only created_at differs).
Callers replace the previous set wholesale; no merge state lives here.

Pure functions: no I/O, no clock reads unless `now` is omitted.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Optional

from app.schemas.contact import Contact
from app.schemas.notification import (
    Notification,
    NotificationPriority,
    NotificationType,
)
from app.services.calendar import days_until, days_until_birthday


# Windows (days ahead of today)
BIRTHDAY_WINDOW_DAYS = 3
REMINDER_MEDIUM_DAYS = 3
REMINDER_WINDOW_DAYS = 7


def birthday_id(contact_id: str) -> str:
    return f"birthday-{contact_id}"


def reminder_id(contact_id: str) -> str:
    return f"reminder-{contact_id}"


def _plural(n: int, word: str) -> str:
    return word if n == 1 else f"{word}s"


# ---------------------------------------------------------------------------
# Individual rules
# ---------------------------------------------------------------------------

def birthday_notification(
    contact: Contact,
    today: date,
    now: Optional[datetime] = None,
) -> Optional[Notification]:
    """Rule 1: upcoming or current birthday → birthday notification."""
    if contact.date_of_birth is None:
        return None

    days = days_until_birthday(contact.date_of_birth, today)
    if days == 0:
        priority = NotificationPriority.high
        subtitle = f"{contact.name} is celebrating today!"
    elif days == 1:
        priority = NotificationPriority.high
        subtitle = f"{contact.name}'s birthday is tomorrow"
    elif days <= BIRTHDAY_WINDOW_DAYS:
        priority = NotificationPriority.medium
        subtitle = f"{contact.name}'s birthday is in {days} days"
    else:
        return None

    return Notification(
        id=birthday_id(contact.id),
        type=NotificationType.birthday,
        priority=priority,
        title="Birthday Today" if days == 0 else "Upcoming Birthday",
        subtitle=subtitle,
        created_at=now or datetime.now(tz=timezone.utc),
        metadata={
            "contactId": contact.id,
            "contactName": contact.name,
        },
    )


def reminder_notification(
    contact: Contact,
    today: date,
    now: Optional[datetime] = None,
) -> Optional[Notification]:
    """Rule 2: contact-again date close or past → reminder notification."""
    if contact.contact_again_date is None:
        return None

    n = days_until(contact.contact_again_date, today)
    if n < 0:
        overdue = abs(n)
        priority = NotificationPriority.high
        subtitle = f"Reach out {overdue} {_plural(overdue, 'day')} overdue"
    elif n == 0:
        priority = NotificationPriority.high
        subtitle = "Reach out today"
    elif n == 1:
        priority = NotificationPriority.high
        subtitle = "Due tomorrow"
    elif n <= REMINDER_MEDIUM_DAYS:
        priority = NotificationPriority.medium
        subtitle = f"Due in {n} days"
    elif n <= REMINDER_WINDOW_DAYS:
        priority = NotificationPriority.low
        subtitle = f"Due in {n} days"
    else:
        return None

    return Notification(
        id=reminder_id(contact.id),
        type=NotificationType.contact_reminder,
        priority=priority,
        title=f"Reach out to {contact.name}",
        subtitle=subtitle,
        created_at=now or datetime.now(tz=timezone.utc),
        metadata={
            "contactId": contact.id,
            "contactName": contact.name,
            "isOverdue": n < 0,
            "daysUntil": n,
        },
    )


# ---------------------------------------------------------------------------
# Public — main entry point
# ---------------------------------------------------------------------------

def derive_notifications(
    contacts: Iterable[Contact],
    today: date,
    now: Optional[datetime] = None,
) -> list[Notification]:
    """
    Evaluate both rules for every contact. A contact yields 0, 1 or 2
    notifications; one without either date yields none.
    """
    created_at = now or datetime.now(tz=timezone.utc)
    notifications: list[Notification] = []
    for contact in contacts:
        for rule in (birthday_notification, reminder_notification):
            notification = rule(contact, today, created_at)
            if notification is not None:
                notifications.append(notification)
    return notifications
