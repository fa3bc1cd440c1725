"""
Snooze evaluator.

  later    → now + SNOOZE_LATER_HOURS (3h)
  tomorrow → SNOOZE_TOMORROW_HOUR (09:00) reference-zone wall time on the
             next calendar day; built from the date, not "+24h", so it
             stays at 09:00 across a DST switch
  week     → now + SNOOZE_WEEK_DAYS × 24h

Unknown options fall back to "later" and log a warning, unless
STRICT_SNOOZE_OPTIONS is set, in which case they raise.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from app.core.config import settings
from app.core.errors import UnknownSnoozeOptionError
from app.core.logging import get_logger
from app.schemas.notification import Notification, SnoozeOption
from app.services.calendar import Calendar

logger = get_logger(__name__)


def _calendar(calendar: Optional[Calendar]) -> Calendar:
    return calendar or Calendar()


def _utc(value: datetime) -> datetime:
    # Aware datetimes sharing a zone compare by wall time; compare instants.
    return value.astimezone(timezone.utc)


def is_snooze_expired(
    notification: Notification,
    calendar: Optional[Calendar] = None,
) -> bool:
    """True when not snoozed, or when now is at or past `snoozed_until`."""
    if notification.snoozed_until is None:
        return True
    cal = _calendar(calendar)
    return _utc(cal.now()) >= _utc(cal.to_reference(notification.snoozed_until))


def resolve_option(
    option: Union[SnoozeOption, str],
    strict: Optional[bool] = None,
) -> SnoozeOption:
    if strict is None:
        strict = settings.STRICT_SNOOZE_OPTIONS
    try:
        return SnoozeOption(option)
    except ValueError:
        if strict:
            raise UnknownSnoozeOptionError(option) from None
        logger.warning("snooze_option_unknown", option=str(option), fallback="later")
        return SnoozeOption.later


def snooze_until(
    option: Union[SnoozeOption, str],
    calendar: Optional[Calendar] = None,
    strict: Optional[bool] = None,
) -> datetime:
    """Wake-up time for a named snooze option (aware, reference zone)."""
    cal = _calendar(calendar)
    resolved = resolve_option(option, strict)
    now = cal.now()

    if resolved is SnoozeOption.tomorrow:
        return cal.at_wall_time(now.date() + timedelta(days=1), settings.SNOOZE_TOMORROW_HOUR)

    # Elapsed-time offsets are added in UTC; aware arithmetic in a zone is wall-clock.
    if resolved is SnoozeOption.week:
        delta = timedelta(days=settings.SNOOZE_WEEK_DAYS)
    else:
        delta = timedelta(hours=settings.SNOOZE_LATER_HOURS)
    return cal.to_reference(now.astimezone(timezone.utc) + delta)
