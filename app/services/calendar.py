"""
Calendar Normalizer. The single source of "today" and "now".

Every day-boundary decision (streak continuity, birthday windows, reminder
due dates, snooze wake-up times) is made in one reference time zone taken
from settings.REFERENCE_TIMEZONE, regardless of the device's local zone.
A user crossing zones therefore keeps one authoritative "day".

Day arithmetic is done on `date` values only, never on timestamps, so a
23h or 25h day around a DST switch can never shift a result by one.

Public API
----------
parse_date(value, zone)              -> date       (ParseError on bad input)
parse_datetime(value, zone)          -> datetime   (aware)
is_same_month_day(a, b)              -> bool
days_until(target, from_)            -> int        (signed, whole days)
are_consecutive_days(a, b)           -> bool
days_until_birthday(dob, today)      -> int        (0 = today)
Calendar(zone, clock)                -> clock-bound helpers (today, now, ...)
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.core.errors import ParseError

DateInput = Union[date, datetime, str]
Clock = Callable[[], datetime]

_ISO_DATE_LENGTH = 10


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _zone(zone: Optional[ZoneInfo]) -> ZoneInfo:
    return zone or settings.reference_zone


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_datetime(value: Union[datetime, str], zone: Optional[ZoneInfo] = None) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.
    Naive values are read as wall time in the reference zone.
    """
    zone = _zone(zone)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError as exc:
            raise ParseError(value, "Expected an ISO-8601 timestamp.") from exc
    else:
        raise ParseError(value, "Expected a datetime or ISO string.")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def parse_date(value: DateInput, zone: Optional[ZoneInfo] = None) -> date:
    """
    Coerce a date-like value into a calendar date.

    "YYYY-MM-DD" strings are taken verbatim. Full timestamps (including the
    "...Z" form that JavaScript's toISOString emits) are converted to the
    reference zone first, so "2026-03-01T23:30:00Z" is March 2nd in Berlin.
    """
    zone = _zone(zone)
    # datetime is a subclass of date: check it first
    if isinstance(value, datetime):
        return parse_datetime(value, zone).astimezone(zone).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ParseError(value, "Expected a date, datetime or ISO string.")

    raw = value.strip()
    if not raw:
        raise ParseError(value, "Empty string.")
    if len(raw) == _ISO_DATE_LENGTH:
        try:
            return date.fromisoformat(raw)
        except ValueError as exc:
            raise ParseError(value, "Expected YYYY-MM-DD.") from exc
    return parse_datetime(raw, zone).astimezone(zone).date()


# ---------------------------------------------------------------------------
# Pure day arithmetic (date-only)
# ---------------------------------------------------------------------------

def is_same_month_day(a: date, b: date) -> bool:
    """Month and day match; the year is ignored."""
    return a.month == b.month and a.day == b.day


def days_until(target: date, from_: date) -> int:
    """Signed whole days from `from_` to `target` (negative = in the past)."""
    return (target - from_).days


def are_consecutive_days(a: date, b: date) -> bool:
    """True iff `b` is exactly one calendar day after `a`."""
    return b - a == timedelta(days=1)


def _birthday_in(dob: date, year: int) -> date:
    try:
        return dob.replace(year=year)
    except ValueError:
        # Feb 29 in a non-leap year is observed on Feb 28.
        return date(year, 2, 28)


def next_birthday(dob: date, today: date) -> date:
    """Next annual occurrence of `dob` on or after `today`."""
    occurrence = _birthday_in(dob, today.year)
    if occurrence < today:
        occurrence = _birthday_in(dob, today.year + 1)
    return occurrence


def days_until_birthday(dob: date, today: date) -> int:
    return days_until(next_birthday(dob, today), today)


# ---------------------------------------------------------------------------
# Clock-bound helpers
# ---------------------------------------------------------------------------

class Calendar:
    """
    Reference-zone clock. Inject `clock` (returning an aware datetime) to pin
    "now" in tests; the default reads the system clock in UTC.
    """

    def __init__(
        self,
        zone: Union[ZoneInfo, str, None] = None,
        clock: Optional[Clock] = None,
    ):
        if isinstance(zone, str):
            zone = ZoneInfo(zone)
        self.zone: ZoneInfo = _zone(zone)
        self._clock: Clock = clock or _utc_now

    def now(self) -> datetime:
        return self.to_reference(self._clock())

    def today(self) -> date:
        return self.now().date()

    def current_hour(self) -> int:
        return self.now().hour

    def to_reference(self, value: Union[datetime, str]) -> datetime:
        return parse_datetime(value, self.zone).astimezone(self.zone)

    def parse_date(self, value: DateInput) -> date:
        return parse_date(value, self.zone)

    def at_wall_time(self, day: date, hour: int, minute: int = 0) -> datetime:
        """`hour:minute` on `day` as read on a clock in the reference zone."""
        return datetime.combine(day, time(hour, minute), tzinfo=self.zone)

    # -- questions relative to today ---------------------------------------

    def days_until(self, target: DateInput, from_: Optional[DateInput] = None) -> int:
        origin = self.parse_date(from_) if from_ is not None else self.today()
        return days_until(self.parse_date(target), origin)

    def is_today(self, value: DateInput) -> bool:
        return self.days_until(value) == 0

    def is_tomorrow(self, value: DateInput) -> bool:
        return self.days_until(value) == 1

    def is_within_days(self, value: DateInput, days: int) -> bool:
        return 0 <= self.days_until(value) <= days

    def is_overdue(self, contact_again_date: DateInput) -> bool:
        return self.days_until(contact_again_date) < 0

    def is_due_soon(self, contact_again_date: DateInput) -> bool:
        return self.is_within_days(contact_again_date, 3)

    def is_birthday_today(self, date_of_birth: DateInput) -> bool:
        return days_until_birthday(self.parse_date(date_of_birth), self.today()) == 0

    def are_consecutive_days(self, a: DateInput, b: DateInput) -> bool:
        return are_consecutive_days(self.parse_date(a), self.parse_date(b))
