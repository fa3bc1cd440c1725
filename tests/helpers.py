"""Clock helpers shared by the test modules."""
from datetime import datetime
from zoneinfo import ZoneInfo

from app.services.calendar import Calendar

BERLIN = ZoneInfo("Europe/Berlin")


def berlin(year, month, day, hour=12, minute=0) -> datetime:
    """Aware datetime at Berlin wall time."""
    return datetime(year, month, day, hour, minute, tzinfo=BERLIN)


def calendar_at(when: datetime) -> Calendar:
    return Calendar(BERLIN, clock=lambda: when)


class MovableClock:
    """A clock the test can move forward between calls."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now
