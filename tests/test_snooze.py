"""
Tests for the snooze evaluator.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import UnknownSnoozeOptionError
from app.schemas.notification import Notification, SnoozeOption
from app.services.snooze import is_snooze_expired, resolve_option, snooze_until
from tests.helpers import berlin, calendar_at


def _elapsed(start: datetime, end: datetime) -> timedelta:
    # Same-zone subtraction is wall-clock; compare instants instead.
    return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)


def _notification(snoozed_until=None) -> Notification:
    return Notification(
        id="reminder-1",
        type="contact_reminder",
        priority="high",
        title="Reach out to Maria",
        created_at=datetime(2026, 6, 1, tzinfo=timezone.utc),
        snoozed_until=snoozed_until,
    )


class TestIsSnoozeExpired:
    def test_not_snoozed_counts_as_expired(self):
        assert is_snooze_expired(_notification(), calendar_at(berlin(2026, 6, 1)))

    def test_future_snooze_not_expired(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))
        assert not is_snooze_expired(_notification(berlin(2026, 6, 1, 10, 1)), cal)

    def test_exactly_at_boundary_is_expired(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))
        assert is_snooze_expired(_notification(berlin(2026, 6, 1, 10, 0)), cal)

    def test_past_snooze_expired(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))
        assert is_snooze_expired(_notification(berlin(2026, 6, 1, 9, 59)), cal)

    def test_compares_instants_across_zones(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))  # 08:00 UTC
        until = datetime(2026, 6, 1, 8, 30, tzinfo=timezone.utc)
        assert not is_snooze_expired(_notification(until), cal)


class TestSnoozeUntil:
    def test_later_is_three_hours(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))
        assert snooze_until(SnoozeOption.later, cal) == berlin(2026, 6, 1, 13, 0)

    def test_week_is_seven_days(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))
        assert snooze_until("week", cal) == berlin(2026, 6, 8, 10, 0)

    def test_tomorrow_is_nine_am_next_day(self):
        cal = calendar_at(berlin(2026, 6, 1, 22, 45))
        until = snooze_until("tomorrow", cal)
        assert until == berlin(2026, 6, 2, 9, 0)
        assert (until.hour, until.minute) == (9, 0)

    def test_tomorrow_just_after_midnight(self):
        cal = calendar_at(berlin(2026, 6, 2, 0, 5))
        assert snooze_until("tomorrow", cal) == berlin(2026, 6, 3, 9, 0)

    def test_tomorrow_across_dst_start_keeps_nine_am(self):
        # Clocks jump forward on 2026-03-29; the snooze must still read 09:00.
        cal = calendar_at(berlin(2026, 3, 28, 20, 0))
        until = snooze_until("tomorrow", cal)
        assert until.date().isoformat() == "2026-03-29"
        assert (until.hour, until.minute) == (9, 0)
        assert _elapsed(cal.now(), until) == timedelta(hours=12)

    def test_tomorrow_across_dst_end_keeps_nine_am(self):
        cal = calendar_at(berlin(2026, 10, 24, 20, 0))
        until = snooze_until("tomorrow", cal)
        assert (until.hour, until.minute) == (9, 0)
        assert _elapsed(cal.now(), until) == timedelta(hours=14)

    def test_later_is_elapsed_time_across_dst(self):
        # 01:30 + 3h elapsed on DST start day lands at 05:30 wall time.
        cal = calendar_at(berlin(2026, 3, 29, 1, 30))
        until = snooze_until("later", cal)
        assert _elapsed(cal.now(), until) == timedelta(hours=3)
        assert until.hour == 5

    def test_unknown_option_falls_back_to_later(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))
        assert snooze_until("next-month", cal, strict=False) == berlin(2026, 6, 1, 13, 0)

    def test_unknown_option_raises_in_strict_mode(self):
        cal = calendar_at(berlin(2026, 6, 1, 10, 0))
        with pytest.raises(UnknownSnoozeOptionError) as exc_info:
            snooze_until("next-month", cal, strict=True)
        assert exc_info.value.details == {"option": "next-month"}

    def test_resolve_option(self):
        assert resolve_option("tomorrow") is SnoozeOption.tomorrow
        assert resolve_option(SnoozeOption.week) is SnoozeOption.week
        assert resolve_option("bogus", strict=False) is SnoozeOption.later
