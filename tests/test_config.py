"""
Tests for settings loading and validation.
"""
import pytest
from pydantic import ValidationError

from app.core.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("REFERENCE_TIMEZONE", raising=False)
        s = Settings(_env_file=None)
        assert s.REFERENCE_TIMEZONE == "Europe/Berlin"
        assert s.STREAK_STORAGE_KEY == "@life_os_streak_data"
        assert (s.SNOOZE_LATER_HOURS, s.SNOOZE_TOMORROW_HOUR, s.SNOOZE_WEEK_DAYS) == (3, 9, 7)
        assert s.STRICT_SNOOZE_OPTIONS is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("REFERENCE_TIMEZONE", "Asia/Tokyo")
        monkeypatch.setenv("STRICT_SNOOZE_OPTIONS", "true")
        s = Settings(_env_file=None)
        assert str(s.reference_zone) == "Asia/Tokyo"
        assert s.STRICT_SNOOZE_OPTIONS is True

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, REFERENCE_TIMEZONE="Mars/Olympus_Mons")
