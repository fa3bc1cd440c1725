from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"
    DATABASE_URL: str = "sqlite:///./lifeos.db"

    # Every "today" decision is made in this zone, whatever the device says.
    REFERENCE_TIMEZONE: str = "Europe/Berlin"

    # Storage keys inside the key/value store.
    STREAK_STORAGE_KEY: str = "@life_os_streak_data"
    DISMISSED_STORAGE_KEY: str = "@life_os_dismissed_notifications"
    SNOOZED_STORAGE_KEY: str = "@life_os_snoozed_notifications"

    SNOOZE_LATER_HOURS: int = 3
    SNOOZE_TOMORROW_HOUR: int = 9
    SNOOZE_WEEK_DAYS: int = 7
    # When False, an unknown snooze option falls back to "later".
    STRICT_SNOOZE_OPTIONS: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("REFERENCE_TIMEZONE")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {value!r}") from exc
        return value

    @property
    def reference_zone(self) -> ZoneInfo:
        return ZoneInfo(self.REFERENCE_TIMEZONE)


settings = Settings()
