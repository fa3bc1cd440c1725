from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class StreakData(BaseModel):
    """
    Persisted streak record. Serialized with the camelCase field names
    (`currentStreak`, `lastCheckInDate`, ...) and parsed back verbatim.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_check_in_date: Optional[date] = None
    # Chronological, one entry per successful check-in.
    streak_dates: list[date] = Field(default_factory=list)
    total_check_ins: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _consistent_counters(self) -> "StreakData":
        if self.longest_streak < self.current_streak:
            raise ValueError("longestStreak must be >= currentStreak")
        if self.total_check_ins != len(self.streak_dates):
            raise ValueError("totalCheckIns must equal the number of streakDates")
        return self

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, raw: str) -> "StreakData":
        return cls.model_validate_json(raw)
