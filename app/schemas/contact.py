"""
Contact: read-only input snapshot supplied by the contacts screen.

Field names follow the app's camelCase JSON (`dateOfBirth`,
`contactAgainDate`); snake_case works too. Only `id`, `name` and the two
dates drive any logic; the rest is carried for display.
"""
from datetime import date
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.services.calendar import parse_date


class ContactNote(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    text: str
    created_at: str


class Contact(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str
    name: str
    initials: Optional[str] = None
    category: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    instagram: Optional[str] = None
    location: Optional[str] = None
    # Only month + day are meaningful; the year may be a placeholder.
    date_of_birth: Optional[date] = None
    contact_again_date: Optional[date] = None
    reminder_status: Optional[Literal["none", "future", "soon", "overdue"]] = None
    notes: list[ContactNote] = Field(default_factory=list)

    @field_validator("date_of_birth", "contact_again_date", mode="before")
    @classmethod
    def _parse_dates(cls, value: Any) -> Optional[date]:
        # ParseError is not a ValueError, so it propagates unwrapped.
        if value is None or value == "":
            return None
        return parse_date(value)
