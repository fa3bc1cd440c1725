"""
Notification schemas.

Notifications are ephemeral: re-derived on every refresh and never
persisted by the core. `is_read`, `is_dismissed` and `snoozed_until` are
flipped by the UI layer (or the inbox acting on its behalf).
"""
import enum
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NotificationType(str, enum.Enum):
    birthday = "birthday"
    contact_reminder = "contact_reminder"
    # Injected by other collaborators; never derived here.
    insight = "insight"
    achievement = "achievement"
    announcement = "announcement"


class NotificationPriority(str, enum.Enum):
    high = "high"
    medium = "medium"
    low = "low"


class SnoozeOption(str, enum.Enum):
    later = "later"
    tomorrow = "tomorrow"
    week = "week"


class Notification(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description='Deterministic, e.g. "birthday-<contactId>".')
    type: NotificationType
    priority: NotificationPriority
    title: str
    subtitle: Optional[str] = None
    created_at: datetime
    is_read: bool = False
    is_dismissed: bool = False
    snoozed_until: Optional[datetime] = None
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Display back-references (contactId, contactName, isOverdue...).",
    )
