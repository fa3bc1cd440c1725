from datetime import datetime
from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class KeyValueEntry(Base):
    """One string value per key: the device-local persistence boundary."""

    __tablename__ = "key_value_store"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    # Serialized record (JSON text); parsed by the owning service.
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
