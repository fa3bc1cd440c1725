"""
Custom exception hierarchy for the Life-OS core.

Rule: every error has a machine-readable `code` string so callers
(the UI layer) can branch on it without parsing English messages.
"""
from __future__ import annotations

from typing import Any


class LifeOSException(Exception):
    """Base class for all application-level errors."""
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ParseError(LifeOSException):
    """A date or timestamp could not be parsed. Always propagated."""
    code = "PARSE_ERROR"

    def __init__(self, value: Any, reason: str | None = None):
        message = f"Cannot parse date from {value!r}."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message=message, details={"value": str(value)})


class PersistenceError(LifeOSException):
    code = "PERSISTENCE_ERROR"
    _verb = "Storage operation"

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(
            message=f"{self._verb} failed for key {key!r}: {reason}",
            details={"key": key, "reason": reason},
        )


class PersistenceReadError(PersistenceError):
    code = "PERSISTENCE_READ_ERROR"
    _verb = "Read"


class PersistenceWriteError(PersistenceError):
    code = "PERSISTENCE_WRITE_ERROR"
    _verb = "Write"


class UnknownSnoozeOptionError(LifeOSException):
    """Raised only when STRICT_SNOOZE_OPTIONS is enabled."""
    code = "UNKNOWN_SNOOZE_OPTION"

    def __init__(self, option: Any):
        super().__init__(
            message=f"Unknown snooze option {option!r}.",
            details={"option": str(option)},
        )
