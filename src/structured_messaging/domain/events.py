"""Domain event describing one raw logging call.

Purpose
-------
Provide an immutable representation of what the caller handed to the
logger before any formatting happens.

Contents
--------
* :class:`LogEvent` dataclass with helper methods.
* Utility function ``_ensure_aware`` for timestamp validation.

System Role
-----------
Input of the message assembler; adapters never see it, they only receive the
structured mapping built from it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from .levels import LogLevel, level_name


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


@dataclass(slots=True, frozen=True)
class LogEvent:
    """Immutable raw logging event.

    Attributes
    ----------
    level:
        Lowercase severity name (standard or custom).
    message:
        Message text as passed by the caller, possibly containing
        placeholders.
    timestamp:
        Time of the call in timezone-aware UTC.
    data:
        Caller-supplied per-call data; copied before it is merged.
    error:
        Exception attached to the call, if any.
    """

    level: str
    message: str
    timestamp: datetime
    data: Mapping[Any, Any] | None = None
    error: BaseException | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))
        object.__setattr__(self, "level", level_name(self.level))

    @classmethod
    def from_call(
        cls,
        level: str | LogLevel,
        message: Any,
        data: Mapping[Any, Any] | None = None,
        *,
        error: BaseException | None = None,
        timestamp: datetime,
    ) -> "LogEvent":
        """Normalise the arguments of a logging call into an event.

        An exception passed as ``message`` becomes the event's error and its
        text the message. When a message and an error are both given, the
        error text is appended after a single space.

        Examples
        --------
        >>> ts = datetime(2025, 1, 1, tzinfo=timezone.utc)
        >>> LogEvent.from_call("error", ValueError("boom"), timestamp=ts).message
        'boom'
        >>> LogEvent.from_call("error", "Failed:", error=ValueError("boom"), timestamp=ts).message
        'Failed: boom'
        """

        if isinstance(message, BaseException):
            if error is None:
                error = message
            text = str(message)
        else:
            text = message if isinstance(message, str) else str(message)
            if error is not None:
                text = f"{text} {error}"
        return cls(level=level_name(level), message=text, timestamp=timestamp, data=data, error=error)

    def to_fields(self) -> dict[str, Any]:
        """Return the raw event fields exposed under ``log`` in the data context."""

        return {
            "level": self.level,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }

    def replace(self, **changes: Any) -> "LogEvent":
        """Return a copied event with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["LogEvent"]
