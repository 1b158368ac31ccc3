"""Exception hierarchy raised by the message construction pipeline.

Only structural misconfiguration surfaces to callers; data and templating
problems are absorbed by the resolver and the splat engine.
"""

from __future__ import annotations


class StructuredMessagingError(Exception):
    """Base class for all errors raised by :mod:`structured_messaging`."""


class FormatSpecMissingError(StructuredMessagingError, LookupError):
    """No format specification exists for a severity level."""

    def __init__(self, level: str) -> None:
        super().__init__(f"No structured format configured for level {level!r}")
        self.level = level


class ConfigurationError(StructuredMessagingError, ValueError):
    """Configuration values that cannot be turned into a working logger."""


__all__ = ["ConfigurationError", "FormatSpecMissingError", "StructuredMessagingError"]
