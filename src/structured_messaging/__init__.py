"""Structured log messages built from declarative per-level format specifications.

``StructuredMessaging`` is the public entry point; the domain algorithms
(key resolution, placeholder substitution, format building) are re-exported
for callers that want to use them without transports.
"""

from __future__ import annotations

from .config import MessagingConfig, enable_dotenv
from .domain import (
    ABSENT,
    DEFAULT_FORMAT,
    ConfigurationError,
    DataContext,
    FormatSpec,
    FormatSpecMissingError,
    LevelTable,
    LogLevel,
    StructuredMessagingError,
    build,
    substitute,
)
from .domain.data_context import resolve
from .structured_messaging import LoggerProxy, StructuredMessaging, summary_info

__all__ = [
    "ABSENT",
    "ConfigurationError",
    "DEFAULT_FORMAT",
    "DataContext",
    "FormatSpec",
    "FormatSpecMissingError",
    "LevelTable",
    "LogLevel",
    "LoggerProxy",
    "MessagingConfig",
    "StructuredMessaging",
    "StructuredMessagingError",
    "build",
    "enable_dotenv",
    "resolve",
    "substitute",
    "summary_info",
]
