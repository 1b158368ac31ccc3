"""Domain entities and pure algorithms of the message construction pipeline."""

from __future__ import annotations

from .builder import build
from .data_context import ABSENT, DataContext, KeyResolver, defensive_copy
from .errors import ConfigurationError, FormatSpecMissingError, StructuredMessagingError
from .events import LogEvent
from .format_spec import DEFAULT_FORMAT, FORMAT_LEVELS, Branch, FormatSpec, Leaf, Literal
from .levels import LevelTable, LogLevel, level_name
from .splat import SplatResult, substitute

__all__ = [
    "ABSENT",
    "Branch",
    "ConfigurationError",
    "DEFAULT_FORMAT",
    "DataContext",
    "FORMAT_LEVELS",
    "FormatSpec",
    "FormatSpecMissingError",
    "KeyResolver",
    "Leaf",
    "LevelTable",
    "Literal",
    "LogEvent",
    "LogLevel",
    "SplatResult",
    "StructuredMessagingError",
    "build",
    "defensive_copy",
    "level_name",
    "substitute",
]
