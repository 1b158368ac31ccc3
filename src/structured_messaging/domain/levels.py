"""Severity levels following the npm logging convention.

Purpose
-------
Offer a domain-specific representation of log severities together with a
priority table that also accepts host-defined custom levels.

Contents
--------
* :class:`LogLevel` enum with conversion helpers.
* :class:`LevelTable` mapping level names to priorities and answering
  threshold questions.

System Role
-----------
Used by the façade to filter events against thresholds, by the format
selector to find built-in format specifications, and by the console
transport to pick styles.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum

from .errors import ConfigurationError


class LogLevel(Enum):
    """Standard severities; lower values are more severe."""

    ERROR = 0
    WARN = 1
    INFO = 2
    HTTP = 3
    VERBOSE = 4
    DEBUG = 5
    SILLY = 6

    @property
    def severity(self) -> str:
        """Return the lowercase severity name used in structured payloads."""

        return self.name.lower()

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def is_standard(cls, name: str) -> bool:
        """Return ``True`` when ``name`` matches one of the standard severities."""
        return name.strip().upper() in cls.__members__


def level_name(level: str | LogLevel) -> str:
    """Normalise ``level`` (enum or string) to its lowercase name.

    Examples
    --------
    >>> level_name(LogLevel.WARN)
    'warn'
    >>> level_name(" Info ")
    'info'
    """
    if isinstance(level, LogLevel):
        return level.severity
    return level.strip().lower()


class LevelTable(Mapping[str, int]):
    """Read-only mapping of level name to priority.

    Examples
    --------
    >>> table = LevelTable()
    >>> table.enabled("warn", threshold="info")
    True
    >>> table.enabled("debug", threshold="info")
    False
    >>> LevelTable({"fatal": 0, "notice": 3})["notice"]
    3
    """

    def __init__(self, levels: Mapping[str, int] | None = None) -> None:
        source = levels if levels else {level.severity: level.value for level in LogLevel}
        table: dict[str, int] = {}
        for name, priority in source.items():
            if not isinstance(name, str) or not name.strip():
                raise ConfigurationError(f"Level names must be non-empty strings, got {name!r}")
            if isinstance(priority, bool) or not isinstance(priority, int):
                raise ConfigurationError(f"Priority for level {name!r} must be an integer")
            table[level_name(name)] = priority
        self._levels = table

    def __getitem__(self, name: str) -> int:
        return self._levels[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def priority(self, level: str | LogLevel) -> int:
        """Return the priority of ``level`` or raise :class:`ConfigurationError`."""
        name = level_name(level)
        try:
            return self._levels[name]
        except KeyError as exc:
            raise ConfigurationError(f"Unknown log level: {name!r}") from exc

    def enabled(self, level: str | LogLevel, *, threshold: str | LogLevel) -> bool:
        """Return ``True`` when ``level`` passes ``threshold``."""
        return self.priority(level) <= self.priority(threshold)


__all__ = ["LevelTable", "LogLevel", "level_name"]
