"""Choose the format specification used for a severity level.

Overrides configured for a level replace the built-in specification
wholesale; there is no field-by-field merge. A level with neither an
override nor a built-in specification is a configuration error.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from structured_messaging.domain import FORMAT_LEVELS, FormatSpec, FormatSpecMissingError, level_name
from structured_messaging.domain.levels import LogLevel


def select(
    level: str | LogLevel,
    overrides: Mapping[str, FormatSpec | Mapping[Any, Any]] | None = None,
    *,
    defaults: Mapping[str, FormatSpec] = FORMAT_LEVELS,
) -> FormatSpec:
    """Return the specification for ``level``.

    Examples
    --------
    >>> select("info", {"info": {"msg": "log.message"}}).to_mapping()
    {'msg': 'log.message'}
    >>> select("warn") is FORMAT_LEVELS["warn"]
    True
    >>> select("fatal")
    Traceback (most recent call last):
    ...
    structured_messaging.domain.errors.FormatSpecMissingError: No structured format configured for level 'fatal'
    """

    name = level_name(level)
    if overrides and name in overrides:
        return FormatSpec.parse(overrides[name])
    try:
        return defaults[name]
    except KeyError as exc:
        raise FormatSpecMissingError(name) from exc


class LevelFormatSelector:
    """Pre-parsed selector bound to one logger's overrides."""

    def __init__(
        self,
        overrides: Mapping[str, FormatSpec | Mapping[Any, Any]] | None = None,
        *,
        defaults: Mapping[str, FormatSpec] = FORMAT_LEVELS,
    ) -> None:
        parsed = {level_name(name): FormatSpec.parse(spec) for name, spec in (overrides or {}).items()}
        self._overrides: Mapping[str, FormatSpec] = MappingProxyType(parsed)
        self._defaults = defaults

    @property
    def overrides(self) -> Mapping[str, FormatSpec]:
        return self._overrides

    def select(self, level: str | LogLevel) -> FormatSpec:
        return select(level, self._overrides, defaults=self._defaults)

    def validate(self, levels: Iterable[str]) -> None:
        """Raise :class:`FormatSpecMissingError` for the first level without a spec."""
        for name in levels:
            self.select(name)


__all__ = ["LevelFormatSelector", "select"]
