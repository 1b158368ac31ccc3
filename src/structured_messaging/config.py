"""Configuration model, environment overrides and ``.env`` support.

Purpose
-------
Translate the loose configuration mappings accepted by the façade (camelCase
keys such as ``sharedData`` included) into one immutable
:class:`MessagingConfig`, and let operators adjust it from the environment.

Contents
--------
* :class:`MessagingConfig` - frozen configuration consumed by
  :class:`structured_messaging.StructuredMessaging`.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - opt-in ``.env`` loading
  backed by python-dotenv.
* :data:`DOTENV_ENV_VAR` - environment toggle honoured by the CLI.

System Role
-----------
Outer-layer helper: nothing in the domain or application layers reads the
environment, so every override funnels through this module.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from threading import Lock
from typing import Any

from dotenv import find_dotenv, load_dotenv

from .domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

DOTENV_ENV_VAR = "STRUCTURED_MESSAGING_USE_DOTENV"
"""Environment variable that enables ``.env`` loading for the CLI."""

QUEUE_POLICIES = frozenset({"block", "drop"})

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

_DOTENV_LOCK = Lock()
_DOTENV_PATH: Path | None = None
_DOTENV_LOADED = False


def snake_case(name: str) -> str:
    """Return ``name`` converted from camelCase.

    Examples
    --------
    >>> snake_case("sharedData"), snake_case("stderrLevels"), snake_case("level")
    ('shared_data', 'stderr_levels', 'level')
    """

    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True, slots=True)
class MessagingConfig:
    """Immutable logger configuration.

    Attributes
    ----------
    level:
        Threshold; events less severe than this level are not emitted.
    levels:
        Optional custom level table (name to priority). ``None`` keeps the
        standard npm levels.
    structured:
        Format specification overrides keyed by level name.
    shared_data:
        Mapping merged into every event's data context; may hold value
        providers.
    transport:
        Declarative transport entries ``{"type": ..., "options": {...}}``;
        ``None`` means "not configured".
    transports:
        Ready-built transport objects used in addition to ``transport``.
    queue_enabled / queue_maxsize / queue_full_policy:
        Background delivery settings.
    """

    level: str = "info"
    levels: Mapping[str, int] | None = None
    structured: Mapping[str, Any] = field(default_factory=dict)
    shared_data: Mapping[Any, Any] | None = None
    transport: Sequence[Any] | None = None
    transports: Sequence[Any] = ()
    queue_enabled: bool = False
    queue_maxsize: int = 2048
    queue_full_policy: str = "block"

    def __post_init__(self) -> None:
        if not isinstance(self.level, str) or not self.level.strip():
            raise ConfigurationError(f"level must be a non-empty string, got {self.level!r}")
        if self.structured is not None and not isinstance(self.structured, Mapping):
            raise ConfigurationError("structured must map level names to format specifications")
        if self.shared_data is not None and not isinstance(self.shared_data, Mapping):
            raise ConfigurationError("shared_data must be a mapping")
        if self.transport is not None and (isinstance(self.transport, (str, Mapping)) or not isinstance(self.transport, Sequence)):
            raise ConfigurationError("transport must be a list of transport entries")
        if self.queue_maxsize <= 0:
            raise ConfigurationError("queue_maxsize must be positive")
        policy = self.queue_full_policy.strip().lower()
        if policy not in QUEUE_POLICIES:
            raise ConfigurationError(f"queue_full_policy must be one of {sorted(QUEUE_POLICIES)}, got {self.queue_full_policy!r}")
        object.__setattr__(self, "queue_full_policy", policy)
        object.__setattr__(self, "level", self.level.strip().lower())
        object.__setattr__(self, "structured", dict(self.structured or {}))
        object.__setattr__(self, "transports", tuple(self.transports))
        if self.transport is not None:
            object.__setattr__(self, "transport", tuple(self.transport))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "MessagingConfig":
        """Build a configuration from a plain mapping.

        Keys may be snake_case or camelCase; unknown keys are ignored.

        Examples
        --------
        >>> config = MessagingConfig.from_mapping({"sharedData": {"app": "demo"}, "level": "DEBUG"})
        >>> config.level, dict(config.shared_data)
        ('debug', {'app': 'demo'})
        """

        if values is None:
            return cls()
        if not isinstance(values, Mapping):
            raise ConfigurationError("configuration must be a mapping")
        known = set(cls.__dataclass_fields__)
        accepted: dict[str, Any] = {}
        for key, value in values.items():
            name = snake_case(str(key))
            if name not in known:
                logger.debug("Ignoring unknown configuration key %r", key)
                continue
            accepted[name] = value
        return cls(**accepted)

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "MessagingConfig":
        """Return a copy adjusted by ``LOG_LEVEL`` and the ``LOG_QUEUE_*`` variables.

        Examples
        --------
        >>> config = MessagingConfig().with_env_overrides({"LOG_LEVEL": "warn", "LOG_QUEUE_ENABLED": "yes"})
        >>> config.level, config.queue_enabled
        ('warn', True)
        """

        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}
        level = env.get("LOG_LEVEL")
        if level and level.strip():
            changes["level"] = level
        if env.get("LOG_QUEUE_ENABLED") not in (None, ""):
            changes["queue_enabled"] = _env_bool("LOG_QUEUE_ENABLED", self.queue_enabled, env)
        maxsize = env.get("LOG_QUEUE_MAXSIZE")
        if maxsize not in (None, ""):
            changes["queue_maxsize"] = _env_int("LOG_QUEUE_MAXSIZE", maxsize)
        return replace(self, **changes) if changes else self


def _env_bool(name: str, default: bool, environ: Mapping[str, str] | None = None) -> bool:
    """Return the boolean value of an environment variable with fallback.

    Examples
    --------
    >>> _env_bool("LOG_EXAMPLE_BOOL", True, {})
    True
    >>> _env_bool("LOG_EXAMPLE_BOOL", True, {"LOG_EXAMPLE_BOOL": "0"})
    False
    """

    env = os.environ if environ is None else environ
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def enable_dotenv(search_path: str | Path | None = None) -> Path | None:
    """Load the nearest ``.env`` file without overriding existing variables.

    The search starts at ``search_path`` (default: the working directory) and
    walks up the parent directories. Subsequent calls return the cached
    result.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, ``None`` when none was found.
    """

    global _DOTENV_PATH, _DOTENV_LOADED
    with _DOTENV_LOCK:
        if _DOTENV_LOADED:
            return _DOTENV_PATH
        if search_path is None:
            found = find_dotenv(usecwd=True)
        else:
            found = _find_upwards(Path(search_path))
        path = Path(found).resolve() if found else None
        if path is not None:
            load_dotenv(path, override=False)
            logger.debug("Loaded environment from %s", path)
        _DOTENV_PATH = path
        _DOTENV_LOADED = True
        return path


def _find_upwards(start: Path) -> str:
    directory = start if start.is_dir() else start.parent
    for candidate in (directory, *directory.resolve().parents):
        env_file = candidate / ".env"
        if env_file.is_file():
            return str(env_file)
    return ""


def should_use_dotenv(explicit: bool | None = None, environ: Mapping[str, str] | None = None) -> bool:
    """Decide whether ``.env`` loading is active.

    An explicit CLI flag wins over :data:`DOTENV_ENV_VAR`.

    Examples
    --------
    >>> should_use_dotenv(None, {DOTENV_ENV_VAR: "1"})
    True
    >>> should_use_dotenv(False, {DOTENV_ENV_VAR: "1"})
    False
    """

    if explicit is not None:
        return explicit
    return _env_bool(DOTENV_ENV_VAR, False, environ)


def _reset_dotenv_state_for_testing() -> None:
    """Forget which ``.env`` file was loaded."""

    global _DOTENV_PATH, _DOTENV_LOADED
    with _DOTENV_LOCK:
        _DOTENV_PATH = None
        _DOTENV_LOADED = False


__all__ = [
    "DOTENV_ENV_VAR",
    "MessagingConfig",
    "QUEUE_POLICIES",
    "enable_dotenv",
    "should_use_dotenv",
    "snake_case",
]
