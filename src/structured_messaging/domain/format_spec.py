"""Declarative output schemas ("format specifications").

Purpose
-------
Compile the nested mappings supplied by configuration into an immutable tree
of spec nodes that the builder walks once per event.

Contents
--------
* :class:`Leaf`, :class:`Literal`, :class:`Branch` – the node variants.
* :class:`FormatSpec` – parsed, immutable specification.
* :data:`DEFAULT_FORMAT` / :data:`FORMAT_LEVELS` – the built-in schema used
  for every standard severity.

System Role
-----------
Configuration is parsed here at logger construction time; key order of the
source mapping is kept because it dictates output key order.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Hashable, Union

from .errors import ConfigurationError
from .levels import LogLevel


@dataclass(slots=True, frozen=True)
class Leaf:
    """Dotted key path resolved against the data context."""

    path: str


@dataclass(slots=True, frozen=True)
class Literal:
    """Number or boolean used as a literal key; emitted verbatim when unresolved."""

    value: int | float | bool


@dataclass(slots=True, frozen=True)
class Branch:
    """Ordered group of named child nodes producing a nested object."""

    entries: tuple[tuple[Hashable, "SpecNode"], ...]

    def __iter__(self) -> Iterator[tuple[Hashable, "SpecNode"]]:
        return iter(self.entries)


SpecNode = Union[Leaf, Literal, Branch]


def parse_node(value: Any) -> SpecNode | None:
    """Translate one configuration value into a spec node.

    Returns ``None`` for values the builder ignores (``None`` and any type
    that is neither a primitive nor a mapping).

    Examples
    --------
    >>> parse_node("log.level")
    Leaf(path='log.level')
    >>> parse_node(8)
    Literal(value=8)
    >>> parse_node(None) is None
    True
    """

    if isinstance(value, str):
        return Leaf(value)
    if isinstance(value, (bool, int, float)):
        return Literal(value)
    if isinstance(value, Mapping):
        return _parse_branch(value)
    return None


def _parse_branch(mapping: Mapping[Any, Any]) -> Branch:
    entries = []
    for key, value in mapping.items():
        node = parse_node(value)
        if node is not None:
            entries.append((key, node))
    return Branch(tuple(entries))


class FormatSpec:
    """Immutable, parsed format specification.

    Examples
    --------
    >>> spec = FormatSpec.parse({"level": "log.level", "time": {"created": "log.timestamp"}})
    >>> [key for key, _ in spec.root]
    ['level', 'time']
    >>> spec.to_mapping()
    {'level': 'log.level', 'time': {'created': 'log.timestamp'}}
    """

    __slots__ = ("_root", "_source")

    def __init__(self, root: Branch, source: Mapping[Any, Any]) -> None:
        self._root = root
        self._source = source

    @classmethod
    def parse(cls, spec: "FormatSpec | Mapping[Any, Any]") -> "FormatSpec":
        if isinstance(spec, FormatSpec):
            return spec
        if not isinstance(spec, Mapping):
            raise ConfigurationError(f"A structured format must be a mapping, got {type(spec).__name__}")
        return cls(_parse_branch(spec), MappingProxyType(_freeze(spec)))

    @property
    def root(self) -> Branch:
        return self._root

    def to_mapping(self) -> dict[Any, Any]:
        """Return a plain-dict copy of the source specification."""
        return _thaw(self._source)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormatSpec):
            return NotImplemented
        return self._root == other._root

    def __hash__(self) -> int:
        return hash(self._root)

    def __repr__(self) -> str:
        return f"FormatSpec({self.to_mapping()!r})"


def _freeze(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    return {key: MappingProxyType(_freeze(value)) if isinstance(value, Mapping) else value for key, value in mapping.items()}


def _thaw(mapping: Mapping[Any, Any]) -> dict[Any, Any]:
    return {key: _thaw(value) if isinstance(value, Mapping) else value for key, value in mapping.items()}


DEFAULT_FORMAT: Mapping[str, Any] = MappingProxyType(
    {
        "id": "calc.id",
        "level": "log.level",
        "message": "log.message",
        "topics": "topics",
        "priority": "calc.priority",
        "template": "log.template",
        "transactionId": "session.transactionId",
        "sessionId": "session.sessionId",
        "traceId": "session.traceId",
        "time": {
            "format": "calc.timeFormat",
            "created": "log.timestamp",
            "expires": "expires",
        },
        "pii": "pii",
        "dataSchema": "dataSchema",
        "data": "data",
        "context": {
            "app": {
                "env": "env.NODE_ENV",
                "name": "env.CONFIG_COMPUTE",
                "platform": "env.CONFIG_PLATFORM",
                "file": "log.context.file",
                "line": "log.context.line",
                "column": "log.context.column",
            },
            "compute": {
                "processId": "process.pid",
            },
        },
    }
)
"""Schema applied to every standard severity unless overridden."""

DEFAULT_SPEC = FormatSpec.parse(DEFAULT_FORMAT)

FORMAT_LEVELS: Mapping[str, FormatSpec] = MappingProxyType({level.severity: DEFAULT_SPEC for level in LogLevel})
"""Built-in specification per standard severity name."""


__all__ = [
    "Branch",
    "DEFAULT_FORMAT",
    "DEFAULT_SPEC",
    "FORMAT_LEVELS",
    "FormatSpec",
    "Leaf",
    "Literal",
    "SpecNode",
    "parse_node",
]
