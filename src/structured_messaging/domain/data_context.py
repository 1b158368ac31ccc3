"""Event-scoped data tree and hierarchical key resolution.

Purpose
-------
Hold every value that placeholders and format specifications may reference
while one event is being formatted, and resolve dotted key paths against it.

Contents
--------
* :data:`ABSENT` – sentinel for "no value" (distinct from ``None``).
* :func:`defensive_copy` – recursive copy of containers that shares leaves.
* :class:`KeyResolver` – path walker with per-event memoisation of value
  providers.
* :class:`DataContext` – read-only mapping over the tree plus ``resolve``.

System Role
-----------
Lowest layer of the construction pipeline. The splat engine and the format
builder never look into the tree themselves; they only call
:meth:`DataContext.resolve`.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable, Iterator, Mapping, MutableMapping, Sequence
from collections.abc import Set as AbstractSet
from typing import Any, Hashable

logger = logging.getLogger(__name__)

KeyPath = str | int | float | bool


class _Absent:
    """Marker for values that do not exist (JSON ``undefined``)."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "_Absent":
        return self


ABSENT: Any = _Absent()


def defensive_copy(value: Any, _seen: dict[int, Any] | None = None) -> Any:
    """Copy nested containers so event-scoped writes never reach the source.

    Mappings become plain dicts, lists and tuples are rebuilt, sets keep
    their type. Every other object (including value providers) is shared,
    which keeps stateful providers such as counters working across events.

    Examples
    --------
    >>> source = {"a": [1, {"b": 2}]}
    >>> copied = defensive_copy(source)
    >>> copied == source, copied["a"] is source["a"]
    (True, False)
    >>> counter = lambda: 1
    >>> defensive_copy({"count": counter})["count"] is counter
    True

    Self-referencing containers are copied with the same shape:

    >>> loop = {"name": "loop"}
    >>> loop["self"] = loop
    >>> copied = defensive_copy(loop)
    >>> copied["self"] is copied, copied is loop
    (True, False)
    """

    seen = {} if _seen is None else _seen
    if id(value) in seen:
        return seen[id(value)]
    if isinstance(value, Mapping):
        mapping: dict[Any, Any] = {}
        seen[id(value)] = mapping
        mapping.update((key, defensive_copy(item, seen)) for key, item in value.items())
        return mapping
    if isinstance(value, AbstractSet):
        return type(value)(defensive_copy(item, seen) for item in value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        if isinstance(value, tuple):
            return tuple(defensive_copy(item, seen) for item in value)
        items: list[Any] = []
        seen[id(value)] = items
        items.extend(defensive_copy(item, seen) for item in value)
        return items
    return value


def split_key_path(path: KeyPath) -> tuple[KeyPath, ...]:
    """Return the segments of ``path``; non-string paths are a single literal key.

    Examples
    --------
    >>> split_key_path("session.traceId")
    ('session', 'traceId')
    >>> split_key_path(8)
    (8,)
    """

    if isinstance(path, str):
        return tuple(path.split("."))
    return (path,)


def is_value_provider(value: Any) -> bool:
    """Return ``True`` for callables that should be invoked during resolution."""
    return callable(value) and not isinstance(value, type)


def _accepts_context(provider: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(provider)
    except (TypeError, ValueError):
        return False
    try:
        signature.bind(None)
    except TypeError:
        return False
    return True


def _literal_text(key: KeyPath) -> str:
    if isinstance(key, str):
        return key
    return json.dumps(key)


def _candidate_keys(segment: KeyPath) -> list[Hashable]:
    candidates: list[Hashable] = [segment]
    text = _literal_text(segment)
    if text != segment:
        candidates.append(text)
    if isinstance(segment, str) and segment.lstrip("-").isdigit():
        candidates.append(int(segment))
    return candidates


def _same_kind(node: Mapping[Any, Any], candidate: Hashable) -> bool:
    # False/True hash like 0/1; a bool only matches a bool key and vice versa.
    if not isinstance(candidate, (bool, int, float)):
        return True
    wanted = isinstance(candidate, bool)
    return any(isinstance(key, bool) is wanted for key in node if key == candidate)


def _lookup(node: Any, segment: KeyPath) -> tuple[bool, Hashable, Any]:
    """Return ``(found, key, value)`` for ``segment`` on ``node``."""

    if isinstance(node, Mapping):
        for candidate in _candidate_keys(segment):
            if candidate in node and _same_kind(node, candidate):
                return True, candidate, node[candidate]
        return False, segment, ABSENT
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray)):
        if isinstance(segment, bool):
            return False, segment, ABSENT
        try:
            index = int(segment)
        except (TypeError, ValueError):
            return False, segment, ABSENT
        if 0 <= index < len(node):
            return True, index, node[index]
    return False, segment, ABSENT


class KeyResolver:
    """Resolve key paths against one :class:`DataContext`.

    Value providers met while walking a path are invoked at most once; their
    result (or :data:`ABSENT` when they raise) is remembered per container
    and key, so every path that reaches the same provider sees the same value.
    The data tree itself is never modified.
    """

    def __init__(self, context: "DataContext") -> None:
        self._context = context
        self._memo: dict[tuple[int, Hashable], Any] = {}

    def resolve(self, path: KeyPath) -> Any:
        if path is None:
            return ABSENT
        current: Any = self._context.tree
        for segment in split_key_path(path):
            if current is None or current is ABSENT:
                return ABSENT
            found, key, value = _lookup(current, segment)
            if not found:
                return ABSENT
            if is_value_provider(value):
                value = self.provide(current, key, value)
            current = value
        return current

    def provide(self, container: Any, key: Hashable, provider: Callable[..., Any]) -> Any:
        """Return the memoised result of ``provider`` stored under ``container[key]``."""
        slot = (id(container), key)
        if slot in self._memo:
            return self._memo[slot]
        try:
            if _accepts_context(provider):
                value = provider(self._context)
            else:
                value = provider()
        except Exception:
            logger.debug("Value provider for key %r raised; treating it as absent", key, exc_info=True)
            value = ABSENT
        self._memo[slot] = value
        return value


class DataContext(Mapping[str, Any]):
    """Event-scoped data tree exposed read-only plus :meth:`resolve`.

    Subscripting a top-level key holding a value provider returns the
    provider's memoised result, so providers reading each other through the
    context agree with placeholders and format specifications.

    Examples
    --------
    >>> calls = []
    >>> ctx = DataContext({"count": lambda: calls.append(1) or len(calls), "user": {"name": "Ada"}})
    >>> ctx.resolve("user.name")
    'Ada'
    >>> ctx.resolve("count"), ctx.resolve("count")
    (1, 1)
    >>> ctx.resolve("user.missing") is ABSENT
    True
    """

    def __init__(self, tree: MutableMapping[Any, Any] | None = None) -> None:
        self._tree: MutableMapping[Any, Any] = tree if tree is not None else {}
        self._resolver = KeyResolver(self)

    @classmethod
    def compose(cls, *layers: Mapping[Any, Any] | None) -> "DataContext":
        """Merge ``layers`` at the top level; later layers win on collisions."""

        tree: dict[Any, Any] = {}
        for layer in layers:
            if layer:
                tree.update(layer)
        return cls(tree)

    @property
    def tree(self) -> MutableMapping[Any, Any]:
        return self._tree

    def resolve(self, path: KeyPath) -> Any:
        """Return the value at ``path`` or :data:`ABSENT`."""
        return self._resolver.resolve(path)

    def put(self, path: str, value: Any) -> None:
        """Store ``value`` at dotted ``path``, creating intermediate mappings."""

        *parents, leaf = path.split(".")
        node = self._tree
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, MutableMapping):
                child = {}
                node[segment] = child
            node = child
        node[leaf] = value

    def __getitem__(self, key: Any) -> Any:
        value = self._tree[key]
        if is_value_provider(value):
            value = self._resolver.provide(self._tree, key, value)
            if value is ABSENT:
                raise KeyError(key)
        return value

    def __iter__(self) -> Iterator[Any]:
        return iter(self._tree)

    def __len__(self) -> int:
        return len(self._tree)


def resolve(path: KeyPath, context: DataContext) -> Any:
    """Functional shortcut for ``context.resolve(path)``."""
    return context.resolve(path)


__all__ = [
    "ABSENT",
    "DataContext",
    "KeyPath",
    "KeyResolver",
    "defensive_copy",
    "is_value_provider",
    "resolve",
    "split_key_path",
]
