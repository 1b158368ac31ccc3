"""Recursive construction of structured output from a format specification."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

from .data_context import ABSENT, DataContext
from .format_spec import Branch, FormatSpec, Leaf, Literal, SpecNode


def build(accumulator: MutableMapping[Any, Any], spec: FormatSpec | Branch, context: DataContext) -> MutableMapping[Any, Any]:
    """Fill ``accumulator`` following ``spec`` and return it.

    Keys are written in specification order. A key is left out when its
    value is absent, when it resolves to an empty mapping, or when it is a
    nested group that ended up empty. Falsy values such as ``None``,
    ``False`` and ``0`` are kept.

    Examples
    --------
    >>> ctx = DataContext({"log": {"level": "info"}, "empty": {}})
    >>> spec = FormatSpec.parse({"level": "log.level", "nested": {"e": "empty"}, "missing": "nope"})
    >>> build({}, spec, ctx)
    {'level': 'info'}
    """

    branch = spec.root if isinstance(spec, FormatSpec) else spec
    for key, node in branch:
        value = _build_node(node, context)
        if value is not ABSENT:
            accumulator[key] = value
    return accumulator


def _build_node(node: SpecNode, context: DataContext) -> Any:
    if isinstance(node, Branch):
        nested = build({}, node, context)
        return nested if nested else ABSENT
    if isinstance(node, Leaf):
        return _keep(context.resolve(node.path))
    if isinstance(node, Literal):
        resolved = context.resolve(node.value)
        return node.value if resolved is ABSENT else _keep(resolved)
    return ABSENT


def _keep(value: Any) -> Any:
    # Arrays are kept even when empty; empty objects are not.
    if isinstance(value, Mapping) and not value:
        return ABSENT
    return value


__all__ = ["build"]
