"""Named placeholder ("splat") substitution in message text.

A placeholder is ``%{key.path}``. Every token is replaced with the textual
form of the value it resolves to; unresolved tokens stay verbatim. The scan
happens once over the original text, so substituted values are never scanned
again even when they contain placeholder syntax themselves.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence, Set as AbstractSet
from dataclasses import dataclass
from typing import Any

from .data_context import ABSENT, DataContext

PLACEHOLDER_PATTERN = re.compile(r"%\{([^\s}]*)\}")
"""Matches ``%{<key path>}``; the key path may not contain whitespace or ``}``."""


@dataclass(slots=True, frozen=True)
class SplatResult:
    """Outcome of :func:`substitute`.

    Attributes
    ----------
    had_template:
        ``True`` when the message contained at least one placeholder,
        whether or not anything was substituted.
    message:
        Message text after substitution.
    """

    had_template: bool
    message: str


def to_json(value: Any) -> str:
    """Serialize ``value`` compactly, preserving mapping order."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_fallback)


def _json_fallback(value: Any) -> Any:
    if isinstance(value, AbstractSet):
        return list(value)
    return str(value)


def render_value(value: Any) -> str:
    """Return the text that replaces a placeholder resolving to ``value``.

    Examples
    --------
    >>> render_value("Alan"), render_value(None), render_value(False), render_value(5)
    ('Alan', 'null', 'false', '5')
    >>> render_value(["log", "info"])
    '["log","info"]'
    >>> render_value({"query": "SELECT 1", "name": "Alan"})
    '{"query":"SELECT 1","name":"Alan"}'

    Containers JSON cannot encode (non-scalar keys, cycles) fall back to
    ``str``:

    >>> render_value({(1, 2): "pair"})
    "{(1, 2): 'pair'}"
    """

    if isinstance(value, str):
        return value
    if value is None or isinstance(value, (bool, int, float)):
        return to_json(value)
    if isinstance(value, (Mapping, AbstractSet)) or (
        isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray))
    ):
        try:
            return to_json(value)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def substitute(message: str, context: DataContext) -> SplatResult:
    """Replace placeholders in ``message`` with values from ``context``.

    Examples
    --------
    >>> ctx = DataContext({"user": {"name": "Ada"}})
    >>> substitute("Hello %{user.name} from %{user.city}", ctx)
    SplatResult(had_template=True, message='Hello Ada from %{user.city}')
    >>> substitute("plain text", ctx)
    SplatResult(had_template=False, message='plain text')
    """

    had_template = False

    def _replace(match: re.Match[str]) -> str:
        nonlocal had_template
        had_template = True
        value = context.resolve(match.group(1))
        if value is ABSENT:
            return match.group(0)
        return render_value(value)

    rendered = PLACEHOLDER_PATTERN.sub(_replace, message)
    return SplatResult(had_template=had_template, message=rendered)


__all__ = ["PLACEHOLDER_PATTERN", "SplatResult", "render_value", "substitute", "to_json"]
