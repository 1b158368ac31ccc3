"""Serialisation shared by every transport.

Why
---
All transports write one compact JSON document per message with the key
order produced by the format specification. Keeping the rule in one place
keeps console, file and stream output byte-identical.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from structured_messaging.domain.splat import to_json


def render_line(payload: Mapping[Any, Any]) -> str:
    """Return ``payload`` as a single compact JSON line (without end-of-line).

    Examples
    --------
    >>> render_line({"message": "hi", "level": "info", 8: 8, False: False})
    '{"message":"hi","level":"info","8":8,"false":false}'
    """

    return to_json(dict(payload))


__all__ = ["render_line"]
