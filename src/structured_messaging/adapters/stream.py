"""Transport writing JSON lines to an arbitrary text stream."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any, TextIO

from structured_messaging.application.ports.transport import TransportPort
from structured_messaging.domain.levels import level_name

from ._formatting import render_line


class StreamTransport(TransportPort):
    """Write structured messages to ``stream`` (e.g. :class:`io.StringIO`).

    Examples
    --------
    >>> from io import StringIO
    >>> buffer = StringIO()
    >>> StreamTransport(stream=buffer).emit({"message": "hi"}, level="info")
    >>> buffer.getvalue()
    '{"message":"hi"}\\n'
    """

    def __init__(self, *, stream: TextIO, level: str | None = None, eol: str = "\n") -> None:
        self.level = level_name(level) if level is not None else None
        self._stream = stream
        self._eol = eol
        self._lock = threading.Lock()

    def emit(self, payload: Mapping[Any, Any], *, level: str) -> None:
        with self._lock:
            self._stream.write(render_line(payload) + self._eol)

    def flush(self) -> None:
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    def close(self) -> None:
        self.flush()


__all__ = ["StreamTransport"]
