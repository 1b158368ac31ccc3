"""File transport appending one JSON line per message."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from pathlib import Path
from typing import IO, Any

from structured_messaging.application.ports.transport import TransportPort
from structured_messaging.domain.levels import level_name

from ._formatting import render_line


class FileTransport(TransportPort):
    """Append structured messages to ``filename``.

    The file is opened lazily on the first message and parent directories
    are created as needed.
    """

    def __init__(self, *, filename: str | Path, level: str | None = None, encoding: str = "utf-8", eol: str = "\n") -> None:
        self.level = level_name(level) if level is not None else None
        self._path = Path(filename)
        self._encoding = encoding
        self._eol = eol
        self._handle: IO[str] | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, payload: Mapping[Any, Any], *, level: str) -> None:
        line = render_line(payload) + self._eol
        with self._lock:
            if self._handle is None:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._handle = self._path.open("a", encoding=self._encoding)
            self._handle.write(line)
            self._handle.flush()

    def flush(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.flush()

    def close(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.close()
                self._handle = None


__all__ = ["FileTransport"]
