"""Transport port describing where structured messages are written.

Purpose
-------
Define the boundary between message construction and output. Transports
receive the finished structured mapping and decide how to serialise and
ship it.

Contents
--------
* :class:`TransportPort` – runtime-checkable protocol implemented by the
  console, file and stream adapters.

System Role
-----------
The application layer fans each payload out to every transport whose
threshold admits the event's level.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TransportPort(Protocol):
    """Write structured payloads to a destination."""

    level: str | None

    def emit(self, payload: Mapping[Any, Any], *, level: str) -> None:
        """Write ``payload`` produced for an event at ``level``."""

    def flush(self) -> None:
        """Push buffered output to the destination."""

    def close(self) -> None:
        """Release resources held by the transport."""


__all__ = ["TransportPort"]
