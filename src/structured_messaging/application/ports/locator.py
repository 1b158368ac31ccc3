"""Port for extracting the source location of an exception."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ErrorLocatorPort(Protocol):
    """Return ``{"file", "line", "column"}`` for ``error`` or ``None``."""

    def locate(self, error: BaseException) -> dict[str, Any] | None: ...


__all__ = ["ErrorLocatorPort"]
