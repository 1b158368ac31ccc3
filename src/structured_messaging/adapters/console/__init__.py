"""Console transports."""

from __future__ import annotations

from .rich_console import RichConsoleTransport

__all__ = ["RichConsoleTransport"]
