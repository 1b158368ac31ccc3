"""Adapters implementing the application ports."""

from __future__ import annotations

from .console import RichConsoleTransport
from .file import FileTransport
from .locator import TracebackLocator
from .queue import QueueAdapter
from .stream import StreamTransport

__all__ = [
    "FileTransport",
    "QueueAdapter",
    "RichConsoleTransport",
    "StreamTransport",
    "TracebackLocator",
]
