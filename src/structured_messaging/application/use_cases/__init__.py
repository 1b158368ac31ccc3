"""Application use cases: format selection, assembly, processing, shutdown."""

from __future__ import annotations

from .assemble_message import MessageAssembler, assemble, compose_context
from .process_event import ProcessMessage, create_process_message
from .select_format import LevelFormatSelector, select
from .shutdown import create_shutdown

__all__ = [
    "LevelFormatSelector",
    "MessageAssembler",
    "ProcessMessage",
    "assemble",
    "compose_context",
    "create_process_message",
    "create_shutdown",
    "select",
]
