"""Port describing the queue infrastructure for background fan-out."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class Delivery:
    """Structured payload waiting to be written by the transports."""

    level: str
    payload: Mapping[Any, Any]


@runtime_checkable
class QueuePort(Protocol):
    """Bridge between logging callers and the transport worker."""

    def start(self) -> None:
        """Start the queue worker."""

    def stop(self, *, drain: bool = True) -> None:
        """Stop the queue worker, optionally draining queued deliveries."""

    def put(self, delivery: Delivery) -> bool:
        """Enqueue ``delivery``; return ``False`` when it was dropped."""


__all__ = ["Delivery", "QueuePort"]
