"""Shutdown orchestration for the logger.

Purpose
-------
Provide a unified shutdown routine that drains the queue and flushes and
closes every transport.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Awaitable, Callable

from structured_messaging.application.ports import QueuePort, TransportPort

logger = logging.getLogger(__name__)


def create_shutdown(
    *,
    queue: QueuePort | None,
    transports: Sequence[TransportPort],
) -> Callable[[], Awaitable[None]]:
    """Return an async callable performing the shutdown sequence."""

    async def shutdown() -> None:
        """Drain the queue, then flush and close transports."""
        if queue is not None:
            queue.stop(drain=True)
        for transport in transports:
            try:
                transport.flush()
                transport.close()
            except Exception:
                logger.warning("Transport %s failed to close", type(transport).__name__, exc_info=True)

    return shutdown


__all__ = ["create_shutdown"]
