"""Thread-based queue adapter for transport fan-out.

Purpose
-------
Decouple message construction from IO-bound transports so logging calls
never wait for output to be written.

Contents
--------
* :class:`QueueAdapter` - background worker implementation of :class:`QueuePort`.

System Role
-----------
Executes transport fan-out on a dedicated thread; ``stop(drain=True)``
writes everything accepted before the stop request.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import Any

from structured_messaging.application.ports.queue import Delivery, QueuePort

LOGGER = logging.getLogger(__name__)

_STOP = object()
"""Sentinel placed on the queue to end the worker loop."""

DROP_POLICIES = frozenset({"block", "drop"})


class QueueAdapter(QueuePort):
    """Hand deliveries to ``worker`` on a background thread.

    Examples
    --------
    >>> written = []
    >>> adapter = QueueAdapter(worker=lambda delivery: written.append(delivery.payload))
    >>> adapter.start()
    >>> adapter.put(Delivery(level="info", payload={"message": "msg"}))
    True
    >>> adapter.stop(drain=True)
    >>> written
    [{'message': 'msg'}]
    """

    def __init__(
        self,
        *,
        worker: Callable[[Delivery], Any] | None = None,
        maxsize: int = 2048,
        drop_policy: str = "block",
        on_drop: Callable[[Delivery], None] | None = None,
        timeout: float | None = 1.0,
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        """Configure capacity, overflow behaviour and callbacks.

        Parameters
        ----------
        worker:
            Callable receiving each delivery; :meth:`set_worker` may install
            it after construction.
        maxsize:
            Capacity of the queue.
        drop_policy:
            ``"block"`` makes callers wait up to ``timeout`` for room;
            ``"drop"`` rejects deliveries immediately when the queue is full.
        on_drop:
            Called with every delivery that is discarded.
        timeout:
            Wait used by the blocking policy; ``None`` waits indefinitely.
        stop_timeout:
            Deadline used by :meth:`stop` when the call gives none.
        diagnostic:
            Receives ``queue_dropped``, ``queue_worker_error`` and
            ``queue_shutdown_timeout`` notifications.
        """
        policy = drop_policy.strip().lower()
        if policy not in DROP_POLICIES:
            raise ValueError(f"drop_policy must be one of {sorted(DROP_POLICIES)}, got {drop_policy!r}")
        self._worker = worker
        self._policy = policy
        self._on_drop = on_drop
        self._timeout = timeout
        self._stop_timeout = stop_timeout
        self._diagnostic = diagnostic
        self._items: queue.Queue[Any] = queue.Queue(maxsize=maxsize)
        self._thread: threading.Thread | None = None
        self._discard = False

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Launch the worker thread; a running worker is left alone."""
        if self.running:
            return
        self._discard = False
        self._thread = threading.Thread(target=self._loop, name="structured-messaging-queue", daemon=True)
        self._thread.start()

    def stop(self, *, drain: bool = True, timeout: float | None = None) -> None:
        """End the worker thread.

        With ``drain=True`` every delivery accepted so far reaches the worker
        first; otherwise pending deliveries are handed to ``on_drop``.

        Raises
        ------
        RuntimeError
            When the worker is still busy after the deadline.
        """
        thread = self._thread
        if thread is None:
            return
        deadline = self._stop_timeout if timeout is None else timeout
        self._discard = not drain
        try:
            self._items.put(_STOP, timeout=deadline)
        except queue.Full:
            LOGGER.warning("Queue stayed full while stopping; waiting for the worker to finish")
        thread.join(deadline)
        if thread.is_alive():
            self._notify("queue_shutdown_timeout", {"timeout": deadline, "drain": drain})
            raise RuntimeError("Queue worker failed to stop within the allotted timeout")
        self._thread = None
        self._discard = False

    def put(self, delivery: Delivery) -> bool:
        """Enqueue ``delivery``; ``False`` means it was discarded.

        Deliveries offered while the worker is not running are discarded.
        """
        if not self.running:
            self._drop(delivery)
            return False
        blocking = self._policy == "block"
        try:
            self._items.put(delivery, block=blocking, timeout=self._timeout if blocking else None)
        except queue.Full:
            self._drop(delivery)
            return False
        return True

    def set_worker(self, worker: Callable[[Delivery], Any]) -> None:
        self._worker = worker

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Wait until every queued delivery was handled; ``False`` on timeout."""
        idle = threading.Event()

        def _join() -> None:
            self._items.join()
            idle.set()

        threading.Thread(target=_join, daemon=True).start()
        return idle.wait(timeout)

    def _loop(self) -> None:
        while True:
            item = self._items.get()
            try:
                if item is _STOP:
                    return
                if self._discard:
                    self._drop(item)
                else:
                    self._deliver(item)
            finally:
                self._items.task_done()

    def _deliver(self, delivery: Delivery) -> None:
        if self._worker is None:
            return
        try:
            self._worker(delivery)
        except Exception as exc:
            LOGGER.error("Queue worker raised an exception; continuing", exc_info=exc)
            self._notify("queue_worker_error", {"level": delivery.level, "exception": repr(exc)})

    def _drop(self, delivery: Delivery) -> None:
        self._notify("queue_dropped", {"level": delivery.level})
        if self._on_drop is not None:
            self._guarded(self._on_drop, "drop handler", delivery)

    def _notify(self, name: str, payload: dict[str, Any]) -> None:
        if self._diagnostic is not None:
            self._guarded(self._diagnostic, f"diagnostic hook ({name})", name, payload)

    @staticmethod
    def _guarded(callback: Callable[..., Any], description: str, *args: Any) -> None:
        try:
            callback(*args)
        except Exception as exc:
            LOGGER.error("Queue %s raised an exception; continuing", description, exc_info=exc)


__all__ = ["DROP_POLICIES", "QueueAdapter"]
