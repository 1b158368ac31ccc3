"""Use case orchestrating the processing pipeline for a single logging call.

Purpose
-------
Tie together threshold filtering, message assembly and transport fan-out,
either inline or through the background queue.

Contents
--------
* :func:`build_diagnostic_emitter` – wraps the optional diagnostic hook.
* :func:`create_process_message` factory returning the runtime callable.

System Role
-----------
Application-layer orchestrator invoked by :class:`StructuredMessaging` to
turn the configured collaborators into a callable logging pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from structured_messaging.application.ports import ClockPort, Delivery, QueuePort, TransportPort
from structured_messaging.domain import LevelTable, LogEvent

from .assemble_message import MessageAssembler

logger = logging.getLogger(__name__)

ProcessResult = dict[str, Any]
DiagnosticHook = Callable[[str, dict[str, Any]], None] | None


def build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Callable[[str, dict[str, Any]], None]:
    """Return a callable forwarding pipeline milestones to ``diagnostic``.

    Exceptions raised by the hook are logged and swallowed.
    """

    def emit(name: str, payload: dict[str, Any]) -> None:
        if diagnostic is None:
            return
        try:
            diagnostic(name, payload)
        except Exception:
            logger.debug("Diagnostic hook failed for %s", name, exc_info=True)

    return emit


def build_fan_out(
    transports: Sequence[TransportPort],
    levels: LevelTable,
    emit: Callable[[str, dict[str, Any]], None],
) -> Callable[[Delivery], ProcessResult]:
    """Return the callable writing one delivery to every admitting transport."""

    def fan_out(delivery: Delivery) -> ProcessResult:
        emitted = 0
        failed = 0
        for transport in transports:
            threshold = getattr(transport, "level", None)
            if threshold is not None and not levels.enabled(delivery.level, threshold=threshold):
                continue
            try:
                transport.emit(delivery.payload, level=delivery.level)
            except Exception as exc:
                failed += 1
                logger.warning("Transport %s failed to emit a message", type(transport).__name__, exc_info=True)
                emit("transport_error", {"transport": type(transport).__name__, "error": str(exc)})
                continue
            emitted += 1
        if failed:
            return {"ok": False, "reason": "transport_error", "level": delivery.level, "emitted": emitted}
        emit("emitted", {"level": delivery.level, "emitted": emitted})
        return {"ok": True, "level": delivery.level, "emitted": emitted}

    return fan_out


class ProcessMessage:
    """Callable pipeline bound to one logger's collaborators."""

    def __init__(
        self,
        *,
        assembler: MessageAssembler,
        levels: LevelTable,
        threshold: str,
        clock: ClockPort,
        fan_out: Callable[[Delivery], ProcessResult],
        queue: QueuePort | None,
        emit: Callable[[str, dict[str, Any]], None],
    ) -> None:
        self._assembler = assembler
        self._levels = levels
        self._threshold = threshold
        self._clock = clock
        self._queue = queue
        self._emit = emit
        self.fan_out = fan_out

    def enabled(self, level: str) -> bool:
        return self._levels.enabled(level, threshold=self._threshold)

    def craft(
        self,
        level: str,
        message: Any,
        data: Mapping[Any, Any] | None = None,
        *,
        error: BaseException | None = None,
    ) -> dict[Any, Any]:
        """Return the structured mapping without writing it anywhere."""
        event = LogEvent.from_call(level, message, data, error=error, timestamp=self._clock.now())
        return self._assembler(event)

    def __call__(
        self,
        *,
        level: str,
        message: Any,
        data: Mapping[Any, Any] | None = None,
        error: BaseException | None = None,
    ) -> ProcessResult:
        if not self.enabled(level):
            return {"ok": False, "reason": "below_threshold", "level": level}
        payload = self.craft(level, message, data, error=error)
        delivery = Delivery(level=level, payload=payload)
        if self._queue is not None:
            if self._queue.put(delivery):
                self._emit("queued", {"level": level})
                return {"ok": True, "level": level, "queued": True}
            self._emit("dropped", {"level": level})
            return {"ok": False, "reason": "queue_full", "level": level}
        return self.fan_out(delivery)


def create_process_message(
    *,
    assembler: MessageAssembler,
    levels: LevelTable,
    threshold: str,
    transports: Sequence[TransportPort],
    clock: ClockPort,
    queue: QueuePort | None = None,
    diagnostic: DiagnosticHook = None,
) -> ProcessMessage:
    """Build the orchestrator capturing the current dependency wiring.

    Parameters
    ----------
    assembler:
        :class:`MessageAssembler` producing the structured mapping.
    levels:
        :class:`LevelTable` used for threshold comparisons.
    threshold:
        Least severe level still emitted by the logger.
    transports:
        Adapters implementing :class:`TransportPort`.
    clock:
        Provider of timezone-aware timestamps.
    queue:
        Optional :class:`QueuePort` enabling background fan-out.
    diagnostic:
        Optional callback invoked with pipeline milestones.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from structured_messaging.application.use_cases.select_format import LevelFormatSelector
    >>> class Clock:
    ...     def now(self):
    ...         return datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> class Recorder:
    ...     level = None
    ...     def __init__(self):
    ...         self.payloads = []
    ...     def emit(self, payload, *, level):
    ...         self.payloads.append(payload)
    >>> recorder = Recorder()
    >>> process = create_process_message(
    ...     assembler=MessageAssembler(selector=LevelFormatSelector({"info": {"msg": "log.message"}}), id_provider=lambda: "id"),
    ...     levels=LevelTable(),
    ...     threshold="info",
    ...     transports=[recorder],
    ...     clock=Clock(),
    ... )
    >>> process(level="info", message="hello")
    {'ok': True, 'level': 'info', 'emitted': 1}
    >>> process(level="debug", message="hidden")["reason"]
    'below_threshold'
    >>> recorder.payloads
    [{'msg': 'hello'}]
    """

    emit = build_diagnostic_emitter(diagnostic)
    fan_out = build_fan_out(transports, levels, emit)
    return ProcessMessage(
        assembler=assembler,
        levels=levels,
        threshold=threshold,
        clock=clock,
        fan_out=fan_out,
        queue=queue,
        emit=emit,
    )


__all__ = [
    "DiagnosticHook",
    "ProcessMessage",
    "ProcessResult",
    "build_diagnostic_emitter",
    "build_fan_out",
    "create_process_message",
]
