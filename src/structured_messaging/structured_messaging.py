"""Logging façade that wires domain, application, and adapter layers together.

Purpose
-------
Expose a small API for host applications: build a :class:`StructuredMessaging`
from a configuration mapping, ask it for a logger and log. This module is the
single composition point translating configuration and environment overrides
into the layered wiring.

Contents
--------
* :class:`StructuredMessaging` - composition root and lifecycle owner.
* :class:`LoggerProxy` - per-level helpers returning diagnostic dictionaries.
* :class:`SystemClock`, :class:`UuidProvider` - default value providers.
* :func:`create_transports` - declarative transport table to adapters.
* :func:`summary_info` - metadata banner used by the CLI.

System Role
-----------
Outer shell of the system: policy stays in the inner layers, while
orchestration, configuration and I/O live here.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from threading import RLock
from typing import Any
from uuid import uuid4

from .adapters import FileTransport, QueueAdapter, RichConsoleTransport, StreamTransport, TracebackLocator
from .application.ports import ClockPort, ErrorLocatorPort, IdProvider, TransportPort
from .application.use_cases.assemble_message import MessageAssembler
from .application.use_cases.process_event import DiagnosticHook, ProcessMessage, ProcessResult, create_process_message
from .application.use_cases.select_format import LevelFormatSelector
from .application.use_cases.shutdown import create_shutdown
from .config import MessagingConfig, snake_case
from .domain import ConfigurationError, LevelTable, LogLevel

logger = logging.getLogger(__name__)


class SystemClock(ClockPort):
    """Clock returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class UuidProvider(IdProvider):
    """Generate message identifiers.

    Examples
    --------
    >>> len(UuidProvider()())
    36
    """

    def __call__(self) -> str:
        return str(uuid4())


def _stream_target(name: str) -> Any:
    return sys.stderr if name == "stderr" else sys.stdout


_TRANSPORT_FACTORIES: dict[str, Callable[..., TransportPort]] = {
    "console": RichConsoleTransport,
    "file": FileTransport,
    "stream": StreamTransport,
}


def create_transports(entries: Sequence[Any]) -> list[TransportPort]:
    """Instantiate the transports described by ``entries``.

    Each entry is a mapping ``{"type": kind, "options": {...}}``; option
    names may be camelCase. Unknown kinds are skipped.

    Examples
    --------
    >>> [type(t).__name__ for t in create_transports([{"type": "console"}, {"type": "ignore"}])]
    ['RichConsoleTransport']
    """

    transports: list[TransportPort] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise ConfigurationError(f"Transport entries must be mappings, got {type(entry).__name__}")
        kind = str(entry.get("type", "")).strip().lower()
        factory = _TRANSPORT_FACTORIES.get(kind)
        if factory is None:
            logger.debug("Skipping transport of unsupported type %r", kind)
            continue
        options = entry.get("options") or {}
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Options for transport {kind!r} must be a mapping")
        kwargs = {snake_case(str(key)): value for key, value in options.items()}
        if kind == "stream" and isinstance(kwargs.get("stream"), str):
            kwargs["stream"] = _stream_target(kwargs["stream"])
        try:
            transports.append(factory(**kwargs))
        except TypeError as exc:
            raise ConfigurationError(f"Invalid options for transport {kind!r}: {exc}") from exc
    return transports


class LoggerProxy:
    """Per-level logging helpers bound to one processing pipeline.

    Every call returns the diagnostic dictionary produced by the pipeline,
    e.g. ``{"ok": True, "level": "info", "emitted": 1}``.
    """

    def __init__(self, process: ProcessMessage) -> None:
        self._process = process

    def log(self, level: str | LogLevel, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self._process(level=_level_text(level), message=message, data=data, error=error)

    def error(self, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self.log(LogLevel.ERROR, message, data, error=error)

    def warn(self, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self.log(LogLevel.WARN, message, data, error=error)

    def info(self, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self.log(LogLevel.INFO, message, data, error=error)

    def http(self, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self.log(LogLevel.HTTP, message, data, error=error)

    def verbose(self, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self.log(LogLevel.VERBOSE, message, data, error=error)

    def debug(self, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self.log(LogLevel.DEBUG, message, data, error=error)

    def silly(self, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> ProcessResult:
        return self.log(LogLevel.SILLY, message, data, error=error)

    def enabled(self, level: str | LogLevel) -> bool:
        """Return ``True`` when ``level`` passes the logger threshold."""
        return self._process.enabled(_level_text(level))

    def format(self, level: str | LogLevel, message: Any, data: Mapping[Any, Any] | None = None, *, error: BaseException | None = None) -> dict[Any, Any]:
        """Return the structured mapping for a call without writing it anywhere.

        Examples
        --------
        >>> proxy = StructuredMessaging({"transport": [], "structured": {"info": {"msg": "log.message"}}}).logger()
        >>> proxy.format("info", "Hello %{name}", {"name": "Ada"})
        {'msg': 'Hello Ada'}
        """
        return self._process.craft(_level_text(level), message, data, error=error)


def _level_text(level: str | LogLevel) -> str:
    return level.severity if isinstance(level, LogLevel) else level.strip().lower()


class StructuredMessaging:
    """Composition root turning a configuration into a structured logger.

    Parameters
    ----------
    config:
        :class:`MessagingConfig`, a plain mapping accepted by
        :meth:`MessagingConfig.from_mapping`, or ``None`` for defaults.
        ``LOG_LEVEL`` and ``LOG_QUEUE_*`` environment variables override it.
    clock, id_provider, locator:
        Optional replacements for the default value providers.
    diagnostic:
        Optional callback receiving pipeline milestones.

    Raises
    ------
    ConfigurationError
        For an unknown threshold level or malformed transport entries.
    FormatSpecMissingError
        When a configured level has neither a built-in nor an override
        format specification.

    Examples
    --------
    >>> from io import StringIO
    >>> buffer = StringIO()
    >>> messaging = StructuredMessaging({
    ...     "transport": [{"type": "stream", "options": {"stream": buffer}}],
    ...     "structured": {"info": {"level": "log.level", "message": "log.message"}},
    ... })
    >>> messaging.logger().info("This is an info message.")
    {'ok': True, 'level': 'info', 'emitted': 1}
    >>> buffer.getvalue()
    '{"level":"info","message":"This is an info message."}\\n'
    >>> messaging.shutdown()
    """

    def __init__(
        self,
        config: MessagingConfig | Mapping[str, Any] | None = None,
        *,
        clock: ClockPort | None = None,
        id_provider: IdProvider | None = None,
        locator: ErrorLocatorPort | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        settings = config if isinstance(config, MessagingConfig) else MessagingConfig.from_mapping(config)
        settings = settings.with_env_overrides()
        levels = LevelTable(settings.levels)
        levels.priority(settings.level)
        selector = LevelFormatSelector(settings.structured)
        selector.validate(levels)

        transports: list[TransportPort] = []
        if settings.transport is not None:
            transports.extend(create_transports(settings.transport))
        transports.extend(settings.transports)
        if settings.transport is None and not settings.transports:
            transports.append(RichConsoleTransport())

        self._config = settings
        self._levels = levels
        self._selector = selector
        self._transports: tuple[TransportPort, ...] = tuple(transports)
        self._clock = clock or SystemClock()
        self._id_provider = id_provider or UuidProvider()
        self._locator = locator or TracebackLocator()
        self._diagnostic = diagnostic
        self._queue: QueueAdapter | None = None
        self._logger: LoggerProxy | None = None
        self._closed = False
        self._lock = RLock()

    @property
    def config(self) -> MessagingConfig:
        return self._config

    @property
    def transports(self) -> tuple[TransportPort, ...]:
        return self._transports

    @property
    def levels(self) -> LevelTable:
        return self._levels

    def logger(self) -> LoggerProxy:
        """Return the logger, creating it on first use."""
        with self._lock:
            if self._logger is None:
                self._logger = LoggerProxy(self._build_process())
            return self._logger

    loggers = logger

    def _build_process(self) -> ProcessMessage:
        assembler = MessageAssembler(
            selector=self._selector,
            id_provider=self._id_provider,
            locator=self._locator,
            shared_data=self._config.shared_data,
        )
        if self._config.queue_enabled:
            self._queue = QueueAdapter(
                maxsize=self._config.queue_maxsize,
                drop_policy=self._config.queue_full_policy,
                diagnostic=self._diagnostic,
            )
        process = create_process_message(
            assembler=assembler,
            levels=self._levels,
            threshold=self._config.level,
            transports=self._transports,
            clock=self._clock,
            queue=self._queue,
            diagnostic=self._diagnostic,
        )
        if self._queue is not None:
            self._queue.set_worker(process.fan_out)
            self._queue.start()
        return process

    @property
    def closed(self) -> bool:
        return self._closed

    async def shutdown_async(self) -> None:
        """Drain the queue and flush/close every transport from a running event loop."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            shutdown = create_shutdown(queue=self._queue, transports=self._transports)
        await shutdown()

    def shutdown(self) -> None:
        """Synchronous form of :meth:`shutdown_async`.

        Calling it more than once has no further effect. Inside a running
        event loop await :meth:`shutdown_async` instead.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.shutdown_async())
            return
        raise RuntimeError("Cannot run synchronous shutdown inside an active event loop; await shutdown_async() instead.")


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Examples
    --------
    >>> "version" in summary_info()
    True
    """
    from . import __init__conf__

    lines: list[str] = []

    def _capture(text: str) -> None:
        lines.append(text)

    __init__conf__.print_info(writer=_capture)
    return "".join(lines)


__all__ = [
    "LoggerProxy",
    "StructuredMessaging",
    "SystemClock",
    "UuidProvider",
    "create_transports",
    "summary_info",
]
