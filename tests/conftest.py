from __future__ import annotations

from datetime import datetime, timezone
from io import StringIO
from typing import Any, Callable

import pytest
from rich.console import Console

from structured_messaging.domain import LogEvent

FIXED_TIME = datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, moment: datetime = FIXED_TIME) -> None:
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


class RecordingTransport:
    """In-memory transport keeping every payload it receives."""

    def __init__(self, level: str | None = None) -> None:
        self.level = level
        self.payloads: list[dict[Any, Any]] = []
        self.levels: list[str] = []
        self.flushed = 0
        self.closed = 0

    def emit(self, payload: dict[Any, Any], *, level: str) -> None:
        self.payloads.append(payload)
        self.levels.append(level)

    def flush(self) -> None:
        self.flushed += 1

    def close(self) -> None:
        self.closed += 1


@pytest.fixture(autouse=True)
def _clean_logging_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LOG_LEVEL", "LOG_QUEUE_ENABLED", "LOG_QUEUE_MAXSIZE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=400, color_system=None, force_terminal=False)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def transport_factory() -> Callable[..., RecordingTransport]:
    return RecordingTransport


@pytest.fixture
def make_event() -> Callable[..., LogEvent]:
    def _make(level: str = "info", message: str = "hello", data: Any = None, error: BaseException | None = None) -> LogEvent:
        return LogEvent.from_call(level, message, data, error=error, timestamp=FIXED_TIME)

    return _make
