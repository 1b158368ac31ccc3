from __future__ import annotations

from typing import Any

import pytest

from structured_messaging.adapters.queue import QueueAdapter
from structured_messaging.application.use_cases.assemble_message import MessageAssembler
from structured_messaging.application.use_cases.process_event import build_diagnostic_emitter, create_process_message
from structured_messaging.application.use_cases.select_format import LevelFormatSelector
from structured_messaging.domain import ConfigurationError, LevelTable

SPEC = {"info": {"level": "log.level", "message": "log.message"}, "error": {"level": "log.level", "message": "log.message"}}


class _FailingTransport:
    level = None

    def emit(self, payload: Any, *, level: str) -> None:
        raise OSError("disk gone")


def _process(transports: list, *, clock: Any, threshold: str = "info", queue: Any = None, diagnostic: Any = None):
    assembler = MessageAssembler(selector=LevelFormatSelector(SPEC), id_provider=lambda: "id")
    return create_process_message(
        assembler=assembler,
        levels=LevelTable(),
        threshold=threshold,
        transports=transports,
        clock=clock,
        queue=queue,
        diagnostic=diagnostic,
    )


def test_admitted_message_reaches_every_transport(clock, transport_factory) -> None:
    first, second = transport_factory(), transport_factory()
    process = _process([first, second], clock=clock)

    result = process(level="info", message="hello")

    assert result == {"ok": True, "level": "info", "emitted": 2}
    assert first.payloads == second.payloads == [{"level": "info", "message": "hello"}]
    assert first.levels == ["info"]


def test_messages_below_threshold_are_not_built(clock, recording_transport) -> None:
    process = _process([recording_transport], clock=clock, threshold="warn")

    result = process(level="info", message="hidden")

    assert result == {"ok": False, "reason": "below_threshold", "level": "info"}
    assert recording_transport.payloads == []


def test_transport_threshold_is_respected(clock, transport_factory) -> None:
    strict = transport_factory(level="error")
    loose = transport_factory()
    process = _process([strict, loose], clock=clock)

    process(level="info", message="info message")
    process(level="error", message="error message")

    assert [payload["message"] for payload in strict.payloads] == ["error message"]
    assert [payload["message"] for payload in loose.payloads] == ["info message", "error message"]


def test_transport_failure_is_reported_not_raised(clock, recording_transport) -> None:
    events: list[tuple[str, dict]] = []
    process = _process([_FailingTransport(), recording_transport], clock=clock, diagnostic=lambda name, payload: events.append((name, payload)))

    result = process(level="info", message="hello")

    assert result == {"ok": False, "reason": "transport_error", "level": "info", "emitted": 1}
    assert recording_transport.payloads == [{"level": "info", "message": "hello"}]
    assert events[0][0] == "transport_error"
    assert events[0][1]["transport"] == "_FailingTransport"


def test_unknown_level_is_a_configuration_error(clock, recording_transport) -> None:
    process = _process([recording_transport], clock=clock)
    with pytest.raises(ConfigurationError):
        process(level="fatal", message="x")


def test_craft_builds_without_emitting(clock, recording_transport) -> None:
    process = _process([recording_transport], clock=clock)
    assert process.craft("info", "hi %{name}", {"name": "Ada"}) == {"level": "info", "message": "hi Ada"}
    assert recording_transport.payloads == []


def test_queue_defers_fan_out(clock, recording_transport) -> None:
    queue = QueueAdapter()
    process = _process([recording_transport], clock=clock, queue=queue)
    queue.set_worker(process.fan_out)
    queue.start()

    result = process(level="info", message="queued")
    queue.stop(drain=True)

    assert result == {"ok": True, "level": "info", "queued": True}
    assert recording_transport.payloads == [{"level": "info", "message": "queued"}]


def test_stopped_queue_reports_queue_full(clock, recording_transport) -> None:
    process = _process([recording_transport], clock=clock, queue=QueueAdapter())

    assert process(level="info", message="lost")["reason"] == "queue_full"
    assert recording_transport.payloads == []


def test_diagnostic_emitter_swallows_hook_errors() -> None:
    def broken(name: str, payload: dict) -> None:
        raise RuntimeError("hook")

    emit = build_diagnostic_emitter(broken)
    emit("emitted", {})
    build_diagnostic_emitter(None)("emitted", {})
