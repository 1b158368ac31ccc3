"""Use case turning one raw logging event into a structured message.

Purpose
-------
Compose the event-scoped data context, substitute placeholders in the
message, pick the format specification for the level and build the output.

Contents
--------
* :func:`compose_context` – merge computed, event, error and caller data.
* :class:`MessageAssembler` – callable bound to one logger's configuration.

System Role
-----------
Application-layer orchestrator of the pure domain algorithms; the process
use case calls it once per admitted event.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from structured_messaging.application.ports import ErrorLocatorPort, IdProvider
from structured_messaging.domain import DataContext, LogEvent, build, defensive_copy, substitute

from .select_format import LevelFormatSelector

logger = logging.getLogger(__name__)

PRIORITY = 1
TIME_FORMAT = "iso8061"
TOPICS = ("log",)


def compose_context(
    event: LogEvent,
    *,
    id_provider: IdProvider,
    locator: ErrorLocatorPort | None = None,
    shared_data: Mapping[Any, Any] | None = None,
) -> DataContext:
    """Build the data context for ``event``.

    Layers are merged at the top level, later ones winning: computed fields,
    topics, raw event fields, a copy of the per-call data and finally a copy
    of the logger-wide shared data. ``calc.id`` is a value provider, so the
    identifier is generated only when something resolves it.
    """

    log_fields = event.to_fields()
    if event.error is not None and locator is not None:
        location = locator.locate(event.error)
        if location:
            log_fields["context"] = dict(location)

    computed = {
        "calc": {
            "id": id_provider,
            "priority": PRIORITY,
            "timeFormat": TIME_FORMAT,
        },
        "topics": list(TOPICS),
        "log": log_fields,
    }
    return DataContext.compose(
        computed,
        _copy_mapping(event.data, "per-call data"),
        _copy_mapping(shared_data, "shared data"),
    )


def _copy_mapping(value: Any, label: str) -> dict[Any, Any] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        logger.debug("Ignoring %s of type %s; a mapping is required", label, type(value).__name__)
        return None
    return defensive_copy(value)


class MessageAssembler:
    """Produce the structured mapping for a :class:`LogEvent`.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> assembler = MessageAssembler(
    ...     selector=LevelFormatSelector({"info": {"level": "log.level", "message": "log.message"}}),
    ...     id_provider=lambda: "id-1",
    ... )
    >>> event = LogEvent("info", "Hi %{user}", datetime(2025, 1, 1, tzinfo=timezone.utc), data={"user": "Ada"})
    >>> assembler(event)
    {'level': 'info', 'message': 'Hi Ada'}
    """

    def __init__(
        self,
        *,
        selector: LevelFormatSelector,
        id_provider: IdProvider,
        locator: ErrorLocatorPort | None = None,
        shared_data: Mapping[Any, Any] | None = None,
    ) -> None:
        self._selector = selector
        self._id_provider = id_provider
        self._locator = locator
        self._shared_data = shared_data

    def __call__(self, event: LogEvent) -> dict[Any, Any]:
        context = compose_context(
            event,
            id_provider=self._id_provider,
            locator=self._locator,
            shared_data=self._shared_data,
        )
        result = substitute(event.message, context)
        if result.had_template:
            context.put("log.template", event.message)
            context.put("log.message", result.message)
        spec = self._selector.select(event.level)
        return dict(build({}, spec, context))


def assemble(
    event: LogEvent,
    *,
    selector: LevelFormatSelector,
    id_provider: IdProvider,
    locator: ErrorLocatorPort | None = None,
    shared_data: Mapping[Any, Any] | None = None,
) -> dict[Any, Any]:
    """One-shot form of :class:`MessageAssembler`."""
    return MessageAssembler(selector=selector, id_provider=id_provider, locator=locator, shared_data=shared_data)(event)


__all__ = ["MessageAssembler", "PRIORITY", "TIME_FORMAT", "TOPICS", "assemble", "compose_context"]
