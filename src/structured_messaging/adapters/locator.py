"""Traceback-based implementation of :class:`ErrorLocatorPort`."""

from __future__ import annotations

import traceback
from typing import Any

from structured_messaging.application.ports.locator import ErrorLocatorPort


class TracebackLocator(ErrorLocatorPort):
    """Report the frame where an exception was raised.

    Columns are 1-based and only present on interpreters that record them.
    Exceptions that were never raised carry no traceback and yield ``None``.

    Examples
    --------
    >>> TracebackLocator().locate(ValueError("never raised")) is None
    True
    >>> try:
    ...     raise ValueError("boom")
    ... except ValueError as exc:
    ...     location = TracebackLocator().locate(exc)
    >>> {"file", "line"} <= set(location)
    True
    """

    def locate(self, error: BaseException) -> dict[str, Any] | None:
        frames = traceback.extract_tb(error.__traceback__)
        if not frames:
            return None
        frame = frames[-1]
        location: dict[str, Any] = {"file": frame.filename, "line": frame.lineno}
        column = getattr(frame, "colno", None)
        if column is not None:
            location["column"] = column + 1
        return location


__all__ = ["TracebackLocator"]
