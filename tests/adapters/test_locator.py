from __future__ import annotations

import sys

from structured_messaging.adapters.locator import TracebackLocator


def _raise_here() -> None:
    raise KeyError("missing")


def test_locator_reports_raise_frame() -> None:
    try:
        _raise_here()
    except KeyError as exc:
        location = TracebackLocator().locate(exc)

    assert location is not None
    assert location["file"].endswith("test_locator.py")
    assert location["line"] == _raise_here.__code__.co_firstlineno + 1
    if sys.version_info >= (3, 11):
        assert location["column"] == 5


def test_locator_returns_none_without_traceback() -> None:
    assert TracebackLocator().locate(RuntimeError("fresh")) is None
