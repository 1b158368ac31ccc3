"""Rich-powered console transport implementing :class:`TransportPort`.

Purpose
-------
Write structured messages to the terminal, optionally tinted per severity,
routing selected levels to standard error.

Contents
--------
* :data:`_STYLE_MAP` - default level-to-style mapping.
* :class:`RichConsoleTransport` - transport created for ``{"type": "console"}``.

System Role
-----------
Default sink created when a logger is configured without transports.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from rich.console import Console

from structured_messaging.application.ports.transport import TransportPort
from structured_messaging.domain.levels import LogLevel, level_name

from .._formatting import render_line


_STYLE_MAP: Mapping[str, str] = {
    LogLevel.ERROR.severity: "red",
    LogLevel.WARN.severity: "yellow",
    LogLevel.INFO.severity: "cyan",
    LogLevel.HTTP.severity: "magenta",
    LogLevel.VERBOSE.severity: "blue",
    LogLevel.DEBUG.severity: "dim",
    LogLevel.SILLY.severity: "dim italic",
}

#: Default Rich styles keyed by severity name.


class RichConsoleTransport(TransportPort):
    """Print one JSON line per message through Rich consoles."""

    def __init__(
        self,
        *,
        level: str | None = None,
        console: Console | None = None,
        error_console: Console | None = None,
        stderr_levels: Iterable[str] = (),
        colorize: bool = False,
        force_color: bool = False,
        no_color: bool = False,
        styles: Mapping[str, str] | None = None,
    ) -> None:
        """Configure consoles, stderr routing and optional colour."""
        self.level = level_name(level) if level is not None else None
        self._console = console if console is not None else Console(force_terminal=force_color or None, no_color=no_color)
        if error_console is not None:
            self._error_console = error_console
        elif console is not None:
            self._error_console = console
        else:
            self._error_console = Console(stderr=True, force_terminal=force_color or None, no_color=no_color)
        self._stderr_levels = frozenset(level_name(name) for name in stderr_levels)
        self._colorize = colorize and not no_color
        self._style_map = dict(_STYLE_MAP)
        if styles:
            self._style_map.update({level_name(key): value for key, value in styles.items()})

    def emit(self, payload: Mapping[Any, Any], *, level: str) -> None:
        """Print ``payload`` as compact JSON.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True, width=200)
        >>> transport = RichConsoleTransport(console=console)
        >>> transport.emit({"level": "info", "topics": ["log"]}, level="info")
        >>> console.export_text()
        '{"level":"info","topics":["log"]}\\n'
        """
        target = self._error_console if level in self._stderr_levels else self._console
        style = self._style_map.get(level, "") if self._colorize else ""
        target.print(render_line(payload), style=style or None, markup=False, highlight=False, soft_wrap=True)

    def flush(self) -> None:
        for console in (self._console, self._error_console):
            console.file.flush()

    def close(self) -> None:
        self.flush()


__all__ = ["RichConsoleTransport"]
