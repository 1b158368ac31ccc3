"""Static package metadata surfaced to the CLI commands and documentation.

Purpose
-------
Expose the current project metadata as simple constants. The values mirror
the fields in ``pyproject.toml`` and must be kept in sync when releasing.

Contents
--------
* Module-level constants describing the published package.
* :func:`print_info` rendering the constants for the CLI ``info`` command.
"""

from __future__ import annotations

from typing import Callable

name = "structured_messaging"
title = "Structured log messages built from declarative per-level format specifications"
version = "0.1.0"
homepage = "https://github.com/structured-messaging/structured_messaging"
author = "structured_messaging maintainers"
author_email = "maintainers@structured-messaging.invalid"
shell_command = "structured-messaging"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Print the summarised metadata block used by the CLI ``info`` command.

    Parameters
    ----------
    writer:
        Optional callable receiving the rendered text; defaults to ``print``
        without a trailing newline.

    Examples
    --------
    >>> print_info()  # doctest: +ELLIPSIS
    Info for structured_messaging:
    ...
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    text = "\n".join(lines) + "\n"
    if writer is None:
        print(text, end="")
    else:
        writer(text)
