"""Command-line interface for structured_messaging.

Purpose
-------
Expose the metadata banner and small demonstrations of the message pipeline
so operators can try format specifications without writing code.

Contents
--------
* :func:`cli` - Click group with global ``--traceback`` and ``--use-dotenv``
  switches.
* ``info`` / ``format`` / ``counter`` subcommands.
* :func:`main` - entry point delegating to ``lib_cli_exit_tools.run_cli``.

System Role
-----------
Presentation layer only: every command goes through
:class:`structured_messaging.StructuredMessaging`.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as config_module
from .adapters._formatting import render_line
from .structured_messaging import StructuredMessaging, summary_info

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def _parse_json_object(value: str | None, option: str) -> dict[str, Any] | None:
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc.msg}", param_hint=option) from exc
    if not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object", param_hint=option)
    return parsed


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(version)s")
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load the nearest .env file before running (also enabled by {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool | None) -> None:
    """Structured message formatter utilities."""

    if config_module.should_use_dotenv(use_dotenv):
        config_module.enable_dotenv()
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback
    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata for the installed package."""

    click.echo(summary_info(), nl=False)


@cli.command("format", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("level")
@click.argument("message")
@click.option("--data", "data_json", default=None, help="Per-call data as a JSON object.")
@click.option("--shared", "shared_json", default=None, help="Shared data as a JSON object.")
@click.option("--spec", "spec_json", default=None, help="Format specification for LEVEL as a JSON object.")
def cli_format(level: str, message: str, data_json: str | None, shared_json: str | None, spec_json: str | None) -> None:
    """Print the structured JSON line for MESSAGE logged at LEVEL."""

    data = _parse_json_object(data_json, "--data")
    shared = _parse_json_object(shared_json, "--shared")
    spec = _parse_json_object(spec_json, "--spec")
    settings: dict[str, Any] = {"transport": [], "shared_data": shared}
    if spec is not None:
        settings["structured"] = {level: spec}
    messaging = StructuredMessaging(settings)
    click.echo(render_line(messaging.logger().format(level, message, data)))


@cli.command("counter", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--count", "count", type=click.IntRange(min=1), default=2, show_default=True, help="Number of messages to log.")
def cli_counter(count: int) -> None:
    """Log numbered messages using a value provider held in shared data."""

    current = 0

    def next_number() -> int:
        nonlocal current
        current += 1
        return current

    messaging = StructuredMessaging(
        {
            "transport": [{"type": "stream", "options": {"stream": "stdout"}}],
            "shared_data": {"count": next_number},
            "structured": {"info": {"level": "log.level", "message": "log.message", "template": "log.template"}},
        }
    )
    log = messaging.logger()
    try:
        for _ in range(count):
            log.info("This is log message number %{count}.")
    finally:
        messaging.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI through ``lib_cli_exit_tools`` and restore traceback settings.

    Parameters
    ----------
    argv:
        Optional sequence of argument strings (defaults to ``sys.argv[1:]``).

    Returns
    -------
    int
        Exit code reported by ``lib_cli_exit_tools.run_cli``.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        lib_cli_exit_tools.config.traceback = previous_traceback
        lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
