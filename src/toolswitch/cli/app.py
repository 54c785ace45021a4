# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application rendering, checking and running serialized tool invocations."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from ..config import InvocationConfig, load_invocation
from ..diagnostics import DiagnosticLog
from ..errors import ToolSwitchError
from ..logging import get_console
from ..process import CommandOptions
from ..task import DataDrivenToolTask
from .shared import CLIError, CLILogger, build_cli_logger

PACKAGE_LOGGER = "toolswitch"

app = typer.Typer(
    name="toolswitch",
    help="Resolve tool switches into command lines and run the tool.",
    add_completion=False,
    no_args_is_help=True,
)


class RenderMode(str, Enum):
    """Select which rendering entry point the ``render`` command prints."""

    FULL = "full"
    DIRECT = "direct"
    RESPONSE_FILE = "response-file"


InvocationArgument = Annotated[
    Path,
    typer.Argument(exists=True, dir_okay=False, help="Invocation file (.json or .toml)."),
]
NoEmojiOption = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")]


def configure_logging(*, verbose: bool) -> None:
    """Attach a Rich handler to the package logger.

    Args:
        verbose: ``True`` to emit DEBUG records, otherwise WARNING and above.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=get_console(color=True, emoji=False, stderr=True), show_path=False)
        logger.addHandler(handler)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Emit debug logging.")] = False,
) -> None:
    """Resolve tool switches into command lines and run the tool."""

    configure_logging(verbose=verbose)


def _prepare_task(path: Path) -> tuple[DataDrivenToolTask, DiagnosticLog]:
    try:
        invocation: InvocationConfig = load_invocation(path)
        switches = invocation.active_switches()
    except ToolSwitchError as exc:
        raise CLIError(str(exc)) from exc
    diagnostics = DiagnosticLog()
    task = DataDrivenToolTask(invocation.tool, switches=tuple(switches.values()), diagnostics=diagnostics)
    return task, diagnostics


def _report(diagnostics: DiagnosticLog, logger: CLILogger) -> None:
    for record in diagnostics.records:
        logger.fail(record.message)


@app.command("render")
def render_command(
    invocation: InvocationArgument,
    mode: Annotated[RenderMode, typer.Option("--mode", "-m", help="Rendering entry point.")] = RenderMode.FULL,
    no_emoji: NoEmojiOption = False,
) -> None:
    """Print the command line for an invocation file."""

    logger = build_cli_logger(emoji=not no_emoji)
    try:
        task, _ = _prepare_task(invocation)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    if mode is RenderMode.DIRECT:
        rendered = task.generate_command_line_commands()
        if rendered is None:
            logger.warn(
                f"Command line of {len(task.command_line)} characters requires a response file "
                f"(threshold {task.definition.response_file_threshold}).",
            )
            raise typer.Exit(code=1)
    elif mode is RenderMode.RESPONSE_FILE:
        rendered = task.generate_response_file_commands() or ""
    else:
        rendered = task.command_line
    logger.echo(rendered)


@app.command("check")
def check_command(invocation: InvocationArgument, no_emoji: NoEmojiOption = False) -> None:
    """Validate an invocation file and report superseded switches."""

    logger = build_cli_logger(emoji=not no_emoji)
    try:
        task, diagnostics = _prepare_task(invocation)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    task.validate_relations()
    for name in task.validate_overrides():
        logger.warn(f"Switch '{name}' is overridden and will not be emitted.")
    _report(diagnostics, logger)
    if not task.validate_parameters():
        raise typer.Exit(code=1)
    logger.ok(f"{len(task.active_switches)} active switch(es) are valid.")


@app.command("run")
def run_tool_command(
    invocation: InvocationArgument,
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", file_okay=False, help="Working directory for the tool."),
    ] = None,
    no_emoji: NoEmojiOption = False,
) -> None:
    """Run the tool described by an invocation file."""

    logger = build_cli_logger(emoji=not no_emoji)
    try:
        task, diagnostics = _prepare_task(invocation)
        success = task.execute(options=CommandOptions(cwd=cwd))
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except FileNotFoundError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc

    _report(diagnostics, logger)
    if not success:
        raise typer.Exit(code=1)
    logger.ok(f"Tool exited with code {task.exit_code}.")


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["RenderMode", "app", "configure_logging", "main"]
