# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution and response-file output."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# external tool execution, normalising arguments and disabling ``shell=True``.
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper enforces safe execution.
import tempfile
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final, Protocol

LOGGER = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE: Final[int] = 124
RESPONSE_FILE_SUFFIX: Final[str] = ".rsp"


@dataclass(slots=True)
class CommandOptions:
    """Command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture_output: bool = False
    text: bool = True
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


class ToolRunner(Protocol):
    """Execute a fully assembled argument vector and return the exit code."""

    def __call__(self, args: Sequence[str], *, options: CommandOptions | None = None) -> int:
        """Run ``args`` and return the process exit code."""


def _ensure_text(value: str | bytes | None) -> str | None:
    """Return ``value`` decoded to text when supplied as ``bytes``.

    Args:
        value: Stream output captured from subprocess execution.

    Returns:
        str | None: Text output or ``None`` when no data was captured.
    """

    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata. A timeout is reported
        with exit code ``124`` and a note appended to ``stderr``.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    normalized = _normalize_args(args)
    resolved_options = options or CommandOptions()

    try:
        # Bandit: commands originate from rendered tool switches; we pass
        # argument lists directly without shell expansion.
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - controlled arguments, not user supplied
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=resolved_options.capture_output,
            text=resolved_options.text,
            timeout=resolved_options.timeout,
        )
    except subprocess.TimeoutExpired as exc:
        stderr = _ensure_text(exc.stderr)
        timeout_msg = f"Command timed out after {resolved_options.timeout:.1f}s"
        completed = subprocess.CompletedProcess(
            args=list(normalized),
            returncode=TIMEOUT_EXIT_CODE,
            stdout=_ensure_text(exc.stdout) or "",
            stderr=f"{stderr}\n{timeout_msg}" if stderr else timeout_msg,
        )
    return completed


def run_tool(args: Sequence[str], *, options: CommandOptions | None = None) -> int:
    """Default :class:`ToolRunner` returning the exit code of :func:`run_command`."""

    completed = run_command(args, options=options)
    LOGGER.debug("command %s exited with %d", normalized_head(args), completed.returncode)
    return completed.returncode


def normalized_head(args: Sequence[str]) -> str:
    """Return the executable name of ``args`` for log messages."""

    return Path(args[0]).name if args else ""


def write_response_file(content: str, *, directory: Path | None = None, encoding: str = "utf-16") -> Path:
    """Write ``content`` to a new response file and return its path.

    Args:
        content: Rendered command line.
        directory: Directory receiving the file; the system temp directory when omitted.
        encoding: Text encoding understood by the target tool.

    Returns:
        Path: Location of the written file. The caller owns its removal.
    """

    with tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        suffix=RESPONSE_FILE_SUFFIX,
        dir=directory,
        delete=False,
    ) as handle:
        handle.write(content)
    path = Path(handle.name)
    LOGGER.debug("wrote %d characters to response file %s", len(content), path)
    return path


__all__ = [
    "CommandOptions",
    "RESPONSE_FILE_SUFFIX",
    "TIMEOUT_EXIT_CODE",
    "ToolRunner",
    "run_command",
    "run_tool",
    "write_response_file",
]
