# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Diagnostic codes, message catalogue and the default diagnostics sink."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Protocol, runtime_checkable

LOGGER = logging.getLogger(__name__)

# ShellExecute's SE_ERR_ACCESSDENIED; tools launched without sufficient rights exit with it.
ACCESS_DENIED_EXIT_CODE: Final[int] = 5


class DiagnosticCode(str, Enum):
    """Enumerate the diagnostics the switch engine may report."""

    ARGUMENT_OUT_OF_RANGE = "TSW1001"
    MISSING_REQUIRED_ARGUMENT = "TSW1002"
    RULE_MISSING_TOOL_NAME = "TSW1003"
    EMPTY_COMMAND_LINE = "TSW1004"
    COMMAND_FAILED = "TSW2001"
    COMMAND_FAILED_ACCESS_DENIED = "TSW2002"


_MESSAGES: Final[dict[DiagnosticCode, str]] = {
    DiagnosticCode.ARGUMENT_OUT_OF_RANGE: "The value '{1}' of parameter '{0}' is not valid.",
    DiagnosticCode.MISSING_REQUIRED_ARGUMENT: (
        "The parameter '{0}' requires the missing parameter '{1}' to be set."
    ),
    DiagnosticCode.RULE_MISSING_TOOL_NAME: (
        "The tool name must be set when no command-line template is provided."
    ),
    DiagnosticCode.EMPTY_COMMAND_LINE: "The command-line template '{0}' rendered no command to run.",
    DiagnosticCode.COMMAND_FAILED: 'The command "{0}" exited with code {1}.',
    DiagnosticCode.COMMAND_FAILED_ACCESS_DENIED: (
        'The command "{0}" exited with code {1}. '
        "Please verify that you have sufficient rights to run this command."
    ),
}


def format_message(code: DiagnosticCode, *args: object) -> str:
    """Return the message text for ``code`` with ``args`` substituted.

    Args:
        code: Diagnostic code whose message template should be used.
        *args: Positional values substituted into the template.

    Returns:
        str: Message prefixed with the diagnostic code.
    """

    return f"{code.value}: {_MESSAGES[code].format(*args)}"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Single error recorded by a diagnostics sink."""

    code: DiagnosticCode
    message: str
    args: tuple[object, ...] = ()


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receive errors reported while switches are validated and tools executed."""

    @property
    def has_logged_errors(self) -> bool:
        """Return ``True`` once at least one error has been reported."""

    def error(self, code: DiagnosticCode, *args: object) -> None:
        """Report ``code`` with message arguments ``args``."""


@dataclass(slots=True)
class DiagnosticLog:
    """Collect diagnostics in memory and forward them to :mod:`logging`."""

    logger: logging.Logger = field(default=LOGGER)
    records: list[Diagnostic] = field(default_factory=list)

    @property
    def has_logged_errors(self) -> bool:
        """Return ``True`` once at least one error has been reported.

        Returns:
            bool: Whether :meth:`error` has been called.
        """

        return bool(self.records)

    @property
    def codes(self) -> tuple[DiagnosticCode, ...]:
        """Return the codes reported so far in reporting order."""

        return tuple(record.code for record in self.records)

    def error(self, code: DiagnosticCode, *args: object) -> None:
        """Record ``code`` and log its formatted message at ERROR level.

        Args:
            code: Diagnostic code being reported.
            *args: Values substituted into the code's message template.
        """

        message = format_message(code, *args)
        self.records.append(Diagnostic(code=code, message=message, args=tuple(args)))
        self.logger.error(message)

    def clear(self) -> None:
        """Forget every recorded diagnostic."""

        self.records.clear()


__all__ = [
    "ACCESS_DENIED_EXIT_CODE",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticLog",
    "DiagnosticSink",
    "format_message",
]
