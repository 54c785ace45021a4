# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from toolswitch.diagnostics import DiagnosticLog
from toolswitch.process import CommandOptions
from toolswitch.switches import SwitchKind, ToolSwitch


class RecordingRunner:
    """Tool runner double capturing the argument vectors it receives."""

    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.calls: list[list[str]] = []
        self.response_files: list[str] = []

    def __call__(self, args: Sequence[str], *, options: CommandOptions | None = None) -> int:
        self.calls.append(list(args))
        for arg in args:
            if arg.startswith("@"):
                with open(arg[1:], encoding="utf-16") as handle:
                    self.response_files.append(handle.read())
        return self.exit_code


@pytest.fixture
def diagnostics() -> DiagnosticLog:
    """Return an empty diagnostics log."""
    return DiagnosticLog()


@pytest.fixture
def runner() -> RecordingRunner:
    """Return a runner double that reports success."""
    return RecordingRunner()


@pytest.fixture
def compiler_switches() -> tuple[ToolSwitch, ...]:
    """Return a small set of compiler-like switches."""
    return (
        ToolSwitch(name="WarningLevel", kind=SwitchKind.ENUMERATION, switch_value="/W4"),
        ToolSwitch(name="Optimization", kind=SwitchKind.ENUMERATION, switch_value="/O2"),
        ToolSwitch(
            name="MinimalRebuild",
            kind=SwitchKind.BOOLEAN,
            switch_value="/Gm",
            reverse_switch_value="/Gm-",
            boolean_value=True,
        ),
    )
