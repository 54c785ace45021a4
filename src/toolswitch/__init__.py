# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve declarative tool switches into command lines for external tools."""

from __future__ import annotations

from importlib import metadata

from .config import InvocationConfig, SwitchRecord, ToolDefinition, load_invocation
from .diagnostics import DiagnosticCode, DiagnosticLog, DiagnosticSink
from .errors import (
    DuplicateSwitchError,
    InvocationConfigError,
    MissingRequiredArgumentError,
    SwitchDefinitionError,
    ToolSwitchError,
)
from .generator import CommandLineGenerator, generate_command_line
from .overrides import find_overridden, resolve_overrides
from .response_file import RenderState, ResponseFilePolicy
from .switch_set import ActiveSwitchSet, CaseInsensitiveMap
from .switches import SwitchKind, ToolSwitch, boolean_switch
from .task import DataDrivenToolTask

__all__ = [
    "ActiveSwitchSet",
    "CaseInsensitiveMap",
    "CommandLineGenerator",
    "DataDrivenToolTask",
    "DiagnosticCode",
    "DiagnosticLog",
    "DiagnosticSink",
    "DuplicateSwitchError",
    "InvocationConfig",
    "InvocationConfigError",
    "MissingRequiredArgumentError",
    "RenderState",
    "ResponseFilePolicy",
    "SwitchDefinitionError",
    "SwitchKind",
    "SwitchRecord",
    "ToolDefinition",
    "ToolSwitch",
    "ToolSwitchError",
    "__version__",
    "boolean_switch",
    "find_overridden",
    "generate_command_line",
    "load_invocation",
    "resolve_overrides",
]

try:
    __version__ = metadata.version("toolswitch")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"
