# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the toolswitch command-line interface."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from typer.testing import CliRunner

from toolswitch.cli import app


def _write_invocation(path: Path, **tool: object) -> Path:
    payload = {
        "tool": {"tool_name": "cl", "switch_order": ["Optimization", "WarningLevel"], **tool},
        "switches": [
            {"name": "WarningLevel", "kind": "enumeration", "switch_value": "/W4"},
            {"name": "Optimization", "kind": "enumeration", "switch_value": "/O2", "overrides": {"O2": "Od"}},
            {"name": "Disable", "kind": "enumeration", "switch_value": "/Od"},
        ],
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_render_prints_resolved_command_line(tmp_path: Path) -> None:
    invocation = _write_invocation(tmp_path / "cl.json", additional_options="/nologo")

    result = CliRunner().invoke(app, ["render", str(invocation)])

    assert result.exit_code == 0
    assert result.stdout.strip() == "/O2 /W4 /nologo"


def test_render_direct_mode_fails_over_threshold(tmp_path: Path) -> None:
    invocation = _write_invocation(tmp_path / "cl.json", response_file_threshold=4)

    direct = CliRunner().invoke(app, ["render", str(invocation), "--mode", "direct", "--no-emoji"])
    response = CliRunner().invoke(app, ["render", str(invocation), "--mode", "response-file"])

    assert direct.exit_code == 1
    assert "requires a response file" in direct.stdout
    assert response.exit_code == 0
    assert response.stdout.strip() == "/O2 /W4"


def test_check_reports_overridden_switches(tmp_path: Path) -> None:
    invocation = _write_invocation(tmp_path / "cl.json")

    result = CliRunner().invoke(app, ["check", str(invocation), "--no-emoji"])

    assert result.exit_code == 0
    assert "Switch 'Disable' is overridden" in result.stdout
    assert "2 active switch(es) are valid." in result.stdout


def test_invalid_invocation_file_exits_with_error(tmp_path: Path) -> None:
    invocation = tmp_path / "broken.json"
    invocation.write_text('{"switches": [{"name": "X", "kind": "boolean"}]}', encoding="utf-8")

    result = CliRunner().invoke(app, ["render", str(invocation), "--no-emoji"])

    assert result.exit_code == 1
    assert "Boolean switch 'X'" in result.stdout


def test_run_executes_tool_and_reports_failure(tmp_path: Path) -> None:
    invocation = tmp_path / "python.json"
    invocation.write_text(
        json.dumps(
            {
                "tool": {"tool_path": sys.executable},
                "switches": [
                    {"name": "Code", "kind": "string", "switch_value": "-c", "separator": " ", "value": "exit(7)"},
                ],
            },
        ),
        encoding="utf-8",
    )

    result = CliRunner().invoke(app, ["run", str(invocation), "--no-emoji"])

    assert result.exit_code == 1
    assert "exited with code 7" in result.stdout
