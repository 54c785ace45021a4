# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the data-driven tool task."""

from __future__ import annotations

from pathlib import Path

import pytest

from toolswitch.config import ToolDefinition
from toolswitch.diagnostics import DiagnosticCode, DiagnosticLog
from toolswitch.errors import DuplicateSwitchError
from toolswitch.response_file import RenderState
from toolswitch.switches import SwitchKind, ToolSwitch, boolean_switch
from toolswitch.task import DataDrivenToolTask, split_command_line

from .conftest import RecordingRunner


def _task(
    diagnostics: DiagnosticLog,
    runner: RecordingRunner,
    switches: tuple[ToolSwitch, ...],
    **settings: object,
) -> DataDrivenToolTask:
    definition = ToolDefinition.model_validate({"tool_name": "cl", **settings})
    return DataDrivenToolTask(definition, switches=switches, diagnostics=diagnostics, runner=runner)


def test_property_queries(
    diagnostics: DiagnosticLog, runner: RecordingRunner, compiler_switches: tuple[ToolSwitch, ...]
) -> None:
    task = _task(diagnostics, runner, compiler_switches)

    assert task.is_property_set("optimization")
    assert not task.is_property_set("Sources")
    assert not task.is_property_set("")
    assert not task.is_property_set(None)
    assert task.has_switch("WarningLevel")
    assert not task.has_switch("Sources")


def test_replace_tool_switch_changes_rendering(
    diagnostics: DiagnosticLog, runner: RecordingRunner, compiler_switches: tuple[ToolSwitch, ...]
) -> None:
    task = _task(diagnostics, runner, compiler_switches, switch_order=["Optimization", "WarningLevel"])

    task.replace_tool_switch(boolean_switch("minimalrebuild", False, "/Gm", "/Gm-"))

    assert task.command_line == "/O2 /W4 /Gm-"


def test_active_switch_values_are_indexed_by_active_token(
    diagnostics: DiagnosticLog, runner: RecordingRunner
) -> None:
    task = _task(diagnostics, runner, ())
    task.add_active_switch_tool_value(boolean_switch("Rtti", False, "/GR", "/GR-"))
    task.add_active_switch_tool_value(boolean_switch("Logo", True, "", "/nologo"))

    assert list(task.active_switch_values) == ["/GR-"]
    with pytest.raises(DuplicateSwitchError):
        task.add_active_switch_tool_value(boolean_switch("Other", False, "/x", "/gr-"))


def test_overrides_are_resolved_before_rendering(diagnostics: DiagnosticLog, runner: RecordingRunner) -> None:
    task = _task(
        diagnostics,
        runner,
        (
            boolean_switch("DebugInformation", True, "/Zi", overrides={"Zi": "ZI"}),
            boolean_switch("EditAndContinue", True, "/ZI"),
        ),
    )

    assert task.generate_command_line_commands() == "/Zi"
    assert not task.is_property_set("EditAndContinue")


def test_direct_mode_consumes_one_response_file_request(
    diagnostics: DiagnosticLog, runner: RecordingRunner, compiler_switches: tuple[ToolSwitch, ...]
) -> None:
    task = _task(diagnostics, runner, compiler_switches, additional_options="/extra")

    assert task.render_state is RenderState.NOT_RENDERED
    assert task.generate_command_line_commands() == "/W4 /O2 /Gm /extra"
    assert task.render_state is RenderState.RENDERED_DIRECT
    assert task.generate_response_file_commands() is None
    assert task.generate_response_file_commands() == "/W4 /O2 /Gm /extra"

    task.reset_invocation()
    assert task.render_state is RenderState.NOT_RENDERED


def test_execute_passes_short_command_line_directly(
    diagnostics: DiagnosticLog, runner: RecordingRunner, compiler_switches: tuple[ToolSwitch, ...]
) -> None:
    task = _task(
        diagnostics,
        runner,
        (*compiler_switches, ToolSwitch(name="Sources", kind=SwitchKind.ITEM_ARRAY, value=["my file.c"])),
        tool_path="/opt/msvc/cl",
    )

    assert task.execute()
    assert runner.calls == [["/opt/msvc/cl", "/W4", "/O2", "/Gm", "my file.c"]]
    assert task.exit_code == 0


def test_execute_uses_response_file_for_long_command_lines(
    tmp_path: Path, diagnostics: DiagnosticLog, runner: RecordingRunner
) -> None:
    sources = tuple(f"source_{index}.c" for index in range(20))
    task = _task(
        diagnostics,
        runner,
        (ToolSwitch(name="Sources", kind=SwitchKind.ITEM_ARRAY, value=sources),),
        response_file_threshold=50,
    )

    assert task.execute(response_file_dir=tmp_path)

    [call] = runner.calls
    assert call[0] == "cl"
    assert len(call) == 2 and call[1].startswith("@")
    assert runner.response_files == [" ".join(sources)]
    assert not list(tmp_path.iterdir())


def test_execute_with_template_runs_rendered_command(
    diagnostics: DiagnosticLog, runner: RecordingRunner, compiler_switches: tuple[ToolSwitch, ...]
) -> None:
    definition = ToolDefinition(command_line_template='"my tool" [Optimization] [AdditionalOptions]')
    definition.additional_options = "--flag"
    task = DataDrivenToolTask(definition, switches=compiler_switches, diagnostics=diagnostics, runner=runner)

    assert task.execute()
    assert runner.calls == [["my tool", "/O2", "--flag"]]


def test_execute_keeps_backslashes_in_windows_paths(
    diagnostics: DiagnosticLog, runner: RecordingRunner
) -> None:
    output = ToolSwitch(name="Out", kind=SwitchKind.STRING, switch_value="/Fo", value=r"obj\x64\a.obj")
    source = ToolSwitch(name="Sources", kind=SwitchKind.ITEM_ARRAY, value=[r"src dir\main.c"])
    task = _task(diagnostics, runner, (output, source), tool_path="/opt/cl")

    assert task.command_line == r'/Foobj\x64\a.obj "src dir\main.c"'
    assert task.execute()
    assert runner.calls == [["/opt/cl", r"/Foobj\x64\a.obj", r"src dir\main.c"]]


def test_split_command_line_honours_quotes_and_keeps_backslashes() -> None:
    assert split_command_line(r'cl /I"C:\My Include" /Fo.\out\ \\server\share') == [
        "cl",
        r"/IC:\My Include",
        "/Fo.\\out\\",
        r"\\server\share",
    ]


def test_execute_refuses_template_rendering_no_command(
    diagnostics: DiagnosticLog, runner: RecordingRunner
) -> None:
    task = DataDrivenToolTask(
        ToolDefinition(command_line_template="[Missing]"), diagnostics=diagnostics, runner=runner
    )

    assert not task.execute()
    assert diagnostics.codes == (DiagnosticCode.EMPTY_COMMAND_LINE,)
    assert runner.calls == []


def test_execute_requires_tool_name_without_template(
    diagnostics: DiagnosticLog, runner: RecordingRunner
) -> None:
    task = DataDrivenToolTask(ToolDefinition(), diagnostics=diagnostics, runner=runner)

    assert not task.execute()
    assert diagnostics.codes == (DiagnosticCode.RULE_MISSING_TOOL_NAME,)
    assert runner.calls == []


def test_execute_refuses_after_reported_errors(diagnostics: DiagnosticLog, runner: RecordingRunner) -> None:
    task = _task(diagnostics, runner, ())
    assert not task.validate_integer("WarningLevel", 0, 4, 9)

    assert not task.execute()
    assert runner.calls == []


def test_failed_exit_code_is_reported_with_command_line(
    diagnostics: DiagnosticLog, compiler_switches: tuple[ToolSwitch, ...]
) -> None:
    task = _task(diagnostics, RecordingRunner(exit_code=2), compiler_switches)

    assert not task.execute()
    [record] = diagnostics.records
    assert record.code is DiagnosticCode.COMMAND_FAILED
    assert record.args == ("/W4 /O2 /Gm", 2)


def test_access_denied_exit_code_has_distinct_diagnostic(diagnostics: DiagnosticLog) -> None:
    task = _task(diagnostics, RecordingRunner(exit_code=5), ())

    assert not task.execute()
    assert diagnostics.codes == (DiagnosticCode.COMMAND_FAILED_ACCESS_DENIED,)


def test_acceptable_non_zero_exit_code_counts_as_success(diagnostics: DiagnosticLog) -> None:
    task = _task(diagnostics, RecordingRunner(exit_code=3), (), acceptable_non_zero_exit_codes=["1", "3"])

    assert task.execute()
    assert task.is_acceptable_return_value()
    assert not diagnostics.has_logged_errors


def test_task_validation_helpers_report_through_task_diagnostics(
    diagnostics: DiagnosticLog, runner: RecordingRunner
) -> None:
    task = _task(
        diagnostics,
        runner,
        (ToolSwitch(name="PrecompiledHeaderFile", kind=SwitchKind.STRING, value="pch.h"),),
    )

    assert task.read_switch_map("Optimization", [("Full", "/Ox")], "full") == "/Ox"
    assert task.read_switch_map_index("Optimization", None, "full") == -1
    assert task.create_switch_value("PrecompiledHeader", "/Yu", "", [("PrecompiledHeaderFile", True)]) == "/Yupch.h"
    assert task.validate_parameters()
    assert task.read_switch_map("Optimization", [("Full", "/Ox")], "fast") == ""
    assert not task.validate_parameters()
