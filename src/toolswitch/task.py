# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data-driven tool task turning active switches into a tool invocation."""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence
from pathlib import Path

from .config import ToolDefinition
from .diagnostics import ACCESS_DENIED_EXIT_CODE, DiagnosticCode, DiagnosticLog, DiagnosticSink
from .generator import CommandLineGenerator
from .overrides import resolve_overrides
from .process import CommandOptions, ToolRunner, run_tool, write_response_file
from .response_file import RenderState, ResponseFilePolicy
from .switch_set import ActiveSwitchSet, CaseInsensitiveMap
from .switches import ToolSwitch
from .validation import (
    CompositeSwitchMapEntry,
    SwitchArgument,
    SwitchMap,
    create_switch_value,
    read_switch_map,
    read_switch_map_index,
    validate_integer,
)

LOGGER = logging.getLogger(__name__)

RESPONSE_FILE_PREFIX = "@"


def split_command_line(command_line: str) -> list[str]:
    """Split ``command_line`` into arguments, honouring quotes and keeping backslashes."""

    lexer = shlex.shlex(command_line, posix=True)
    lexer.whitespace_split = True
    lexer.escape = ""
    return list(lexer)


class DataDrivenToolTask:
    """Resolve, render and run one invocation of an external command-line tool.

    The task owns its active switch set and render state; a tool definition may
    be shared by many tasks. Switches are populated by the caller, superseded
    switches are pruned on the first render, and the rendered command line is
    either passed directly or through a response file.
    """

    def __init__(
        self,
        definition: ToolDefinition,
        *,
        switches: Sequence[ToolSwitch] = (),
        diagnostics: DiagnosticSink | None = None,
        runner: ToolRunner | None = None,
    ) -> None:
        """Initialise the task.

        Args:
            definition: Tool settings such as switch order and template.
            switches: Switches to activate immediately.
            diagnostics: Sink receiving reported errors; a :class:`DiagnosticLog` by default.
            runner: Callable executing the tool; :func:`run_tool` by default.
        """

        self.definition = definition
        self.diagnostics: DiagnosticSink = diagnostics if diagnostics is not None else DiagnosticLog()
        self.runner: ToolRunner = runner or run_tool
        self.exit_code: int | None = None
        self.additional_options = definition.additional_options
        self._active_switches = ActiveSwitchSet.of(switches)
        self._active_switch_values: CaseInsensitiveMap[ToolSwitch] = CaseInsensitiveMap()
        self._policy = ResponseFilePolicy(
            render=self._generate_commands,
            threshold=definition.response_file_threshold,
        )

    @property
    def active_switches(self) -> ActiveSwitchSet:
        """Return the switches currently turned on, keyed by property name."""

        return self._active_switches

    @property
    def active_switch_values(self) -> CaseInsensitiveMap[ToolSwitch]:
        """Return active switches keyed by their current token."""

        return self._active_switch_values

    @property
    def switch_order(self) -> tuple[str, ...]:
        """Return the declared emission order."""

        return self.definition.switch_order

    @property
    def render_state(self) -> RenderState:
        """Return where the current invocation is in its render lifecycle."""

        return self._policy.state

    @property
    def command_line(self) -> str:
        """Return the rendered command line, rendering it on first access."""

        return self._policy.command_line

    def is_property_set(self, property_name: str | None) -> bool:
        """Return ``True`` when ``property_name`` has an active switch."""

        if not property_name:
            return False
        return property_name in self._active_switches

    def has_switch(self, property_name: str | None) -> bool:
        """Return ``True`` when ``property_name`` is set and its switch carries a name."""

        if not self.is_property_set(property_name):
            return False
        return bool(self._active_switches[property_name or ""].name)

    def replace_tool_switch(self, switch: ToolSwitch) -> None:
        """Activate ``switch``, replacing any active switch with the same name."""

        self._active_switches.replace(switch)

    def add_active_switch_tool_value(self, switch: ToolSwitch) -> None:
        """Index ``switch`` by its active token in :attr:`active_switch_values`.

        Switches whose active token is empty are not indexed.

        Raises:
            DuplicateSwitchError: If another switch already uses the same token.
        """

        token = switch.active_token
        if token:
            self._active_switch_values.add(token, switch)

    # ------------------------------------------------------------------
    # Validation helpers

    def validate_integer(self, switch_name: str, minimum: int, maximum: int, value: int) -> bool:
        """Check an integer switch value against its declared range."""

        return validate_integer(self.diagnostics, switch_name, minimum, maximum, value)

    def read_switch_map(self, property_name: str, switch_map: SwitchMap | None, value: str) -> str:
        """Return the switch token mapped to an enumerated ``value``."""

        return read_switch_map(self.diagnostics, property_name, switch_map, value)

    def read_switch_map_index(
        self,
        property_name: str,
        switch_map: Sequence[CompositeSwitchMapEntry] | None,
        value: str,
    ) -> int:
        """Return the index of the composite switch map entry matching ``value``."""

        return read_switch_map_index(self.diagnostics, property_name, switch_map, value)

    def create_switch_value(
        self,
        property_name: str,
        base_switch: str,
        separator: str,
        arguments: Sequence[SwitchArgument | tuple[str, bool]],
    ) -> str:
        """Compose a switch value from ``base_switch`` and active argument properties."""

        return create_switch_value(
            self.diagnostics,
            self._active_switches,
            property_name,
            base_switch,
            separator,
            arguments,
        )

    def validate_parameters(self) -> bool:
        """Return ``False`` once any error has been reported for this task."""

        return not self.diagnostics.has_logged_errors

    # ------------------------------------------------------------------
    # Command-line generation

    def validate_relations(self) -> None:
        """Hook for relationship checks between switches; nothing is checked by default."""

    def validate_overrides(self) -> tuple[str, ...]:
        """Remove switches superseded by other active switches and return their names."""

        return resolve_overrides(self._active_switches)

    def post_process_switch_list(self) -> None:
        """Apply relationship checks and override resolution before rendering."""

        self.validate_relations()
        self.validate_overrides()

    def _generate_commands(self) -> str:
        self.post_process_switch_list()
        generator = CommandLineGenerator(
            active_switches=self._active_switches,
            switch_order=self.switch_order,
            command_line_template=self.definition.command_line_template,
            additional_options=self.additional_options,
        )
        return generator.generate_command_line()

    def generate_command_line_commands(self) -> str | None:
        """Return the command line when it can be passed directly, else ``None``."""

        return self._policy.command_line_commands()

    def generate_response_file_commands(self) -> str | None:
        """Return the response-file content, or ``None`` right after a direct render."""

        return self._policy.response_file_commands()

    def reset_invocation(self) -> None:
        """Discard the rendered command line so the next request renders again."""

        self._policy.reset()

    # ------------------------------------------------------------------
    # Execution

    def generate_full_path_to_tool(self) -> str | None:
        """Return the configured tool path, or the tool name to be found on ``PATH``."""

        if self.definition.tool_path is not None:
            return str(self.definition.tool_path)
        return self.definition.tool_name or None

    def is_acceptable_return_value(self) -> bool:
        """Return ``True`` when the last exit code is listed as acceptable."""

        return self.exit_code in self.definition.acceptable_non_zero_exit_codes

    def handle_task_execution_errors(self) -> bool:
        """Report a non-zero exit code and return the task result.

        Returns:
            bool: ``True`` when the exit code is acceptable, ``False`` after reporting otherwise.
        """

        if self.is_acceptable_return_value():
            return True
        code = (
            DiagnosticCode.COMMAND_FAILED_ACCESS_DENIED
            if self.exit_code == ACCESS_DENIED_EXIT_CODE
            else DiagnosticCode.COMMAND_FAILED
        )
        self.diagnostics.error(code, self.command_line, self.exit_code)
        return False

    def build_arguments(self, *, response_file_dir: Path | None = None) -> tuple[list[str], Path | None]:
        """Return the argument vector for the tool and any response file written for it.

        Args:
            response_file_dir: Directory for the response file; the temp directory by default.

        Returns:
            tuple[list[str], Path | None]: Arguments and the response file path, if one was written.
        """

        if self.definition.command_line_template:
            return split_command_line(self.command_line), None
        tool = self.generate_full_path_to_tool()
        if tool is None:
            raise ValueError("a tool name or path is required when no template is configured")
        arguments = [tool]
        direct = self.generate_command_line_commands()
        if direct:
            arguments.extend(split_command_line(direct))
        response_content = self.generate_response_file_commands()
        response_file: Path | None = None
        if response_content:
            response_file = write_response_file(
                response_content,
                directory=response_file_dir,
                encoding=self.definition.response_file_encoding,
            )
            arguments.append(f"{RESPONSE_FILE_PREFIX}{response_file}")
        return arguments, response_file

    def execute(self, *, options: CommandOptions | None = None, response_file_dir: Path | None = None) -> bool:
        """Render the command line, run the tool and report failures.

        Args:
            options: Process options forwarded to the runner.
            response_file_dir: Directory for a response file when one is needed.

        Returns:
            bool: ``True`` when the tool ran and exited successfully.
        """

        if not self.definition.command_line_template and not self.generate_full_path_to_tool():
            self.diagnostics.error(DiagnosticCode.RULE_MISSING_TOOL_NAME)
            return False
        if not self.validate_parameters():
            return False
        arguments, response_file = self.build_arguments(response_file_dir=response_file_dir)
        if not arguments:
            self.diagnostics.error(DiagnosticCode.EMPTY_COMMAND_LINE, self.definition.command_line_template)
            return False
        LOGGER.debug("executing %s", shlex.join(arguments))
        try:
            self.exit_code = self.runner(arguments, options=options)
        finally:
            if response_file is not None:
                response_file.unlink(missing_ok=True)
        if self.exit_code == 0:
            return True
        return self.handle_task_execution_errors()


__all__ = ["DataDrivenToolTask", "RESPONSE_FILE_PREFIX", "split_command_line"]
