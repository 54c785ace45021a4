# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models describing a tool and a serialized invocation."""

from __future__ import annotations

import codecs
import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvocationConfigError
from .response_file import COMMAND_LINE_CEILING, DEFAULT_RESPONSE_FILE_THRESHOLD
from .switch_set import ActiveSwitchSet
from .switches import SwitchKind, ToolSwitch

JSON_SUFFIXES: Final[frozenset[str]] = frozenset({".json"})
TOML_SUFFIXES: Final[frozenset[str]] = frozenset({".toml"})


class ToolDefinition(BaseModel):
    """Per-tool settings shared read-only across invocations."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    tool_name: str | None = None
    tool_path: Path | None = None
    switch_order: tuple[str, ...] = ()
    command_line_template: str | None = None
    additional_options: str = ""
    acceptable_non_zero_exit_codes: tuple[int, ...] = ()
    response_file_threshold: int = Field(default=DEFAULT_RESPONSE_FILE_THRESHOLD, gt=0, lt=COMMAND_LINE_CEILING)
    response_file_encoding: str = "utf-16"

    @field_validator("response_file_encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding '{value}'") from exc
        return value


class SwitchRecord(BaseModel):
    """Serialized form of a materialized :class:`ToolSwitch`."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    kind: SwitchKind
    switch_value: str = ""
    reverse_switch_value: str = ""
    boolean_value: bool | None = None
    value: str | int | list[str] | None = None
    separator: str = ""
    delimiter: str | None = None
    overrides: dict[str, str] = Field(default_factory=dict)

    def to_switch(self) -> ToolSwitch:
        """Return the :class:`ToolSwitch` described by this record.

        Raises:
            SwitchDefinitionError: If the record violates the switch invariants.
        """

        return ToolSwitch(
            name=self.name,
            kind=self.kind,
            switch_value=self.switch_value,
            reverse_switch_value=self.reverse_switch_value,
            boolean_value=self.boolean_value,
            value=tuple(self.value) if isinstance(self.value, list) else self.value,
            separator=self.separator,
            delimiter=self.delimiter,
            overrides=tuple(self.overrides.items()),
        )


class InvocationConfig(BaseModel):
    """A tool definition together with the switches active for one invocation."""

    model_config = ConfigDict(extra="forbid")

    tool: ToolDefinition = Field(default_factory=ToolDefinition)
    switches: list[SwitchRecord] = Field(default_factory=list)

    def active_switches(self) -> ActiveSwitchSet:
        """Return a fresh active switch set built from :attr:`switches`.

        Raises:
            DuplicateSwitchError: If two records share a name.
            SwitchDefinitionError: If a record violates the switch invariants.
        """

        return ActiveSwitchSet.of(record.to_switch() for record in self.switches)


def _read_payload(path: Path) -> Mapping[str, Any]:
    suffix = path.suffix.lower()
    try:
        if suffix in TOML_SUFFIXES:
            with path.open("rb") as handle:
                return tomllib.load(handle)
        if suffix in JSON_SUFFIXES:
            payload = json.loads(path.read_text(encoding="utf-8"))
        else:
            raise InvocationConfigError(f"Unsupported invocation file type '{path.suffix}' for {path}")
    except OSError as exc:
        raise InvocationConfigError(f"Unable to read invocation file {path}: {exc}") from exc
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        raise InvocationConfigError(f"Invalid invocation file {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise InvocationConfigError(f"Invocation file {path} must contain an object at the top level")
    return payload


def load_invocation(path: Path) -> InvocationConfig:
    """Load and validate an invocation file in JSON or TOML format.

    Args:
        path: File describing the tool and its active switches.

    Returns:
        InvocationConfig: Validated invocation.

    Raises:
        InvocationConfigError: If the file cannot be read, parsed or validated.
    """

    payload = _read_payload(path)
    try:
        return InvocationConfig.model_validate(payload)
    except ValidationError as exc:
        raise InvocationConfigError(f"Invalid invocation file {path}:\n{exc}") from exc


__all__ = [
    "InvocationConfig",
    "SwitchRecord",
    "ToolDefinition",
    "load_invocation",
]
