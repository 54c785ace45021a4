# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Validation helpers used while switches are being populated."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import NamedTuple, TypeAlias

from .diagnostics import DiagnosticCode, DiagnosticSink, format_message
from .errors import MissingRequiredArgumentError
from .switches import ToolSwitch

SwitchMap: TypeAlias = Sequence[tuple[str, str]]


class SwitchArgument(NamedTuple):
    """Property referenced by a composite switch value."""

    name: str
    required: bool = False


class CompositeSwitchMapEntry(NamedTuple):
    """Enumeration value mapped to a base switch and its argument properties."""

    value: str
    switch: str
    arguments: tuple[SwitchArgument, ...] = ()


def validate_integer(sink: DiagnosticSink, switch_name: str, minimum: int, maximum: int, value: int) -> bool:
    """Check that ``value`` lies within ``[minimum, maximum]``.

    Args:
        sink: Diagnostics sink receiving the out-of-range error.
        switch_name: Name reported with the error.
        minimum: Inclusive lower bound.
        maximum: Inclusive upper bound.
        value: Candidate value.

    Returns:
        bool: ``True`` when ``value`` is within range, ``False`` after reporting otherwise.
    """

    if value < minimum or value > maximum:
        sink.error(DiagnosticCode.ARGUMENT_OUT_OF_RANGE, switch_name, value)
        return False
    return True


def read_switch_map(sink: DiagnosticSink, property_name: str, switch_map: SwitchMap | None, value: str) -> str:
    """Return the switch token mapped to ``value``.

    Args:
        sink: Diagnostics sink receiving the unmapped-value error.
        property_name: Property reported with the error.
        switch_map: Ordered ``(value, token)`` pairs; the first case-insensitive match wins.
        value: Enumerated value selected by the caller.

    Returns:
        str: Mapped token, or ``""`` when nothing matches or no map is given.
    """

    if switch_map is None:
        return ""
    folded = value.casefold()
    for candidate, token in switch_map:
        if candidate.casefold() == folded:
            return token
    sink.error(DiagnosticCode.ARGUMENT_OUT_OF_RANGE, property_name, value)
    return ""


def read_switch_map_index(
    sink: DiagnosticSink,
    property_name: str,
    switch_map: Sequence[CompositeSwitchMapEntry] | None,
    value: str,
) -> int:
    """Return the index of the composite map entry matching ``value``.

    Returns:
        int: Index of the first case-insensitive match, ``-1`` otherwise.
    """

    if switch_map is None:
        return -1
    folded = value.casefold()
    for index, entry in enumerate(switch_map):
        if entry.value.casefold() == folded:
            return index
    sink.error(DiagnosticCode.ARGUMENT_OUT_OF_RANGE, property_name, value)
    return -1


def create_switch_value(
    sink: DiagnosticSink,
    switches: Mapping[str, ToolSwitch],
    property_name: str,
    base_switch: str,
    separator: str,
    arguments: Sequence[SwitchArgument | tuple[str, bool]],
) -> str:
    """Compose ``base_switch`` with the values of the referenced argument properties.

    Args:
        sink: Diagnostics sink receiving missing-argument errors.
        switches: Active switches keyed by property name.
        property_name: Property whose switch value is being composed.
        base_switch: Leading token, usually the switch itself.
        separator: Text inserted before each argument value.
        arguments: Ordered ``(property name, required)`` pairs.

    Returns:
        str: ``base_switch`` followed by each set argument's value.

    Raises:
        MissingRequiredArgumentError: If a required argument property is not set.
    """

    parts = [base_switch]
    for argument_name, required in arguments:
        if not argument_name:
            continue
        switch = switches.get(argument_name)
        if switch is None:
            if required:
                sink.error(DiagnosticCode.MISSING_REQUIRED_ARGUMENT, property_name, argument_name)
                raise MissingRequiredArgumentError(
                    format_message(DiagnosticCode.MISSING_REQUIRED_ARGUMENT, property_name, argument_name),
                    property_name=property_name,
                    argument_name=argument_name,
                )
            continue
        text = switch.value_text()
        if text:
            parts.append(f"{separator}{text}")
    return "".join(parts)


__all__ = [
    "CompositeSwitchMapEntry",
    "SwitchArgument",
    "SwitchMap",
    "create_switch_value",
    "read_switch_map",
    "read_switch_map_index",
    "validate_integer",
]
