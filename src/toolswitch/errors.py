# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while resolving and rendering tool switches."""

from __future__ import annotations


class ToolSwitchError(RuntimeError):
    """Base class for errors raised by the switch engine."""


class SwitchDefinitionError(ToolSwitchError, ValueError):
    """Raised when a materialized switch violates the switch invariants."""


class DuplicateSwitchError(ToolSwitchError, KeyError):
    """Raised when a key is added twice to a switch map that forbids replacement."""

    def __init__(self, key: str) -> None:
        """Initialise the error with the offending key.

        Args:
            key: Key that already exists in the map.
        """

        super().__init__(f"An entry for '{key}' has already been added")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


class MissingRequiredArgumentError(ToolSwitchError, ValueError):
    """Raised when a composite switch references a required property that is not set."""

    def __init__(self, message: str, *, property_name: str, argument_name: str) -> None:
        """Initialise the error with the composite switch and missing argument names.

        Args:
            message: Formatted diagnostic message.
            property_name: Property whose switch value was being composed.
            argument_name: Required argument property that was not set.
        """

        super().__init__(message)
        self.property_name = property_name
        self.argument_name = argument_name


class InvocationConfigError(ToolSwitchError):
    """Raised when an invocation file cannot be read or fails validation."""


__all__ = [
    "DuplicateSwitchError",
    "InvocationConfigError",
    "MissingRequiredArgumentError",
    "SwitchDefinitionError",
    "ToolSwitchError",
]
