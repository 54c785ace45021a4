# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Value objects describing a single materialized command-line switch."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final, TypeAlias

from .errors import SwitchDefinitionError

SwitchValue: TypeAlias = str | int | Path | Sequence[str | Path] | None
OverridePairs: TypeAlias = tuple[tuple[str, str], ...]

TOKEN_PREFIXES: Final[str] = "/-"


class SwitchKind(str, Enum):
    """Enumerate how a switch value is rendered on the command line."""

    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "integer"
    STRING_ARRAY = "stringArray"
    ENUMERATION = "enumeration"
    ITEM_ARRAY = "itemArray"

    @property
    def is_array(self) -> bool:
        """Return ``True`` for kinds carrying a sequence of values."""

        return self in {SwitchKind.STRING_ARRAY, SwitchKind.ITEM_ARRAY}


def strip_token_prefix(token: str) -> str:
    """Return ``token`` without its leading ``/`` or ``-`` switch markers.

    Args:
        token: Literal switch token such as ``/O2`` or ``--fast``.

    Returns:
        str: Token text used when comparing override relationships.
    """

    return token.lstrip(TOKEN_PREFIXES)


def tokens_equal(left: str, right: str) -> bool:
    """Compare two switch tokens ignoring case and leading switch markers."""

    return strip_token_prefix(left).casefold() == strip_token_prefix(right).casefold()


def quote_value(text: str) -> str:
    """Wrap ``text`` in double quotes when it contains whitespace.

    Already quoted values are returned unchanged. A trailing backslash is
    doubled so it does not escape the closing quote.

    Args:
        text: Raw value rendered after a switch token.

    Returns:
        str: Value safe to embed in a space separated command line.
    """

    if not text or not any(char.isspace() for char in text):
        return text
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text
    if text.endswith("\\"):
        text = f"{text}\\"
    return f'"{text}"'


@dataclass(frozen=True, slots=True, eq=False)
class ToolSwitch:
    """One resolved command-line switch.

    Attributes:
        name: Property name identifying the switch; compared case-insensitively.
        kind: Rendering behaviour for the switch value.
        switch_value: Token emitted when the switch is on.
        reverse_switch_value: Token emitted for a boolean switch that is off.
        boolean_value: State of a boolean switch.
        value: Raw value for value-bearing kinds.
        separator: Text placed between the token and its value.
        delimiter: Joins array items after a single token; ``None`` repeats the token per item.
        overrides: Ordered ``(trigger, target)`` token pairs. When this switch's
            effective token equals ``trigger`` any other active switch whose
            effective token equals ``target`` is dropped.
    """

    name: str
    kind: SwitchKind
    switch_value: str = ""
    reverse_switch_value: str = ""
    boolean_value: bool | None = None
    value: SwitchValue = None
    separator: str = ""
    delimiter: str | None = None
    overrides: OverridePairs = field(default=())

    def __post_init__(self) -> None:
        kind = SwitchKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if isinstance(self.overrides, Mapping):
            object.__setattr__(self, "overrides", tuple((str(k), str(v)) for k, v in self.overrides.items()))
        else:
            object.__setattr__(self, "overrides", tuple((str(k), str(v)) for k, v in self.overrides))
        if kind is SwitchKind.BOOLEAN:
            if self.boolean_value is None:
                raise SwitchDefinitionError(f"Boolean switch '{self.name}' requires a boolean value")
            if not self.switch_value and not self.reverse_switch_value:
                raise SwitchDefinitionError(
                    f"Boolean switch '{self.name}' requires a switch or reverse switch token",
                )
        elif kind is SwitchKind.INTEGER:
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise SwitchDefinitionError(f"Integer switch '{self.name}' requires an integer value")
        elif kind.is_array:
            object.__setattr__(self, "value", _as_items(self.name, self.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ToolSwitch):
            return NotImplemented
        return self.name.casefold() == other.name.casefold()

    def __hash__(self) -> int:
        return hash(self.name.casefold())

    @property
    def is_reversed(self) -> bool:
        """Return ``True`` when a boolean switch is off and its reverse token applies."""

        return self.kind is SwitchKind.BOOLEAN and self.boolean_value is False

    @property
    def active_token(self) -> str:
        """Return the literal token currently in effect."""

        return self.reverse_switch_value if self.is_reversed else self.switch_value

    def effective_token(self) -> str:
        """Return the active token with leading switch markers removed."""

        return strip_token_prefix(self.active_token)

    def matches_token(self, token: str) -> bool:
        """Return ``True`` when ``token`` names this switch as an override target.

        The positive token always matches; the reverse token only matches while a
        boolean switch is off.

        Args:
            token: Override target token, with or without switch markers.

        Returns:
            bool: Whether this switch is the target named by ``token``.
        """

        if tokens_equal(self.switch_value, token):
            return True
        return self.is_reversed and tokens_equal(self.reverse_switch_value, token)

    def value_text(self) -> str:
        """Return the rendered value of the switch without its token.

        Returns:
            str: Quoted value text; boolean switches yield their active token.
        """

        if self.kind is SwitchKind.BOOLEAN:
            return self.active_token
        if self.value is None:
            return ""
        if self.kind.is_array:
            items = [quote_value(str(item)) for item in self._items()]
            return (" " if self.delimiter is None else self.delimiter).join(items)
        return quote_value(str(self.value))

    def render(self) -> str:
        """Return the command-line fragment for this switch."""

        if self.kind is SwitchKind.BOOLEAN:
            return self.active_token
        if self.kind.is_array:
            return self._render_items()
        text = self.value_text()
        if not text:
            return self.switch_value
        return f"{self.switch_value}{self.separator}{text}"

    def _items(self) -> tuple[str | Path, ...]:
        return self.value if isinstance(self.value, tuple) else ()

    def _render_items(self) -> str:
        items = [quote_value(str(item)) for item in self._items()]
        if not items:
            return ""
        if self.delimiter is not None:
            return f"{self.switch_value}{self.separator}{self.delimiter.join(items)}"
        return " ".join(f"{self.switch_value}{self.separator}{item}" for item in items)


def _as_items(name: str, value: SwitchValue) -> tuple[str | Path, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, Path)):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(item if isinstance(item, Path) else str(item) for item in value)
    raise SwitchDefinitionError(f"Array switch '{name}' requires a sequence value")


def boolean_switch(
    name: str,
    value: bool,
    switch_value: str = "",
    reverse_switch_value: str = "",
    *,
    overrides: Mapping[str, str] | OverridePairs = (),
) -> ToolSwitch:
    """Build a boolean :class:`ToolSwitch`."""

    return ToolSwitch(
        name=name,
        kind=SwitchKind.BOOLEAN,
        switch_value=switch_value,
        reverse_switch_value=reverse_switch_value,
        boolean_value=value,
        overrides=overrides,  # type: ignore[arg-type]
    )


__all__ = [
    "OverridePairs",
    "SwitchKind",
    "SwitchValue",
    "ToolSwitch",
    "boolean_switch",
    "quote_value",
    "strip_token_prefix",
    "tokens_equal",
]
