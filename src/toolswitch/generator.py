# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Render an active switch set into a single command-line string."""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Final

from .switch_set import ActiveSwitchSet
from .switches import ToolSwitch

ALL_OPTIONS_PLACEHOLDER: Final[str] = "AllOptions"
ADDITIONAL_OPTIONS_PLACEHOLDER: Final[str] = "AdditionalOptions"
_RESERVED_PLACEHOLDERS: Final[frozenset[str]] = frozenset(
    {ALL_OPTIONS_PLACEHOLDER.casefold(), ADDITIONAL_OPTIONS_PLACEHOLDER.casefold()},
)

_PLACEHOLDER_RE: Final[re.Pattern[str]] = re.compile(r"(?P<lead>\s*)\[(?P<name>[A-Za-z_][\w.]*)\]")


@dataclass(slots=True)
class CommandLineGenerator:
    """Assemble the command line for the surviving switches of one invocation.

    Without a template, switches named in ``switch_order`` come first in that
    order and the remaining active switches follow in insertion order. With a
    template, ``[Name]`` placeholders are substituted and unreferenced switches
    are left out unless the template contains ``[AllOptions]``.
    """

    active_switches: ActiveSwitchSet
    switch_order: Sequence[str] = ()
    command_line_template: str | None = None
    additional_options: str = field(default="")

    def generate_command_line(self) -> str:
        """Return the rendered command line.

        Returns:
            str: Space separated switch fragments followed by the additional options.
        """

        if self.command_line_template:
            return self._render_template(self.command_line_template)
        return _join(self._render_switches(self.ordered_switches()), self._additional())

    def ordered_switches(self, *, exclude: frozenset[str] = frozenset()) -> tuple[ToolSwitch, ...]:
        """Return active switches in emission order.

        Args:
            exclude: Case-folded switch names to leave out.

        Returns:
            tuple[ToolSwitch, ...]: Switches named by the order list, then the rest.
        """

        emitted: set[str] = set(exclude)
        ordered: list[ToolSwitch] = []
        for name in self.switch_order:
            folded = name.casefold()
            if folded in emitted or name not in self.active_switches:
                continue
            emitted.add(folded)
            ordered.append(self.active_switches[name])
        for name, switch in self.active_switches.items():
            if name.casefold() in emitted:
                continue
            emitted.add(name.casefold())
            ordered.append(switch)
        return tuple(ordered)

    def _render_switches(self, switches: Sequence[ToolSwitch]) -> Iterator[str]:
        for switch in switches:
            yield switch.render()

    def _additional(self) -> str:
        if self.additional_options and self.additional_options.strip():
            return self.additional_options
        return ""

    def _render_template(self, template: str) -> str:
        referenced = frozenset(
            match.group("name").casefold()
            for match in _PLACEHOLDER_RE.finditer(template)
            if match.group("name").casefold() not in _RESERVED_PLACEHOLDERS
        )
        has_additional = False

        def substitute(match: re.Match[str]) -> str:
            nonlocal has_additional
            name = match.group("name")
            if name.casefold() == ALL_OPTIONS_PLACEHOLDER.casefold():
                rendered = _join(self._render_switches(self.ordered_switches(exclude=referenced)))
            elif name.casefold() == ADDITIONAL_OPTIONS_PLACEHOLDER.casefold():
                has_additional = True
                rendered = self._additional()
            elif name in self.active_switches:
                rendered = self.active_switches[name].render()
            else:
                rendered = ""
            return f"{match.group('lead')}{rendered}" if rendered else ""

        result = _PLACEHOLDER_RE.sub(substitute, template).strip()
        if has_additional:
            return result
        return _join((result,), self._additional())


def _join(fragments: Iterator[str] | Sequence[str], *trailing: str) -> str:
    parts = [fragment for fragment in (*fragments, *trailing) if fragment]
    return " ".join(parts)


def generate_command_line(
    active_switches: ActiveSwitchSet,
    switch_order: Sequence[str] = (),
    *,
    command_line_template: str | None = None,
    additional_options: str = "",
) -> str:
    """Render ``active_switches`` using a throwaway :class:`CommandLineGenerator`."""

    generator = CommandLineGenerator(
        active_switches=active_switches,
        switch_order=switch_order,
        command_line_template=command_line_template,
        additional_options=additional_options,
    )
    return generator.generate_command_line()


__all__ = [
    "ADDITIONAL_OPTIONS_PLACEHOLDER",
    "ALL_OPTIONS_PLACEHOLDER",
    "CommandLineGenerator",
    "generate_command_line",
]
