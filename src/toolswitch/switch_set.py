# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Ordered, case-insensitive containers holding the active switches of one invocation."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping
from typing import Generic, TypeVar

from .errors import DuplicateSwitchError
from .switches import ToolSwitch

ValueT = TypeVar("ValueT")


class CaseInsensitiveMap(MutableMapping[str, ValueT], Generic[ValueT]):
    """Mapping with case-insensitive string keys that preserves insertion order.

    Keys keep the spelling used when they were first inserted; replacing a value
    under a differently cased key keeps both the original spelling and position.
    """

    __slots__ = ("_entries",)

    def __init__(self, items: Iterable[tuple[str, ValueT]] = ()) -> None:
        self._entries: dict[str, tuple[str, ValueT]] = {}
        for key, value in items:
            self[key] = value

    @staticmethod
    def _fold(key: str) -> str:
        return key.casefold()

    def __getitem__(self, key: str) -> ValueT:
        return self._entries[self._fold(key)][1]

    def __setitem__(self, key: str, value: ValueT) -> None:
        folded = self._fold(key)
        existing = self._entries.get(folded)
        self._entries[folded] = (existing[0] if existing else key, value)

    def __delitem__(self, key: str) -> None:
        del self._entries[self._fold(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._fold(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        body = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"{type(self).__name__}({{{body}}})"

    def add(self, key: str, value: ValueT) -> None:
        """Insert ``value`` under ``key`` and refuse to replace an existing entry.

        Args:
            key: Case-insensitive key for the new entry.
            value: Value stored under ``key``.

        Raises:
            DuplicateSwitchError: If ``key`` is already present.
        """

        if key in self:
            raise DuplicateSwitchError(key)
        self[key] = value

    def copy(self) -> CaseInsensitiveMap[ValueT]:
        """Return a shallow copy that keeps key spelling and order."""

        return type(self)(self.items())


class ActiveSwitchSet(CaseInsensitiveMap[ToolSwitch]):
    """Active switches for one invocation keyed by property name."""

    __slots__ = ()

    @classmethod
    def of(cls, switches: Iterable[ToolSwitch]) -> ActiveSwitchSet:
        """Build a set from ``switches`` keyed by each switch's name.

        Args:
            switches: Switches to insert in order.

        Returns:
            ActiveSwitchSet: Set containing every switch.

        Raises:
            DuplicateSwitchError: If two switches share a name.
        """

        active = cls()
        for switch in switches:
            active.add(switch.name, switch)
        return active

    def replace(self, switch: ToolSwitch) -> None:
        """Store ``switch`` under its name, replacing any switch of the same name."""

        self[switch.name] = switch

    def snapshot(self) -> tuple[tuple[str, ToolSwitch], ...]:
        """Return an immutable view of the current entries in insertion order."""

        return tuple(self.items())


__all__ = ["ActiveSwitchSet", "CaseInsensitiveMap"]
