# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Remove active switches that are superseded by another active switch."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .switch_set import ActiveSwitchSet
from .switches import ToolSwitch, tokens_equal

LOGGER = logging.getLogger(__name__)


def find_overridden(entries: Sequence[tuple[str, ToolSwitch]]) -> tuple[str, ...]:
    """Return the keys of switches superseded by other entries.

    Every entry is evaluated against the full ``entries`` snapshot, so a switch
    that is itself superseded may still supersede others. For each override pair
    only the first matching candidate is selected.

    Args:
        entries: Snapshot of ``(key, switch)`` pairs in insertion order.

    Returns:
        tuple[str, ...]: Keys to remove, without duplicates, in discovery order.
    """

    marked: dict[str, str] = {}
    for owner_key, owner in entries:
        owner_token = owner.effective_token()
        for trigger, target in owner.overrides:
            if not tokens_equal(trigger, owner_token):
                continue
            for candidate_key, candidate in entries:
                if candidate_key.casefold() == owner_key.casefold():
                    continue
                if candidate.matches_token(target):
                    marked.setdefault(candidate_key.casefold(), candidate_key)
                    LOGGER.debug("switch %s overrides %s via %s", owner_key, candidate_key, target)
                    break
    return tuple(marked.values())


def resolve_overrides(active: ActiveSwitchSet) -> tuple[str, ...]:
    """Drop superseded switches from ``active`` in place.

    Args:
        active: Active switch set for the current invocation.

    Returns:
        tuple[str, ...]: Keys removed from ``active``.
    """

    removed = find_overridden(active.snapshot())
    for key in removed:
        del active[key]
    return removed


__all__ = ["find_overridden", "resolve_overrides"]
