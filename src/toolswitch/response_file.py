# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Choose between a direct command line and a response file for one invocation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

LOGGER = logging.getLogger(__name__)

# Process arguments are capped at 32768 characters; embedded variables may expand
# after rendering so the default stays under that ceiling.
DEFAULT_RESPONSE_FILE_THRESHOLD: Final[int] = 32000
COMMAND_LINE_CEILING: Final[int] = 32768


class RenderState(str, Enum):
    """Lifecycle of the rendered command line within one invocation."""

    NOT_RENDERED = "not_rendered"
    RENDERED_DIRECT = "rendered_direct"
    RENDERED_FOR_FILE = "rendered_for_file"


@dataclass(slots=True)
class ResponseFilePolicy:
    """Memoize the command line and track whether it was already emitted directly.

    A direct-mode decision suppresses exactly one following response-file
    request, so the same content is never passed twice to the tool.
    """

    render: Callable[[], str]
    threshold: int = DEFAULT_RESPONSE_FILE_THRESHOLD
    state: RenderState = field(default=RenderState.NOT_RENDERED)
    _command_line: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not 0 < self.threshold < COMMAND_LINE_CEILING:
            raise ValueError(
                f"response file threshold must be between 1 and {COMMAND_LINE_CEILING - 1}, got {self.threshold}",
            )

    @property
    def command_line(self) -> str:
        """Return the rendered command line, rendering it on first access."""

        if self._command_line is None:
            self._command_line = self.render()
        return self._command_line

    @property
    def is_rendered(self) -> bool:
        """Return ``True`` once the command line has been rendered."""

        return self._command_line is not None

    def command_line_commands(self) -> str | None:
        """Return the command line when it is short enough to pass directly.

        Returns:
            str | None: The full command line in direct mode, ``None`` when a
            response file must be used instead.
        """

        command_line = self.command_line
        if len(command_line) < self.threshold:
            self.state = RenderState.RENDERED_DIRECT
            LOGGER.debug("command line of %d characters passed directly", len(command_line))
            return command_line
        self.state = RenderState.RENDERED_FOR_FILE
        LOGGER.debug(
            "command line of %d characters reaches threshold %d; using a response file",
            len(command_line),
            self.threshold,
        )
        return None

    def response_file_commands(self) -> str | None:
        """Return the response-file content, or ``None`` once after a direct render.

        Returns:
            str | None: ``None`` when the command line was just passed directly,
            otherwise the full command line.
        """

        if self.state is RenderState.RENDERED_DIRECT:
            self.state = RenderState.RENDERED_FOR_FILE
            return None
        command_line = self.command_line
        self.state = RenderState.RENDERED_FOR_FILE
        return command_line

    def reset(self) -> None:
        """Forget the memoized command line and return to :attr:`RenderState.NOT_RENDERED`."""

        self._command_line = None
        self.state = RenderState.NOT_RENDERED


__all__ = [
    "COMMAND_LINE_CEILING",
    "DEFAULT_RESPONSE_FILE_THRESHOLD",
    "RenderState",
    "ResponseFilePolicy",
]
