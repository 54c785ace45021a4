# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the direct versus response-file decision."""

from __future__ import annotations

import pytest

from toolswitch.response_file import DEFAULT_RESPONSE_FILE_THRESHOLD, RenderState, ResponseFilePolicy


class _CountingRender:
    def __init__(self, text: str) -> None:
        self.text = text
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        return self.text


def test_short_command_line_is_passed_directly() -> None:
    render = _CountingRender("/O2 /W4")
    policy = ResponseFilePolicy(render=render)

    assert policy.state is RenderState.NOT_RENDERED
    assert policy.command_line_commands() == "/O2 /W4"
    assert policy.state is RenderState.RENDERED_DIRECT


def test_direct_render_suppresses_exactly_one_response_file_request() -> None:
    render = _CountingRender("/O2 /W4")
    policy = ResponseFilePolicy(render=render)

    policy.command_line_commands()

    assert policy.response_file_commands() is None
    assert policy.state is RenderState.RENDERED_FOR_FILE
    assert policy.response_file_commands() == "/O2 /W4"
    assert render.calls == 1


def test_long_command_line_uses_a_response_file() -> None:
    text = "x" * DEFAULT_RESPONSE_FILE_THRESHOLD
    policy = ResponseFilePolicy(render=_CountingRender(text))

    assert policy.command_line_commands() is None
    assert policy.state is RenderState.RENDERED_FOR_FILE
    assert policy.response_file_commands() == text


def test_threshold_boundary_is_exclusive() -> None:
    just_under = ResponseFilePolicy(render=_CountingRender("x" * 9), threshold=10)
    at_threshold = ResponseFilePolicy(render=_CountingRender("x" * 10), threshold=10)

    assert just_under.command_line_commands() == "x" * 9
    assert at_threshold.command_line_commands() is None


def test_response_file_request_without_direct_render_returns_text() -> None:
    policy = ResponseFilePolicy(render=_CountingRender("/c a.c"))

    assert policy.response_file_commands() == "/c a.c"
    assert policy.response_file_commands() == "/c a.c"


def test_reset_renders_again() -> None:
    render = _CountingRender("/c")
    policy = ResponseFilePolicy(render=render)
    policy.command_line_commands()

    policy.reset()

    assert policy.state is RenderState.NOT_RENDERED
    assert not policy.is_rendered
    assert policy.command_line == "/c"
    assert render.calls == 2


@pytest.mark.parametrize("threshold", [0, 32768, 40000])
def test_threshold_must_stay_below_the_process_ceiling(threshold: int) -> None:
    with pytest.raises(ValueError):
        ResponseFilePolicy(render=_CountingRender(""), threshold=threshold)
