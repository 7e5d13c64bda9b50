# tests/conftest.py
"""Pytest configuration with shared fixtures for the termline tests.

Every fixture here works without a real terminal: the editor is wired to
`tests.stubs.FakeTerminal`, which replays scripted code points and captures
everything written.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from termline.core.History import HistoryNavigator
from termline.core.Prompt import Prompt
from termline.core.Readline import Readline
from tests.stubs import FakeTerminal


@pytest.fixture
def prompt() -> Prompt:
    """Provide a prompt with distinct primary/alt strings and placeholders.

    Returns:
        Prompt: `"> "` / `". "` with placeholders `"type here"` / `"more"`.
    """
    return Prompt(
        prompt="> ",
        alt_prompt=". ",
        placeholder="type here",
        alt_placeholder="more",
    )


@pytest.fixture
def make_readline(prompt: Prompt) -> Callable[..., tuple[Readline, FakeTerminal]]:
    """Factory building a `Readline` bound to a fresh `FakeTerminal`.

    Keyword arguments are forwarded to `FakeTerminal`; pass ``history=`` to
    share a `HistoryNavigator` between instances.

    Returns:
        Callable returning ``(readline, terminal)``.
    """

    def factory(
        keys: str = "", history: HistoryNavigator | None = None, **kwargs: Any
    ) -> tuple[Readline, FakeTerminal]:
        terminal = FakeTerminal(keys, **kwargs)
        rl = Readline(prompt=prompt, terminal=terminal, history=history)
        return rl, terminal

    return factory
