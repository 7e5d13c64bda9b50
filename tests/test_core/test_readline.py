# tests/test_core/test_readline.py
"""Readline Tests
================

End-to-end tests of `Readline.readline()` driven through `FakeTerminal`.

This module verifies that:
1. Enter returns the edited line and records it in history.
2. End of input, Ctrl+D on an empty line and Ctrl+C raise the right errors.
3. Raw mode is released on every exit path, including raw-mode failures.
4. Bracketed paste switches to the alt prompt and hides the placeholder.
5. Ctrl+O rings the bell or opens the pager without touching the line.
6. Tab, Ctrl+L, Ctrl+Z and history keys behave as documented.
"""

import pytest

from termline.core.History import HistoryLog, HistoryNavigator
from termline.core.Readline import Readline
from termline.errors import EndOfInput, Interrupted, ModeError
from termline.ui.Terminal import (
    BELL,
    CLEAR_SCREEN,
    CURSOR_RESET,
    END_BRACKETED_PASTE,
    ENTER_ALT_SCREEN,
    EXIT_ALT_SCREEN,
    START_BRACKETED_PASTE,
)
from tests.stubs import (
    DELETE,
    DOWN,
    END,
    ENTER,
    HOME,
    LEFT,
    PASTE_END,
    PASTE_START,
    UP,
    FakeTerminal,
)


# --- submitting ---
def test_enter_on_empty_line_returns_empty_string(make_readline) -> None:
    rl, term = make_readline(ENTER)
    assert rl.readline() == ""
    assert rl.history.log.entries == []
    assert term.written.endswith("\r\n" + END_BRACKETED_PASTE)


def test_enter_returns_text_and_records_it(make_readline) -> None:
    rl, term = make_readline("foo" + ENTER)
    assert rl.readline() == "foo"
    assert rl.history.log.entries == ["foo"]
    assert "> foo" in term.written


def test_enter_from_middle_of_line_returns_whole_line(make_readline) -> None:
    rl, _ = make_readline("hello" + LEFT + LEFT + ENTER)
    assert rl.readline() == "hello"


def test_editing_keys(make_readline) -> None:
    keys = (
        "hello" + HOME + "X" + END + "!" + ENTER  # Xhello!
        + "foo bar\x17" + ENTER  # Ctrl+W
        + "abc\x15x" + ENTER  # Ctrl+U
        + "abc" + LEFT + LEFT + "\x0b" + ENTER  # Ctrl+K
        + "abc" + HOME + DELETE + ENTER  # Delete, trailing ~ swallowed
        + "one two\x1bb\x1b\x7f" + ENTER  # ESC b, ESC DEL
    )
    rl, _ = make_readline(keys)
    results = [rl.readline() for _ in range(6)]
    assert results == ["Xhello!", "foo ", "x", "a", "bc", "two"]


def test_garbled_escape_leaves_line_unchanged(make_readline) -> None:
    rl, _ = make_readline("ab\x1bzc\x1b[Zd" + ENTER)
    assert rl.readline() == "abcd"


def test_tab_inserts_spaces(make_readline) -> None:
    rl, _ = make_readline("\tx" + ENTER)
    assert rl.readline() == " " * 8 + "x"


# --- termination ---
def test_end_of_input_raises(make_readline) -> None:
    rl, term = make_readline("abc")
    with pytest.raises(EndOfInput):
        rl.readline()
    assert not term.raw
    assert not rl.rawmode


def test_ctrl_d_on_empty_line_raises_end_of_input(make_readline) -> None:
    rl, term = make_readline("\x04")
    with pytest.raises(EndOfInput):
        rl.readline()
    assert term.raw_calls == ["enable", "disable"]
    # EndOfInput is also an EOFError for callers that only know the builtin.
    assert issubclass(EndOfInput, EOFError)


def test_ctrl_d_on_non_empty_line_deletes_forward(make_readline) -> None:
    rl, _ = make_readline("ab" + LEFT + "\x04" + ENTER)
    assert rl.readline() == "a"


def test_delete_key_on_empty_line_is_noop(make_readline) -> None:
    rl, _ = make_readline(DELETE + "x" + ENTER)
    assert rl.readline() == "x"


def test_ctrl_c_raises_interrupted_and_releases_raw_mode(make_readline) -> None:
    rl, term = make_readline("ab\x03")
    with pytest.raises(Interrupted):
        rl.readline()
    assert not term.raw
    assert term.raw_calls == ["enable", "disable"]
    assert rl.history.log.entries == []


# --- raw mode scope ---
def test_raw_mode_is_enabled_and_released_around_each_call(make_readline) -> None:
    rl, term = make_readline("a" + ENTER + "b" + ENTER)
    rl.readline()
    rl.readline()
    assert term.raw_calls == ["enable", "disable", "enable", "disable"]
    assert term.written.startswith(START_BRACKETED_PASTE)
    assert term.written.count(END_BRACKETED_PASTE) == 2


def test_raw_mode_already_on_is_reused(make_readline) -> None:
    rl, term = make_readline("a" + ENTER)
    rl.set_raw_mode(True)
    assert rl.rawmode
    assert rl.readline() == "a"
    assert term.raw_calls == ["enable", "disable"]


def test_set_raw_mode_off(make_readline) -> None:
    rl, term = make_readline()
    rl.set_raw_mode(True)
    rl.set_raw_mode(False)
    rl.set_raw_mode(False)
    assert term.raw_calls == ["enable", "disable"]
    assert not term.raw


def test_enable_failure_propagates_mode_error(make_readline) -> None:
    rl, term = make_readline("a" + ENTER, fail_enable=True)
    with pytest.raises(ModeError):
        rl.readline()
    assert not rl.rawmode
    assert term.pending == ["a", "\r"]


def test_disable_failure_propagates_after_enter(make_readline) -> None:
    rl, _ = make_readline("a" + ENTER, fail_disable=True)
    with pytest.raises(ModeError):
        rl.readline()
    assert not rl.rawmode


def test_disable_failure_does_not_mask_interrupt(make_readline) -> None:
    rl, term = make_readline("\x03", fail_disable=True)
    with pytest.raises(Interrupted):
        rl.readline()
    assert term.raw_calls == ["enable", "disable"]
    assert not rl.rawmode


# --- prompt, placeholder, paste ---
def test_placeholder_is_drawn_on_empty_line(make_readline) -> None:
    rl, term = make_readline(ENTER)
    rl.readline()
    assert "type here" in term.written


def test_alt_placeholder_and_prompt(make_readline) -> None:
    rl, term = make_readline("x" + ENTER)
    rl.prompt.use_alt = True
    assert rl.readline() == "x"
    assert "more" in term.written
    assert ". x" in term.written


def test_paste_spanning_two_lines(make_readline) -> None:
    rl, term = make_readline(PASTE_START + "line1" + ENTER)
    assert rl.readline() == "line1"
    assert rl.paste_mode
    assert "\x1b[J. line1" in term.written

    term.output.clear()
    term.feed("line2" + PASTE_END + ENTER)
    assert rl.readline() == "line2"
    assert not rl.paste_mode
    assert "type here" not in term.written
    assert "\x1b[J. line2" in term.written
    assert "> line2" in term.written


def test_paste_markers_around_a_single_line(make_readline) -> None:
    rl, _ = make_readline(PASTE_START + "a b" + PASTE_END + ENTER)
    assert rl.readline() == "a b"


# --- Ctrl+O ---
def test_ctrl_o_without_output_rings_bell(make_readline) -> None:
    rl, term = make_readline("ab\x0f" + ENTER)
    assert rl.readline() == "ab"
    assert BELL in term.written
    assert ENTER_ALT_SCREEN not in term.written


def test_ctrl_o_opens_pager_and_leaves_line_alone(make_readline) -> None:
    history = HistoryNavigator(HistoryLog(["old"]))
    rl, term = make_readline("ab\x0f" + "jq" + "c" + ENTER, history=history)
    rl.last_output = "one\ntwo"
    assert rl.readline() == "abc"
    written = term.written
    assert ENTER_ALT_SCREEN in written
    assert EXIT_ALT_SCREEN in written
    assert written.index(ENTER_ALT_SCREEN) < written.index(EXIT_ALT_SCREEN)
    assert "one" in written
    assert history.log.entries == ["old", "abc"]


def test_pager_exits_alt_screen_when_input_closes(make_readline) -> None:
    rl, term = make_readline("\x0f")
    rl.last_output = "text"
    with pytest.raises(EndOfInput):
        rl.readline()
    assert EXIT_ALT_SCREEN in term.written
    assert not term.raw


# --- other control keys ---
def test_ctrl_l_clears_screen_and_keeps_line(make_readline) -> None:
    rl, term = make_readline("a\x0cb" + ENTER)
    assert rl.readline() == "ab"
    assert CLEAR_SCREEN + CURSOR_RESET in term.written


def test_ctrl_z_suspends_and_returns_empty_line(make_readline) -> None:
    rl, term = make_readline("ab\x1a")
    assert rl.readline() == ""
    assert term.suspended == 1
    assert term.raw_calls == ["enable", "disable"]
    assert not rl.rawmode
    assert rl.history.log.entries == []


# --- history through the editor ---
def test_up_arrow_recalls_previous_lines(make_readline) -> None:
    rl, _ = make_readline("first" + ENTER + "second" + ENTER + UP + UP + ENTER)
    assert rl.readline() == "first"
    assert rl.readline() == "second"
    assert rl.readline() == "first"
    assert rl.history.log.entries == ["first", "second", "first"]


def test_draft_survives_history_browsing(make_readline) -> None:
    rl, _ = make_readline("one" + ENTER + "dr" + UP + DOWN + "!" + ENTER)
    rl.readline()
    assert rl.readline() == "dr!"


def test_ctrl_p_and_ctrl_n(make_readline) -> None:
    rl, _ = make_readline("a" + ENTER + "b" + ENTER + "\x10\x10\x0e" + ENTER)
    rl.readline()
    rl.readline()
    assert rl.readline() == "b"


def test_disable_history(make_readline) -> None:
    rl, _ = make_readline("x" + ENTER + "y" + ENTER)
    rl.disable_history()
    rl.readline()
    rl.enable_history()
    rl.readline()
    assert rl.history.log.entries == ["y"]


def test_history_is_shared_between_instances(prompt) -> None:
    history = HistoryNavigator()
    first = Readline(prompt=prompt, terminal=FakeTerminal("cmd" + ENTER), history=history)
    first.readline()
    second = Readline(prompt=prompt, terminal=FakeTerminal(UP + ENTER), history=history)
    assert second.readline() == "cmd"


# --- configuration ---
def test_settings_come_from_config() -> None:
    config = {
        "prompt": {"prompt": "$ "},
        "editor": {"tab_width": 4, "history_enabled": False},
        "terminal": {"bracketed_paste": False},
    }
    term = FakeTerminal("\t" + ENTER)
    rl = Readline(terminal=term, config=config)
    assert rl.prompt.prompt == "$ "
    assert rl.prompt.alt_prompt == "... "
    assert rl.readline() == "    "
    assert rl.history.log.entries == []
    assert START_BRACKETED_PASTE not in term.written
