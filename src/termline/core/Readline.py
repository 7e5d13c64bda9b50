# termline/core/Readline.py
"""termline.core.Readline
=========================
Readline: the "read one line" interaction.

`Readline.readline()` puts the terminal into raw mode (unless it already
is), draws the prompt and placeholder, pulls code points from the terminal
one at a time, feeds them to a fresh `KeyDecoder`, and applies the
resulting events to a `LineBuffer` and the shared `HistoryNavigator`.

It returns the finished line on Enter and raises `EndOfInput` or
`Interrupted` otherwise. Raw mode is released on every exit path before
control returns to the caller; the pager's alternate screen is scoped the
same way inside `Pager.run()`.

State kept across calls: the history, the paste flag (a paste may span
several lines, each returned by its own call) and `last_output`, the text
the host application wants Ctrl+O to show.
"""

import logging
from typing import Any, Callable, Optional

from termline.core.History import HistoryNavigator
from termline.core.KeyDecoder import Event, EventKind, KeyDecoder
from termline.core.LineBuffer import LineBuffer
from termline.core.Prompt import Prompt
from termline.errors import EndOfInput, Interrupted, ModeError
from termline.ui.Pager import Pager
from termline.ui.Terminal import (
    BELL,
    CLEAR_SCREEN,
    CLEAR_TO_EOL,
    COLOR_DEFAULT,
    COLOR_GREY,
    CURSOR_RESET,
    END_BRACKETED_PASTE,
    START_BRACKETED_PASTE,
    Terminal,
    cursor_left,
)
from termline.utils.utils import DEFAULT_CONFIG, get_display_width

logger = logging.getLogger("termline")


# ==================== Readline Class ====================
class Readline:
    """Interactive line editor bound to one terminal.

    Attributes:
        prompt (Prompt): Prompt/placeholder strings and the alt-mode switch.
        terminal: Raw-mode, input and output collaborator (see `Terminal`).
        history (HistoryNavigator): Submitted lines and browsing state.
        paste_mode (bool): True between bracketed-paste start and end markers.
        last_output (str): Content shown by Ctrl+O; empty means "nothing to show".
        tab_width (int): Number of spaces a Tab inserts.
    """

    def __init__(
        self,
        prompt: Optional[Prompt] = None,
        terminal: Optional[Any] = None,
        history: Optional[HistoryNavigator] = None,
        config: Optional[dict[str, Any]] = None,
    ) -> None:
        config = config or DEFAULT_CONFIG
        editor_cfg = config.get("editor", {})
        terminal_cfg = config.get("terminal", {})

        self.prompt = prompt or Prompt.from_config(config)
        self.terminal = terminal or Terminal(
            fallback_size=(
                int(terminal_cfg.get("fallback_columns", 80)),
                int(terminal_cfg.get("fallback_lines", 24)),
            )
        )
        self.history = history or HistoryNavigator(
            enabled=bool(editor_cfg.get("history_enabled", True))
        )
        self.tab_width = int(editor_cfg.get("tab_width", 8))
        self.bracketed_paste = bool(terminal_cfg.get("bracketed_paste", True))
        self.paste_mode = False
        self.last_output = ""
        self._mode_token: Optional[Any] = None
        self._rawmode = False

        self._handlers: dict[EventKind, Callable[[LineBuffer], None]] = {
            EventKind.MOVE_LEFT: LineBuffer.move_left,
            EventKind.MOVE_RIGHT: LineBuffer.move_right,
            EventKind.MOVE_LEFT_WORD: LineBuffer.move_left_word,
            EventKind.MOVE_RIGHT_WORD: LineBuffer.move_right_word,
            EventKind.MOVE_START: LineBuffer.move_to_start,
            EventKind.MOVE_END: LineBuffer.move_to_end,
            EventKind.DELETE_BEFORE: LineBuffer.delete_before,
            EventKind.DELETE_AT: LineBuffer.delete_at,
            EventKind.DELETE_WORD: LineBuffer.delete_word,
            EventKind.DELETE_TO_END: LineBuffer.delete_to_end,
            EventKind.DELETE_TO_START: LineBuffer.delete_to_start,
            EventKind.HISTORY_PREV: self.history.prev,
            EventKind.HISTORY_NEXT: self.history.next,
            EventKind.TAB: self._insert_tab,
            EventKind.CLEAR_SCREEN: self._clear_screen,
            EventKind.SHOW_OUTPUT: self._show_last_output,
        }

    # ---------------------- caller-facing surface --------------------
    @property
    def rawmode(self) -> bool:
        return self._rawmode

    def set_raw_mode(self, on: bool) -> None:
        """Switches raw mode on or off outside of a `readline()` call."""
        if on and not self._rawmode:
            self._acquire_raw_mode()
        elif not on and self._rawmode:
            self._release_raw_mode()

    def enable_history(self) -> None:
        self.history.enabled = True

    def disable_history(self) -> None:
        self.history.enabled = False

    def readline(self) -> str:
        """Reads one line from the terminal.

        Returns:
            str: The submitted text, possibly empty.

        Raises:
            EndOfInput: Input closed, or Ctrl+D on an empty line.
            Interrupted: Ctrl+C.
            ModeError: Raw mode could not be entered or left.
        """
        if not self._rawmode:
            self._acquire_raw_mode()

        try:
            if self.bracketed_paste:
                self.terminal.write(START_BRACKETED_PASTE)
            line = self._read_loop()
        except BaseException:
            self._release_raw_mode(quiet=True)
            raise
        self._release_raw_mode()
        return line

    # ---------------------- raw mode scope --------------------
    def _acquire_raw_mode(self) -> None:
        self._mode_token = self.terminal.enable_raw()
        self._rawmode = True

    def _release_raw_mode(self, quiet: bool = False) -> None:
        """Restores the terminal; with *quiet* a failure is only logged."""
        if not self._rawmode:
            return
        token, self._mode_token = self._mode_token, None
        self._rawmode = False
        try:
            if self.bracketed_paste:
                self.terminal.write(END_BRACKETED_PASTE)
            self.terminal.disable_raw(token)
        except ModeError:
            if not quiet:
                raise
            logger.exception("Readline: could not restore terminal mode while unwinding.")

    # ---------------------- read loop --------------------
    def _current_prompt(self) -> str:
        # The alt prompt is forced while a paste is in progress.
        return self.prompt.alt_prompt if self.paste_mode else self.prompt.current_prompt()

    def _render(self, buf: LineBuffer) -> None:
        columns, _ = self.terminal.get_size()
        self.terminal.write(buf.render(self._current_prompt(), columns))

    def _draw_placeholder(self) -> None:
        ph = self.prompt.current_placeholder()
        if ph:
            self.terminal.write(
                COLOR_GREY + ph + cursor_left(get_display_width(ph)) + COLOR_DEFAULT
            )

    def _read_loop(self) -> str:
        buf = LineBuffer()
        decoder = KeyDecoder()
        self.history.reset()
        self._render(buf)

        while True:
            # No placeholder mid-paste unless we're in multi-line mode.
            show_placeholder = not self.paste_mode or self.prompt.use_alt
            if buf.is_empty() and show_placeholder:
                self._draw_placeholder()

            try:
                ch = self.terminal.read()
            except EOFError as e:
                logger.debug("Readline: input stream closed.")
                raise EndOfInput("input stream closed") from e

            if buf.is_empty():
                self.terminal.write(CLEAR_TO_EOL)

            events = decoder.feed(ch)
            if not events:
                continue

            for event in events:
                result = self._apply(event, buf)
                if result is not None:
                    return result
            self._render(buf)

    def _apply(self, event: Event, buf: LineBuffer) -> Optional[str]:
        """Applies one event. Returns the finished line when the read is over."""
        kind = event.kind

        if kind is EventKind.INSERT:
            buf.insert(event.char)
        elif kind is EventKind.ENTER:
            return self._submit(buf)
        elif kind is EventKind.DELETE_OR_EOF:
            if buf.is_empty():
                raise EndOfInput("Ctrl+D on an empty line")
            buf.delete_at()
        elif kind is EventKind.INTERRUPT:
            raise Interrupted()
        elif kind is EventKind.SUSPEND:
            return self._suspend()
        elif kind is EventKind.PASTE_START:
            self.paste_mode = True
            logger.debug("Readline: bracketed paste started.")
        elif kind is EventKind.PASTE_END:
            self.paste_mode = False
            logger.debug("Readline: bracketed paste ended.")
        else:
            self._handlers[kind](buf)
        return None

    def _submit(self, buf: LineBuffer) -> str:
        line = str(buf)
        self.history.record(line)
        buf.move_to_end()
        self._render(buf)
        self.terminal.write("\r\n")
        return line

    # ---------------------- event handlers --------------------
    def _insert_tab(self, buf: LineBuffer) -> None:
        buf.insert(" " * self.tab_width)

    def _clear_screen(self, buf: LineBuffer) -> None:
        self.terminal.write(CLEAR_SCREEN + CURSOR_RESET)
        buf.reset_render_origin()

    def _show_last_output(self, buf: LineBuffer) -> None:
        if not self.last_output:
            self.terminal.write(BELL)
            return
        Pager(self.terminal, self.last_output).run()

    def _suspend(self) -> str:
        self._release_raw_mode()
        self.terminal.suspend()
        return ""
