# termline/ui/Pager.py
"""Pager.py
=========

A minimal full-screen viewer for reviewing the last output of the host
application (opened with Ctrl+O from the line editor).

Overview:
---------
The pager switches to the alternate screen, shows a window of the content
plus a dimmed status line, and scrolls on a small set of keys. Leaving the
pager restores the primary screen exactly as it was; nothing in the
editing session (line, history, decoder) is touched.

Key Components:
---------------
- PagerView: the immutable content, the scroll offset and the terminal size
  snapshotted when the pager opened. All scrolling clamps `offset` to
  ``[0, max(0, total_lines - height)]``.
- Pager: owns a PagerView, decodes its own keys with a tiny state machine
  (`PagerKeyState`) and runs the read/draw loop inside `AltScreen`.

Keys:
-----
q Q Ctrl+O Ctrl+C quit · j Ctrl+J Enter ↓ line down · k ↑ line up ·
Space Ctrl+F PgDn page down · Ctrl+B PgUp page up · g top · G bottom.
Everything else is ignored.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any, Callable, Optional

from termline.ui.Terminal import (
    COLOR_DEFAULT,
    COLOR_GREY,
    CLEAR_SCREEN,
    CURSOR_RESET,
    AltScreen,
)
from termline.utils.utils import truncate_to_width

logger = logging.getLogger("termline")

STATUS_HINT = "Press q or Ctrl+O to exit, j/k or arrows to scroll"


# ==================== PagerView ====================
class PagerView:
    """Scroll state over a fixed list of lines.

    Attributes:
        lines (tuple[str, ...]): Content split on newlines.
        offset (int): Index of the first visible line.
        width (int): Terminal width in cells.
        height (int): Rows available for content (terminal rows minus the status line).
    """

    def __init__(self, content: str, width: int, height: int) -> None:
        self.lines: tuple[str, ...] = tuple(content.split("\n"))
        self.offset: int = 0
        self.width: int = max(width, 1)
        self.height: int = max(height, 1)

    @property
    def max_offset(self) -> int:
        return max(0, len(self.lines) - self.height)

    def _clamp(self, offset: int) -> None:
        self.offset = min(max(offset, 0), self.max_offset)

    def line_down(self) -> None:
        self._clamp(self.offset + 1)

    def line_up(self) -> None:
        self._clamp(self.offset - 1)

    def page_down(self) -> None:
        self._clamp(self.offset + self.height)

    def page_up(self) -> None:
        self._clamp(self.offset - self.height)

    def top(self) -> None:
        self.offset = 0

    def bottom(self) -> None:
        self.offset = self.max_offset

    def visible_range(self) -> tuple[int, int]:
        """Returns ``(first, end)`` indices of the lines on screen."""
        return self.offset, min(self.offset + self.height, len(self.lines))

    def status_line(self) -> str:
        first, end = self.visible_range()
        return f"[Lines {first + 1}-{end} of {len(self.lines)}] {STATUS_HINT}"


class PagerKeyState(Enum):
    NORMAL = auto()
    ESCAPE = auto()
    ESCAPE_EXTENDED = auto()
    AWAITING_TILDE = auto()


# ==================== Pager ====================
class Pager:
    """Modal viewer over a `PagerView`, driven by the editor's terminal."""

    QUIT_KEYS = frozenset({"q", "Q", "\x0f", "\x03"})

    def __init__(self, terminal: Any, content: str) -> None:
        self.terminal = terminal
        columns, rows = terminal.get_size()
        self.view = PagerView(content, columns, rows - 1)
        self.state = PagerKeyState.NORMAL
        self._pending_page: Optional[Callable[[], None]] = None
        self.key_map: dict[str, Callable[[], None]] = {
            "j": self.view.line_down,
            "\x0a": self.view.line_down,  # Ctrl+J
            "\x0d": self.view.line_down,  # Enter
            "k": self.view.line_up,
            " ": self.view.page_down,
            "\x06": self.view.page_down,  # Ctrl+F
            "\x02": self.view.page_up,  # Ctrl+B
            "g": self.view.top,
            "G": self.view.bottom,
        }
        self.escape_map: dict[str, Callable[[], None]] = {
            "A": self.view.line_up,
            "B": self.view.line_down,
        }
        self.page_map: dict[str, Callable[[], None]] = {
            "5": self.view.page_up,
            "6": self.view.page_down,
        }

    def run(self) -> None:
        """Shows the content until a quit key arrives or input fails."""
        logger.info(f"Pager opened with {len(self.view.lines)} line(s).")
        with AltScreen(self.terminal):
            while True:
                self.draw()
                try:
                    ch = self.terminal.read()
                except EOFError:
                    logger.debug("Pager: input closed, leaving pager.")
                    break
                if self.handle_key(ch):
                    break
        logger.info("Pager closed.")

    def draw(self) -> None:
        """Draws one frame: visible lines truncated to width, then the status line."""
        first, end = self.view.visible_range()
        out = [CLEAR_SCREEN, CURSOR_RESET]
        for line in self.view.lines[first:end]:
            out.append(truncate_to_width(line, self.view.width))
            out.append("\r\n")
        out.append(COLOR_GREY + self.view.status_line() + COLOR_DEFAULT)
        self.terminal.write("".join(out))

    def handle_key(self, ch: str) -> bool:
        """Feeds one code point to the pager. Returns True when the pager should close."""
        if self.state is PagerKeyState.ESCAPE:
            self.state = (
                PagerKeyState.ESCAPE_EXTENDED if ch == "[" else PagerKeyState.NORMAL
            )
            return False

        if self.state is PagerKeyState.ESCAPE_EXTENDED:
            self.state = PagerKeyState.NORMAL
            if ch in self.escape_map:
                self.escape_map[ch]()
            elif ch in self.page_map:
                self._pending_page = self.page_map[ch]
                self.state = PagerKeyState.AWAITING_TILDE
            return False

        if self.state is PagerKeyState.AWAITING_TILDE:
            self.state = PagerKeyState.NORMAL
            action, self._pending_page = self._pending_page, None
            if ch == "~" and action is not None:
                action()
            return False

        if ch in self.QUIT_KEYS:
            return True
        if ch == "\x1b":
            self.state = PagerKeyState.ESCAPE
            return False

        action = self.key_map.get(ch)
        if action is not None:
            action()
        return False
