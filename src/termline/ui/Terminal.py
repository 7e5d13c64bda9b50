# termline/ui/Terminal.py
"""Terminal collaborators for the line editor.

- `RawMode`: puts one tty file descriptor into raw (non-canonical,
  non-echoing, no signal generation) mode and hands back a token that
  restores the previous attributes.
- `AltScreen`: scoped switch to the alternate screen buffer; the primary
  screen (and the cursor position) is restored on exit.
- `Terminal`: blocking source of one code point at a time, an output
  surface for control sequences, a size query and process suspension.

Tests replace `Terminal` wholesale with a scripted fake; nothing in the
editing core talks to `sys.stdin`/`sys.stdout` directly.
"""

from __future__ import annotations

import codecs
import logging
import os
import shutil
import signal
import sys
import termios
from types import TracebackType
from typing import Any, Optional, TextIO

from termline.errors import ModeError


# ── control sequences ────────────────────────────────────────────────────────
CLEAR_TO_EOL = "\x1b[K"
CLEAR_TO_EOS = "\x1b[J"
CLEAR_SCREEN = "\x1b[2J"
CURSOR_RESET = "\x1b[H"
ENTER_ALT_SCREEN = "\x1b[?1049h"
EXIT_ALT_SCREEN = "\x1b[?1049l"
START_BRACKETED_PASTE = "\x1b[?2004h"
END_BRACKETED_PASTE = "\x1b[?2004l"
COLOR_GREY = "\x1b[38;5;245m"
COLOR_DEFAULT = "\x1b[0m"
BELL = "\a"


def cursor_left(n: int) -> str:
    return f"\x1b[{n}D" if n > 0 else ""


def cursor_right(n: int) -> str:
    return f"\x1b[{n}C" if n > 0 else ""


def cursor_up(n: int) -> str:
    return f"\x1b[{n}A" if n > 0 else ""


# ==================== RawMode ====================
class RawMode:
    """Raw-mode switch for a single terminal file descriptor.

    ``enable()`` returns the attributes that were active before the switch;
    passing them back to ``disable()`` restores the terminal. ``disable(None)``
    is a no-op so it is safe to call after a failed ``enable()``.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd

    def enable(self) -> list[Any]:
        try:
            saved = termios.tcgetattr(self.fd)
        except (termios.error, OSError) as e:
            logging.error("RawMode: could not read attributes of fd %d: %s", self.fd, e)
            raise ModeError(f"could not enable raw mode: {e}") from e

        try:
            raw = termios.tcgetattr(self.fd)
            raw[0] &= ~(
                termios.IGNBRK | termios.BRKINT | termios.PARMRK | termios.ISTRIP
                | termios.INLCR | termios.IGNCR | termios.ICRNL | termios.IXON
            )
            raw[3] &= ~(
                termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN
            )
            raw[2] &= ~(termios.CSIZE | termios.PARENB)
            raw[2] |= termios.CS8
            # Output post-processing stays on so "\n" still returns the carriage.
            raw[6][termios.VMIN] = 1
            raw[6][termios.VTIME] = 0
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        except (termios.error, OSError) as e:
            logging.error("RawMode: could not enable raw mode on fd %d: %s", self.fd, e)
            self._restore_after_failure(saved)
            raise ModeError(f"could not enable raw mode: {e}") from e
        logging.debug("RawMode: enabled on fd %d.", self.fd)
        return saved

    def _restore_after_failure(self, saved: list[Any]) -> None:
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, saved)
        except (termios.error, OSError) as e:
            logging.error("RawMode: could not restore fd %d after failure: %s", self.fd, e)

    def disable(self, token: Optional[list[Any]]) -> None:
        if token is None:
            return
        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, token)
        except (termios.error, OSError) as e:
            logging.error("RawMode: could not restore terminal on fd %d: %s", self.fd, e)
            raise ModeError(f"could not restore terminal mode: {e}") from e
        logging.debug("RawMode: restored cooked mode on fd %d.", self.fd)


# ==================== AltScreen ====================
class AltScreen:
    """Context manager pairing enter/exit of the alternate screen buffer.

    Always used as ``with AltScreen(terminal): ...`` so the exit sequence is
    written however the block finishes (quit key, read error, interrupt).
    """

    def __init__(self, terminal: Any) -> None:
        self.terminal = terminal

    def __enter__(self) -> AltScreen:
        self.terminal.write(ENTER_ALT_SCREEN)
        logging.debug("AltScreen: entered.")
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        self.terminal.write(EXIT_ALT_SCREEN)
        logging.debug("AltScreen: exited.")
        return False


# ==================== Terminal ====================
class Terminal:
    """The real terminal: stdin for input, stdout for output."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        fallback_size: tuple[int, int] = (80, 24),
    ) -> None:
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.fallback_size = fallback_size
        self.raw_mode = RawMode(self.stdin.fileno())
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
        self._pending: list[str] = []

    def read(self) -> str:
        """Blocks until one complete code point is available.

        Raises:
            EOFError: the stream is closed or the read failed.
        """
        if self._pending:
            return self._pending.pop(0)

        fd = self.raw_mode.fd
        while True:
            try:
                data = os.read(fd, 1)
            except OSError as e:
                logging.warning("Terminal: read failed: %s", e)
                raise EOFError(str(e)) from e
            if not data:
                raise EOFError("input stream closed")
            decoded = self._decoder.decode(data)
            if decoded:
                # A broken sequence decodes to U+FFFD plus the byte after it.
                self._pending.extend(decoded[1:])
                return decoded[0]

    def write(self, text: str) -> None:
        if not text:
            return
        self.stdout.write(text)
        self.stdout.flush()

    def get_size(self) -> tuple[int, int]:
        """Returns ``(columns, lines)``, falling back when the query fails."""
        try:
            size = os.get_terminal_size(self.stdout.fileno())
            columns, lines = size.columns, size.lines
        except (AttributeError, ValueError, OSError):
            columns, lines = shutil.get_terminal_size(self.fallback_size)
        if columns <= 0 or lines <= 0:
            return self.fallback_size
        return columns, lines

    def enable_raw(self) -> list[Any]:
        return self.raw_mode.enable()

    def disable_raw(self, token: Optional[list[Any]]) -> None:
        self.raw_mode.disable(token)

    def suspend(self) -> None:
        """Stops the whole process group, as a shell's job control would."""
        logging.info("Terminal: suspending process group.")
        os.kill(0, signal.SIGSTOP)
