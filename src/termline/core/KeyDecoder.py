# termline/core/KeyDecoder.py
"""KeyDecoder.py
==================
Description:
-----------------------
The KeyDecoder turns the raw stream of code points delivered by a terminal
in raw mode into logical editing events (insert a character, move the
cursor, delete a word, recall history, paste markers, ...).

It is a pure state machine: `feed()` is called once per code point and
returns zero or more `Event`s. Multi-code-point sequences (`ESC b`,
`ESC [ A`, `ESC [ 2 0 0 ~`) are assembled across calls, one state at a
time, so the decoder never needs to look ahead.

States:
- NORMAL: control codes map directly to events, ESC enters ESCAPE, any
  other code point at or above the space character is inserted.
- ESCAPE: `b`/`f` move by word, DEL deletes a word, `[` or `O` enter
  ESCAPE_EXTENDED. Anything else is dropped.
- ESCAPE_EXTENDED: arrows, Home/End, Delete and the start of a bracketed
  paste marker. Anything else is dropped.
- AWAITING_PASTE_MARKER: collects the three code points that finish a
  bracketed paste marker (`00~` starts a paste, `01~` ends it).
- AWAITING_META_DELETE_SUPPRESSION: after `ESC [ 3` the next code point
  that NORMAL state would insert or ignore (the trailing `~`) is swallowed.
  Bound control keys and complete escape sequences that arrive first are
  handled as usual and leave the suppression armed.

Unknown or garbled sequences are never surfaced as text; they are dropped
and the decoder returns to NORMAL.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable

from termline.utils.logging_config import KEY_LOGGER


# --- Control code points (conventional ASCII values) ---
CHAR_NULL = "\x00"
CHAR_LINE_START = "\x01"  # Ctrl+A
CHAR_BACKWARD = "\x02"  # Ctrl+B
CHAR_INTERRUPT = "\x03"  # Ctrl+C
CHAR_DELETE = "\x04"  # Ctrl+D
CHAR_LINE_END = "\x05"  # Ctrl+E
CHAR_FORWARD = "\x06"  # Ctrl+F
CHAR_CTRL_H = "\x08"
CHAR_TAB = "\x09"
CHAR_CTRL_J = "\x0a"
CHAR_KILL = "\x0b"  # Ctrl+K
CHAR_CTRL_L = "\x0c"
CHAR_ENTER = "\x0d"
CHAR_NEXT = "\x0e"  # Ctrl+N
CHAR_CTRL_O = "\x0f"
CHAR_PREV = "\x10"  # Ctrl+P
CHAR_CTRL_U = "\x15"
CHAR_CTRL_W = "\x17"
CHAR_CTRL_Z = "\x1a"
CHAR_ESC = "\x1b"
CHAR_SPACE = " "
CHAR_BACKSPACE = "\x7f"

# Introducers that follow ESC: CSI and SS3 (application cursor keys).
CHAR_ESCAPE_EX = "["
CHAR_SS3 = "O"

# Final bytes inside ESC [ ...
KEY_UP = "A"
KEY_DOWN = "B"
KEY_RIGHT = "C"
KEY_LEFT = "D"
META_START = "H"
META_END = "F"
KEY_DEL = "3"
CHAR_BRACKETED_PASTE = "2"

# The remainder of ESC [ 2 0 0 ~ and ESC [ 2 0 1 ~
BRACKETED_PASTE_START = "00~"
BRACKETED_PASTE_END = "01~"
PASTE_MARKER_LENGTH = 3


class DecoderState(Enum):
    NORMAL = auto()
    ESCAPE = auto()
    ESCAPE_EXTENDED = auto()
    AWAITING_PASTE_MARKER = auto()
    AWAITING_META_DELETE_SUPPRESSION = auto()


class EventKind(Enum):
    INSERT = auto()
    TAB = auto()
    ENTER = auto()
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    MOVE_LEFT_WORD = auto()
    MOVE_RIGHT_WORD = auto()
    MOVE_START = auto()
    MOVE_END = auto()
    DELETE_BEFORE = auto()
    DELETE_AT = auto()
    DELETE_OR_EOF = auto()
    DELETE_WORD = auto()
    DELETE_TO_END = auto()
    DELETE_TO_START = auto()
    HISTORY_PREV = auto()
    HISTORY_NEXT = auto()
    CLEAR_SCREEN = auto()
    SHOW_OUTPUT = auto()
    SUSPEND = auto()
    INTERRUPT = auto()
    PASTE_START = auto()
    PASTE_END = auto()


@dataclass(frozen=True)
class Event:
    """One logical editing event. ``char`` is only set for INSERT."""

    kind: EventKind
    char: str = ""


NORMAL_CONTROL_MAP: dict[str, EventKind] = {
    CHAR_INTERRUPT: EventKind.INTERRUPT,
    CHAR_PREV: EventKind.HISTORY_PREV,
    CHAR_NEXT: EventKind.HISTORY_NEXT,
    CHAR_LINE_START: EventKind.MOVE_START,
    CHAR_LINE_END: EventKind.MOVE_END,
    CHAR_BACKWARD: EventKind.MOVE_LEFT,
    CHAR_FORWARD: EventKind.MOVE_RIGHT,
    CHAR_BACKSPACE: EventKind.DELETE_BEFORE,
    CHAR_CTRL_H: EventKind.DELETE_BEFORE,
    CHAR_TAB: EventKind.TAB,
    CHAR_DELETE: EventKind.DELETE_OR_EOF,
    CHAR_KILL: EventKind.DELETE_TO_END,
    CHAR_CTRL_U: EventKind.DELETE_TO_START,
    CHAR_CTRL_L: EventKind.CLEAR_SCREEN,
    CHAR_CTRL_O: EventKind.SHOW_OUTPUT,
    CHAR_CTRL_W: EventKind.DELETE_WORD,
    CHAR_CTRL_Z: EventKind.SUSPEND,
    CHAR_ENTER: EventKind.ENTER,
    CHAR_CTRL_J: EventKind.ENTER,
}

ESCAPE_MAP: dict[str, EventKind] = {
    "b": EventKind.MOVE_LEFT_WORD,
    "f": EventKind.MOVE_RIGHT_WORD,
    CHAR_BACKSPACE: EventKind.DELETE_WORD,
}

ESCAPE_EXTENDED_MAP: dict[str, EventKind] = {
    KEY_UP: EventKind.HISTORY_PREV,
    KEY_DOWN: EventKind.HISTORY_NEXT,
    KEY_LEFT: EventKind.MOVE_LEFT,
    KEY_RIGHT: EventKind.MOVE_RIGHT,
    META_START: EventKind.MOVE_START,
    META_END: EventKind.MOVE_END,
}


def is_insertable(ch: str) -> bool:
    """True for code points that NORMAL state inserts as text."""
    return ch >= CHAR_SPACE and ch != CHAR_BACKSPACE


# ==================== KeyDecoder Class ====================
class KeyDecoder:
    """Stateful classifier from code points to `Event`s.

    Attributes:
        state (DecoderState): The currently active mode. Exactly one is
            active at a time and every code point moves it deterministically.
    """

    def __init__(self) -> None:
        self.state = DecoderState.NORMAL
        self._marker = ""
        self._meta_armed = False
        self._transitions: dict[DecoderState, Callable[[str], list[Event]]] = {
            DecoderState.NORMAL: self._feed_normal,
            DecoderState.ESCAPE: self._feed_escape,
            DecoderState.ESCAPE_EXTENDED: self._feed_escape_extended,
            DecoderState.AWAITING_PASTE_MARKER: self._feed_paste_marker,
            DecoderState.AWAITING_META_DELETE_SUPPRESSION: self._feed_meta_delete,
        }

    @property
    def meta_delete_suppressed(self) -> bool:
        return self._meta_armed

    def reset(self) -> None:
        self.state = DecoderState.NORMAL
        self._marker = ""
        self._meta_armed = False

    def _settle(self) -> None:
        """Leaves a finished sequence for NORMAL, or back to a pending suppression."""
        self.state = (
            DecoderState.AWAITING_META_DELETE_SUPPRESSION
            if self._meta_armed
            else DecoderState.NORMAL
        )

    def feed(self, ch: str) -> list[Event]:
        """Consumes one code point and returns the events it completes.

        A longer string is fed one code point at a time.
        """
        if len(ch) != 1:
            return [event for point in ch for event in self.feed(point)]
        before = self.state
        events = self._transitions[before](ch)
        KEY_LOGGER.debug(
            "code point %r: %s -> %s, events=%s",
            ch, before.name, self.state.name, [e.kind.name for e in events],
        )
        return events

    # ---------------------- transition functions --------------------
    def _feed_normal(self, ch: str) -> list[Event]:
        if ch == CHAR_NULL:
            return []
        if ch == CHAR_ESC:
            self.state = DecoderState.ESCAPE
            return []

        kind = NORMAL_CONTROL_MAP.get(ch)
        if kind is not None:
            return [Event(kind)]

        if is_insertable(ch):
            return [Event(EventKind.INSERT, ch)]

        logging.debug("KeyDecoder: ignoring unbound control code %r", ch)
        return []

    def _feed_escape(self, ch: str) -> list[Event]:
        if ch in (CHAR_ESCAPE_EX, CHAR_SS3):
            self.state = DecoderState.ESCAPE_EXTENDED
            return []

        self._settle()
        kind = ESCAPE_MAP.get(ch)
        if kind is None:
            logging.debug("KeyDecoder: dropping unknown escape sequence ESC %r", ch)
            return []
        return [Event(kind)]

    def _feed_escape_extended(self, ch: str) -> list[Event]:
        if ch == CHAR_BRACKETED_PASTE:
            self._marker = ""
            self.state = DecoderState.AWAITING_PASTE_MARKER
            return []
        if ch == KEY_DEL:
            self._meta_armed = True
            self._settle()
            return [Event(EventKind.DELETE_AT)]

        self._settle()
        kind = ESCAPE_EXTENDED_MAP.get(ch)
        if kind is None:
            logging.debug("KeyDecoder: dropping unknown sequence ESC [ %r", ch)
            return []
        return [Event(kind)]

    def _feed_paste_marker(self, ch: str) -> list[Event]:
        self._marker += ch
        if len(self._marker) < PASTE_MARKER_LENGTH:
            return []

        marker, self._marker = self._marker, ""
        self._settle()
        if marker == BRACKETED_PASTE_START:
            return [Event(EventKind.PASTE_START)]
        if marker == BRACKETED_PASTE_END:
            return [Event(EventKind.PASTE_END)]
        logging.debug("KeyDecoder: dropping unknown sequence ESC [ 2 %r", marker)
        return []

    def _feed_meta_delete(self, ch: str) -> list[Event]:
        # Bound keys and ESC go through NORMAL handling; the first code point
        # that NORMAL would insert or ignore is swallowed instead.
        if ch == CHAR_NULL or ch == CHAR_ESC or ch in NORMAL_CONTROL_MAP:
            return self._feed_normal(ch)
        self._meta_armed = False
        self.state = DecoderState.NORMAL
        return []
