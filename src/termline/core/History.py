# termline/core/History.py
"""History Module for the termline line editor
==============================================
This module provides command history for the line editor: an append-only
log of submitted lines and a navigator that lets the user browse it with
Up/Down (or Ctrl+P/Ctrl+N) without losing the line they were typing.

Key Features:
-------------
- `HistoryLog` keeps submitted lines in chronological order plus a cursor
  `pos` in ``[0, len]``; ``pos == len`` means "not browsing".
- `pos` only ever moves one step per navigation call.
- `HistoryNavigator` captures the in-progress line (the *draft*) when
  browsing starts and restores it verbatim when browsing returns past the
  newest entry. The draft is a present/absent slot: an empty draft is
  still a draft.
- Recording can be switched off (`enabled = False`); browsing keeps
  working over the entries already collected.

Classes:
--------
- HistoryLog: ordered entries and the browsing position.
- HistoryNavigator: couples a HistoryLog with a LineBuffer and owns the draft.
"""
import logging
from typing import TYPE_CHECKING, Optional


if TYPE_CHECKING:
    from termline.core.LineBuffer import LineBuffer


## ==================== HistoryLog Class ====================
class HistoryLog:
    """Append-only list of submitted lines with a browsing position.

    Attributes:
        entries (list[str]): Submitted lines, oldest first.
        pos (int): Browsing position; ``len(entries)`` when not browsing.
    """

    def __init__(self, entries: Optional[list[str]] = None) -> None:
        self.entries: list[str] = list(entries or [])
        self.pos: int = len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, line: str) -> None:
        self.entries.append(line)
        self.pos = len(self.entries)
        logging.debug(f"History: entry added. History size: {len(self.entries)}")

    def rewind(self) -> None:
        """Stops browsing."""
        self.pos = len(self.entries)

    def prev(self) -> Optional[str]:
        """Steps one entry back; returns None when already at the oldest."""
        if self.pos <= 0:
            return None
        self.pos -= 1
        return self.entries[self.pos]

    def next(self) -> Optional[str]:
        """Steps one entry forward; returns None when that reaches the live line."""
        if self.pos >= len(self.entries):
            return None
        self.pos += 1
        if self.pos == len(self.entries):
            return None
        return self.entries[self.pos]


## ==================== HistoryNavigator Class ====================
class HistoryNavigator:
    """Browses a `HistoryLog` on behalf of a `LineBuffer`.

    Attributes:
        log (HistoryLog): The underlying entries and position.
        draft (Optional[str]): The line being edited when browsing started;
            None while not browsing.
        enabled (bool): Whether `record()` appends submitted lines.
    """

    def __init__(self, log: Optional[HistoryLog] = None, enabled: bool = True) -> None:
        self.log = log if log is not None else HistoryLog()
        self.draft: Optional[str] = None
        self.enabled = enabled

    @property
    def browsing(self) -> bool:
        return self.log.pos < len(self.log)

    def record(self, line: str) -> None:
        """Appends a submitted line (if non-empty and enabled) and stops browsing."""
        if line and self.enabled:
            self.log.append(line)
        elif line:
            logging.debug("History: recording disabled, line not stored.")
        self.reset()

    def reset(self) -> None:
        self.log.rewind()
        self.draft = None

    def prev(self, buffer: "LineBuffer") -> bool:
        """Loads the previous entry into *buffer*. Returns True if it moved."""
        if self.log.pos <= 0:
            return False
        if not self.browsing:
            self.draft = str(buffer)
            logging.debug("History: browsing started, draft captured.")
        entry = self.log.prev()
        buffer.replace(entry or "")
        return True

    def next(self, buffer: "LineBuffer") -> bool:
        """Loads the next entry, or the draft once past the newest entry."""
        if not self.browsing:
            return False
        entry = self.log.next()
        if self.browsing:
            buffer.replace(entry or "")
            return True

        buffer.replace(self.draft if self.draft is not None else "")
        self.draft = None
        logging.debug("History: browsing finished, draft restored.")
        return True
