# termline/core/LineBuffer.py
"""LineBuffer Module
===================
The `LineBuffer` owns the text of the line being edited and the cursor
index into it. The cursor is a code point index in ``[0, len(text)]``;
every operation clamps to that range and is a silent no-op at the edges.

Rendering is stateless with respect to the text: `render()` recomputes
where the terminal cursor belongs from the prompt width, the display
width of the text before the cursor and the terminal width on every
call. The only thing remembered between renders is the screen row the
terminal cursor was left on, which is needed to get back to the first
row of the prompt when the line wraps.
"""

import logging

from termline.ui.Terminal import CLEAR_TO_EOS, cursor_right, cursor_up
from termline.utils.utils import get_display_width


def _is_space(ch: str) -> bool:
    return ch.isspace()


## ==================== LineBuffer Class ====================
class LineBuffer:
    """Cursor-aware editable line of text.

    Attributes:
        text (list[str]): The line as a list of code points.
        cursor (int): Insertion point, ``0 <= cursor <= len(text)``.
    """

    def __init__(self, text: str = "") -> None:
        self.text: list[str] = list(text)
        self.cursor: int = len(self.text)
        self._cursor_row: int = 0

    def __str__(self) -> str:
        return "".join(self.text)

    def __len__(self) -> int:
        return len(self.text)

    def is_empty(self) -> bool:
        return not self.text

    def display_width(self) -> int:
        """Number of terminal cells the whole line occupies."""
        return get_display_width(str(self))

    # ---------------- Mutation ------------------------
    def insert(self, ch: str) -> None:
        self.text[self.cursor:self.cursor] = list(ch)
        self.cursor += len(ch)

    def delete_before(self) -> None:
        """Backspace: removes the code point left of the cursor."""
        if self.cursor > 0:
            del self.text[self.cursor - 1]
            self.cursor -= 1

    def delete_at(self) -> None:
        """Forward delete: removes the code point under the cursor."""
        if self.cursor < len(self.text):
            del self.text[self.cursor]

    def delete_to_end(self) -> None:
        del self.text[self.cursor:]

    def delete_to_start(self) -> None:
        del self.text[:self.cursor]
        self.cursor = 0

    def delete_word(self) -> None:
        """Removes whitespace left of the cursor, then the word before it."""
        start = self._word_start_left()
        if start < self.cursor:
            del self.text[start:self.cursor]
            self.cursor = start

    def replace(self, new_text: str) -> None:
        """Swaps the whole line (history recall); the cursor snaps to the end."""
        self.text = list(new_text)
        self.cursor = len(self.text)

    # ---------------- Cursor movement ------------------------
    def move_left(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_right(self) -> None:
        if self.cursor < len(self.text):
            self.cursor += 1

    def move_to_start(self) -> None:
        self.cursor = 0

    def move_to_end(self) -> None:
        self.cursor = len(self.text)

    def move_left_word(self) -> None:
        self.cursor = self._word_start_left()

    def move_right_word(self) -> None:
        pos = self.cursor
        size = len(self.text)
        while pos < size and _is_space(self.text[pos]):
            pos += 1
        while pos < size and not _is_space(self.text[pos]):
            pos += 1
        self.cursor = pos

    def _word_start_left(self) -> int:
        pos = self.cursor
        while pos > 0 and _is_space(self.text[pos - 1]):
            pos -= 1
        while pos > 0 and not _is_space(self.text[pos - 1]):
            pos -= 1
        return pos

    # ---------------- Rendering ------------------------
    def render(self, prompt: str, columns: int) -> str:
        """Returns the control sequence that redraws prompt + line from scratch.

        The output starts by returning to the first row of the previous
        render, clears to the end of the screen, writes prompt and text and
        finally places the terminal cursor over ``self.cursor``.
        """
        columns = max(columns, 1)
        prompt_width = get_display_width(prompt)
        total = prompt_width + self.display_width()
        before = prompt_width + get_display_width("".join(self.text[:self.cursor]))

        out = [cursor_up(self._cursor_row), "\r", CLEAR_TO_EOS, prompt, str(self)]

        end_row = total // columns
        if total and total % columns == 0:
            # The terminal holds the cursor in the last column until the next
            # character; force the wrap so rows below are counted correctly.
            out.append(" \r")

        target_row, target_col = divmod(before, columns)
        out.append(cursor_up(end_row - target_row))
        out.append("\r")
        out.append(cursor_right(target_col))

        self._cursor_row = target_row
        logging.debug(
            "LineBuffer.render: cursor=%d/%d row=%d col=%d",
            self.cursor, len(self.text), target_row, target_col,
        )
        return "".join(out)

    def reset_render_origin(self) -> None:
        """Forgets the previous render, e.g. after the screen was cleared."""
        self._cursor_row = 0
