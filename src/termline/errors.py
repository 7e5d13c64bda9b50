# termline/errors.py
"""Exceptions raised by `Readline.readline()`.

Garbled or unknown key sequences are never reported here: the decoder
drops them and the editing session carries on.
"""


class ReadlineError(Exception):
    """Base class for every error surfaced by the line editor."""


class EndOfInput(ReadlineError, EOFError):
    """The input stream closed, or Ctrl+D was pressed on an empty line."""


class Interrupted(ReadlineError):
    """The user aborted the current line with Ctrl+C."""


class ModeError(ReadlineError):
    """Switching the terminal into or out of raw mode failed."""
