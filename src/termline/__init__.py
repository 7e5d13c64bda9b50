# termline/__init__.py
"""termline: an interactive raw-mode line editor for terminal applications."""

from termline.core import HistoryNavigator, Prompt, Readline  # noqa: F401
from termline.errors import EndOfInput, Interrupted, ModeError, ReadlineError  # noqa: F401

__version__ = "0.1.0"

__all__ = [
    "EndOfInput",
    "HistoryNavigator",
    "Interrupted",
    "ModeError",
    "Prompt",
    "Readline",
    "ReadlineError",
]
