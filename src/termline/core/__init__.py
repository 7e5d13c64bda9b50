# termline/core/__init__.py
"""Public facade for termline.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (KeyDecoder.py, LineBuffer.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .History import HistoryLog, HistoryNavigator  # noqa: F401
from .KeyDecoder import DecoderState, Event, EventKind, KeyDecoder  # noqa: F401
from .LineBuffer import LineBuffer  # noqa: F401
from .Prompt import Prompt  # noqa: F401
from .Readline import Readline  # noqa: F401


__all__ = [
    "DecoderState",
    "Event",
    "EventKind",
    "HistoryLog",
    "HistoryNavigator",
    "KeyDecoder",
    "LineBuffer",
    "Prompt",
    "Readline",
]
