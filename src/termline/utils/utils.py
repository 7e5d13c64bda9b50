# termline/utils/utils.py
"""
termline.utils.utils.py
=======================

This module provides the core utility functions shared by the termline
line editor.

Key functionalities include:
- Automatic User Configuration: Manages the creation and loading of the
  user-specific configuration file (`config.toml`) in `~/.config/termline`,
  ensuring a seamless first-run experience.
- Robust Configuration Loading: Implements a layered strategy that loads a
  hardcoded, built-in default configuration, then recursively merges it with
  user-defined settings from the TOML file.
- Display Width Helpers: Computes how many terminal cells a character or a
  string occupies (wide CJK glyphs, combining marks, control characters), and
  truncates strings to a given number of cells.

This architecture ensures the line editor is always usable, even if the user
configuration file is missing or corrupted, by falling back to the embedded
defaults.
"""

import logging
import unicodedata
from pathlib import Path
from typing import Any, Dict, Optional, cast

import toml
from wcwidth import wcswidth, wcwidth

logger = logging.getLogger("termline")

# This dictionary is the ultimate fallback, ensuring the editor can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "prompt": {
        "prompt": ">>> ",
        "alt_prompt": "... ",
        "placeholder": "Send a message (/? for help)",
        "alt_placeholder": 'Use """ to end multi-line input',
    },
    "editor": {"tab_width": 8, "history_enabled": True},
    "terminal": {
        "fallback_columns": 80,
        "fallback_lines": 24,
        "bracketed_paste": True,
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
        "log_file": "termline.log",
    },
}


# --- Helper Functions ---

def get_config_dir() -> Path:
    """Returns the per-user configuration directory."""
    return Path.home() / ".config" / "termline"


def ensure_user_config_exists(config_dir: Optional[Path] = None) -> None:
    """Creates `config.toml` with the default settings if it is missing."""
    try:
        config_dir = config_dir or get_config_dir()
        user_config_path = config_dir / "config.toml"
        config_dir.mkdir(parents=True, exist_ok=True)

        if not user_config_path.exists():
            with user_config_path.open("w", encoding="utf-8") as fh:
                toml.dump(DEFAULT_CONFIG, fh)
            logger.info(f"Created user config template at: {user_config_path}")

    except Exception as e:
        logger.error(f"Could not create user configuration file: {e}")


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the editor can always run.

    When *path* is given it is used as the user configuration file and no
    template is written; otherwise `~/.config/termline/config.toml` is used
    (and created on first run).
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    if path is None:
        ensure_user_config_exists()
        path = get_config_dir() / "config.toml"

    if path.is_file():
        try:
            user_config = toml.load(path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {path}")
        except Exception as e:
            logger.error(f"Could not parse user config '{path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def get_char_width(char: str) -> int:
    """Calculates the display width of a single character using wcwidth.

    Control and format characters take no cells, combining marks take none,
    and characters of undefined width (-1) count as one cell so the cursor
    still advances.
    """
    if not isinstance(char, str) or len(char) != 1:
        return 1

    if unicodedata.category(char) in ("Cc", "Cf"):
        return 0
    if unicodedata.combining(char):
        return 0

    width = wcwidth(char)
    return width if width >= 0 else 1


def get_display_width(text: str) -> int:
    """Return the printable width of *text* in terminal cells.

    * Uses wcwidth / wcswidth to honour full-width CJK.
    * Treats non-printable characters (wcwidth == -1) as width 0.
    """
    # Fast-path for ASCII
    if text.isascii() and text.isprintable():
        return len(text)

    width = cast(int, wcswidth(text))
    if width < 0:
        width = sum(get_char_width(ch) for ch in text)
    return width


def truncate_to_width(text: str, max_width: int) -> str:
    """Cuts *text* so that it occupies at most *max_width* terminal cells."""
    if max_width <= 0:
        return ""
    if get_display_width(text) <= max_width:
        return text

    used = 0
    for idx, ch in enumerate(text):
        w = get_char_width(ch)
        if used + w > max_width:
            return text[:idx]
        used += w
    return text
