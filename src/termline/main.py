#!/usr/bin/env python3
# termline/main.py
"""
termline Demo Entry Point
=========================

A small echo REPL that exercises the line editor end to end:
1) Configuration & Logging: loads config and initializes logging ASAP.
2) Editor Setup: builds a `Readline` from the configuration.
3) Read Loop: reads lines until end of input. Every echoed line becomes the
   "last output" so Ctrl+O can show it in the pager. A line consisting of
   triple quotes starts or finishes a multi-line block, read with the alt prompt.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from termline.errors import EndOfInput, Interrupted, ModeError
from termline.utils.logging_config import setup_logging
from termline.utils.utils import load_config

MULTILINE_DELIM = '"""'


def run_repl(rl: Any, out: Any = None) -> int:
    """Echoes lines read from *rl* until end of input. Returns the exit code."""
    out = out or sys.stdout
    logger = logging.getLogger("termline")
    block: list[str] = []

    while True:
        try:
            line = rl.readline()
        except EndOfInput:
            logger.info("End of input, leaving REPL.")
            out.write("\n")
            return 0
        except Interrupted:
            out.write("^C\n")
            block.clear()
            rl.prompt.use_alt = False
            continue
        except ModeError:
            logger.critical("Could not switch terminal mode.", exc_info=True)
            return 1

        if rl.prompt.use_alt:
            if line.endswith(MULTILINE_DELIM):
                block.append(line[: -len(MULTILINE_DELIM)])
                rl.prompt.use_alt = False
                line = "\n".join(block)
                block.clear()
            else:
                block.append(line)
                continue
        elif line.startswith(MULTILINE_DELIM) and not line.endswith(MULTILINE_DELIM, 3):
            block.append(line[len(MULTILINE_DELIM):])
            rl.prompt.use_alt = True
            continue
        elif rl.paste_mode:
            # Pasted text arrives one line per call until the end marker.
            block.append(line)
            continue
        elif block:
            block.append(line)
            line = "\n".join(block)
            block.clear()

        if not line:
            continue
        out.write(line + "\n")
        out.flush()
        rl.last_output = line


def start() -> None:
    """Loads configuration, initializes logging and runs the echo REPL."""
    try:
        config: dict[str, Any] = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        sys.exit(1)

    logger = logging.getLogger("termline")
    logger.info("termline starting up...")

    from termline.core.Readline import Readline

    try:
        rl = Readline(config=config)
    except (OSError, ValueError):
        logger.critical("stdin is not usable as a terminal.", exc_info=True)
        print("termline: stdin must be a terminal", file=sys.stderr)
        sys.exit(1)

    code = run_repl(rl)
    logger.info("termline shut down gracefully.")
    sys.exit(code)


if __name__ == "__main__":
    start()
