# termline/core/Prompt.py
"""Prompt Module
================
The strings drawn in front of the edited line: the primary prompt, the
alternate prompt used for multi-line input and while a paste is in
progress, and the dimmed placeholder shown on an empty line. `use_alt` is
flipped by the host application between `readline()` calls.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class Prompt:
    """Prompt and placeholder strings for the primary and the multi-line ("alt") mode."""

    prompt: str = ">>> "
    alt_prompt: str = "... "
    placeholder: str = ""
    alt_placeholder: str = ""
    use_alt: bool = False

    def current_prompt(self) -> str:
        return self.alt_prompt if self.use_alt else self.prompt

    def current_placeholder(self) -> str:
        return self.alt_placeholder if self.use_alt else self.placeholder

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "Prompt":
        section = config.get("prompt", {})
        return cls(
            prompt=section.get("prompt", cls.prompt),
            alt_prompt=section.get("alt_prompt", cls.alt_prompt),
            placeholder=section.get("placeholder", cls.placeholder),
            alt_placeholder=section.get("alt_placeholder", cls.alt_placeholder),
        )
