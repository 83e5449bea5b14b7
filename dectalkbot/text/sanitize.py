"""Chat message cleanup before speech synthesis.

Responsibilities:
- Extract and strip inline `[:roll N]` commands.
- Provide composable cleanup rules for links and custom chat emojis.
"""

from __future__ import annotations

import re
from typing import Protocol

from ..parsing import U64_MAX

_ROLL_COMMAND_RE = re.compile(r"\[:roll\s*(\d+)\s*\]", re.ASCII)
_LINK_RE = re.compile(r"https?://[^\s/$.?#].[^\s]*")
_CUSTOM_EMOJI_RE = re.compile(r"<a?:(\w+):\d+>")


class CleanerRule(Protocol):
    """Protocol for message cleaning rules."""

    def apply(self, text: str) -> str:
        """Apply a single cleaning transformation."""


class RemoveLinks:
    """Remove `http` and `https` links."""

    def apply(self, text: str) -> str:
        return _LINK_RE.sub("", text)


class ReplaceCustomEmojis:
    """Replace `<:name:id>` and `<a:name:id>` emoji markup with the emoji name."""

    def apply(self, text: str) -> str:
        return _CUSTOM_EMOJI_RE.sub(lambda match: match.group(1), text)


class StripWhitespace:
    """Trim leading and trailing whitespace."""

    def apply(self, text: str) -> str:
        return text.strip()


def extract_roll(content: str) -> int | None:
    """Return the first `[:roll N]` value, or `None` when absent or out of range."""

    match = _ROLL_COMMAND_RE.search(content)
    if match is None:
        return None
    value = int(match.group(1))
    if value > U64_MAX:
        return None
    return value


def remove_roll_commands(content: str) -> str:
    """Remove every `[:roll N]` command from the message."""

    return _ROLL_COMMAND_RE.sub("", content)


class MessageSanitizer:
    """Apply a sequence of message cleaning rules."""

    def __init__(self, rules: list[CleanerRule] | None = None) -> None:
        """Initialize with custom rules or the default rule sequence."""

        self.rules = rules or [
            RemoveLinks(),
            ReplaceCustomEmojis(),
            StripWhitespace(),
        ]

    def sanitize(self, text: str) -> str:
        """Apply all configured rules in order."""

        current = text
        for rule in self.rules:
            current = rule.apply(current)
        return current

    def clean_message(self, content: str) -> str:
        """Sanitize a chat message and drop inline roll commands."""

        return remove_roll_commands(self.sanitize(content)).strip()
