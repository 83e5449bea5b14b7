"""Chat message text processing.

This package cleans chat messages and parses inline voice commands.
"""

from .sanitize import (
    CleanerRule,
    MessageSanitizer,
    RemoveLinks,
    ReplaceCustomEmojis,
    StripWhitespace,
    extract_roll,
    remove_roll_commands,
)

__all__ = [
    "CleanerRule",
    "MessageSanitizer",
    "RemoveLinks",
    "ReplaceCustomEmojis",
    "StripWhitespace",
    "extract_roll",
    "remove_roll_commands",
]
