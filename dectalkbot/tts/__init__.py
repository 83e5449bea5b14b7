"""Text-to-speech engine bridges.

This package formats voice profiles into DECtalk control sequences and runs the
external engine that renders them.
"""

from .say import SayEngine, SpeechEngine, format_selector_commands, format_voice_commands

__all__ = [
    "SayEngine",
    "SpeechEngine",
    "format_selector_commands",
    "format_voice_commands",
]
