"""Core datatypes shared across dectalkbot modules.

Responsibilities:
- Represent immutable records exchanged between the speech service and its callers.

Key types:
- `SpeechOutcome`: result of handling one chat message.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..voice.profile import VoiceProfile

STATUS_SPOKEN = "spoken"
STATUS_SKIPPED = "skipped"

SKIP_MESSAGE_TOO_LONG = "message_too_long"
SKIP_EMPTY_MESSAGE = "empty_message"
SKIP_AUDIO_TOO_LONG = "audio_too_long"


@dataclass(frozen=True, slots=True)
class SpeechOutcome:
    """Result of handling one chat message.

    Attributes:
        status: `spoken` when audio was produced, otherwise `skipped`.
        reason: Skip reason token, `None` for spoken outcomes.
        text: Cleaned text handed to the engine, when any.
        audio: Normalized WAV bytes ready for playback, when spoken.
        duration_seconds: Measured duration of the engine output, when measured.
        roll: Roll applied from an inline `[:roll N]` command, when present.
        voice: Voice profile used for synthesis, when spoken.
        volume: Playback volume for the track.
    """

    status: str
    reason: str | None = None
    text: str | None = None
    audio: bytes | None = None
    duration_seconds: float | None = None
    roll: int | None = None
    voice: VoiceProfile | None = None
    volume: float = 1.0

    @property
    def spoken(self) -> bool:
        return self.status == STATUS_SPOKEN
