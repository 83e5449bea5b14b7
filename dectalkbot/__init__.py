"""Top-level package for dectalkbot.

This package derives deterministic DECtalk voices for chat users and prepares
engine WAV output for playback. The main entry points are `VoiceSynthesizer`,
`wav_duration`, `normalize_wav`, and the `SpeechService` orchestrator.
"""

from .audio import normalize_wav, wav_duration
from .speech import SpeechService
from .voice import VoiceSynthesizer, synthesize_voice

__all__ = [
    "SpeechService",
    "VoiceSynthesizer",
    "__version__",
    "normalize_wav",
    "synthesize_voice",
    "wav_duration",
]

__version__ = "0.3.0"
