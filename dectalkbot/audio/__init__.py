"""WAV analysis and normalization for synthesized speech.

This package parses in-memory RIFF/WAVE buffers, reports their duration, and
applies two-sided peak normalization before playback.
"""

from .normalize import WavNormalizer, normalize_wav
from .wav import (
    PcmWaveform,
    WavFormat,
    WavLayout,
    decode_pcm16,
    encode_pcm16,
    read_wav_layout,
    wav_duration,
)

__all__ = [
    "PcmWaveform",
    "WavFormat",
    "WavLayout",
    "WavNormalizer",
    "decode_pcm16",
    "encode_pcm16",
    "normalize_wav",
    "read_wav_layout",
    "wav_duration",
]
