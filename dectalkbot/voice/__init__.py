"""Procedural DECtalk voice synthesis.

This package derives deterministic voice profiles from an identity and a roll,
and hosts the caching and allocation services built on top of them.
"""

from .allocator import DEFAULT_VOICE_PALETTE, GuildAllocators, VoiceAllocator
from .manager import VoiceManager
from .profile import VoiceProfile
from .ranges import RangeSpec, derive_ranges, range_table
from .schema import DEFAULT_SCHEMA_VERSION, ParameterSpec, VoiceSchema, get_schema
from .stream import KeccakStream
from .synthesizer import VoiceSynthesizer, preset_profile, synthesize_voice

__all__ = [
    "DEFAULT_SCHEMA_VERSION",
    "DEFAULT_VOICE_PALETTE",
    "GuildAllocators",
    "KeccakStream",
    "ParameterSpec",
    "RangeSpec",
    "VoiceAllocator",
    "VoiceManager",
    "VoiceProfile",
    "VoiceSchema",
    "VoiceSynthesizer",
    "derive_ranges",
    "get_schema",
    "preset_profile",
    "range_table",
    "synthesize_voice",
]
