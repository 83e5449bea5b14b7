"""Round-robin assignment of built-in DECtalk voices to users.

Responsibilities:
- Hand out voices from a fixed palette in rotating order, one per user.
- Keep the rotation cursor monotonic: removing a user frees the mapping only and
  never rewinds the cursor, so the next new user still gets the next palette slot.
"""

from __future__ import annotations

import threading
from typing import Hashable, Sequence

# Paul, Betty, Harry, Frank, Dennis, Kit, Ursula, Rita, Wendy
DEFAULT_VOICE_PALETTE: tuple[str, ...] = ("P", "B", "H", "F", "D", "K", "U", "R", "W")


class VoiceAllocator:
    """Rotating cursor over a fixed voice palette plus a user-to-voice mapping."""

    def __init__(self, palette: Sequence[str] = DEFAULT_VOICE_PALETTE) -> None:
        """Initialize the allocator with a non-empty ordered palette."""

        if not palette:
            raise ValueError("Voice palette must contain at least one voice.")
        self._palette = tuple(palette)
        self._user_voices: dict[Hashable, str] = {}
        self._next_index = 0

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    def get_or_insert(self, user: Hashable) -> str:
        """Return the user's voice, assigning the next palette slot on first use."""

        existing = self._user_voices.get(user)
        if existing is not None:
            return existing

        voice = self._palette[self._next_index]
        self._user_voices[user] = voice
        self._next_index = (self._next_index + 1) % len(self._palette)
        return voice

    def remove(self, user: Hashable) -> None:
        """Forget the user's assignment without moving the cursor."""

        self._user_voices.pop(user, None)

    def users(self) -> list[Hashable]:
        """Return users with an active assignment in assignment order."""

        return list(self._user_voices)


class GuildAllocators:
    """Per-guild `VoiceAllocator` registry with serialized access."""

    def __init__(self, palette: Sequence[str] = DEFAULT_VOICE_PALETTE) -> None:
        """Initialize an empty registry sharing one palette across guilds."""

        self._palette = tuple(palette)
        if not self._palette:
            raise ValueError("Voice palette must contain at least one voice.")
        self._allocators: dict[Hashable, VoiceAllocator] = {}
        self._lock = threading.Lock()

    def get_or_insert(self, guild: Hashable, user: Hashable) -> str:
        """Return the user's voice within one guild."""

        with self._lock:
            allocator = self._allocators.get(guild)
            if allocator is None:
                allocator = VoiceAllocator(self._palette)
                self._allocators[guild] = allocator
            return allocator.get_or_insert(user)

    def remove(self, guild: Hashable, user: Hashable) -> None:
        """Forget one user's assignment within one guild."""

        with self._lock:
            allocator = self._allocators.get(guild)
            if allocator is not None:
                allocator.remove(user)

    def users(self, guild: Hashable) -> list[Hashable]:
        """Return users with an active assignment in one guild."""

        with self._lock:
            allocator = self._allocators.get(guild)
            return allocator.users() if allocator is not None else []
