"""Keyed deterministic pseudo-random stream for voice synthesis."""

from __future__ import annotations

from .keccak import LANE_COUNT, keccak_f1600


class KeccakStream:
    """Deterministic `u64` stream keyed by `(identity, roll)`.

    The state is every lane set to `identity ^ roll`. Each draw permutes the state
    once and yields lane 0, so consecutive draws advance the stream. One stream is
    meant to produce one voice profile and then be discarded.
    """

    __slots__ = ("_lanes",)

    def __init__(self, identity: int, roll: int) -> None:
        self._lanes = [identity ^ roll] * LANE_COUNT

    def next_u64(self) -> int:
        """Permute the state and return its first lane."""

        keccak_f1600(self._lanes)
        return self._lanes[0]

    def draw(self, minimum: int, maximum: int) -> int:
        """Draw one value in `[minimum, maximum]` by modulo reduction of the next word."""

        return minimum + self.next_u64() % (maximum - minimum + 1)
