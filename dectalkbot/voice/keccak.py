"""Keccak-f[1600] permutation over 25 unsigned 64-bit lanes.

The state layout is the standard one: lane `(x, y)` lives at index `x + 5 * y`.
This is the permutation underlying SHA-3; it is applied here without any sponge
padding or absorption.
"""

from __future__ import annotations

from typing import MutableSequence

LANE_COUNT = 25
_MASK = (1 << 64) - 1

_ROUND_CONSTANTS = (
    0x0000000000000001,
    0x0000000000008082,
    0x800000000000808A,
    0x8000000080008000,
    0x000000000000808B,
    0x0000000080000001,
    0x8000000080008081,
    0x8000000000008009,
    0x000000000000008A,
    0x0000000000000088,
    0x0000000080008009,
    0x000000008000000A,
    0x000000008000808B,
    0x800000000000008B,
    0x8000000000008089,
    0x8000000000008003,
    0x8000000000008002,
    0x8000000000000080,
    0x000000000000800A,
    0x800000008000000A,
    0x8000000080008081,
    0x8000000000008080,
    0x0000000080000001,
    0x8000000080008008,
)

# rho offsets and pi destinations, walked along the pi cycle starting at lane 1
_RHO = (1, 3, 6, 10, 15, 21, 28, 36, 45, 55, 2, 14, 27, 41, 56, 8, 25, 43, 62, 18, 39, 61, 20, 44)
_PI = (10, 7, 11, 17, 18, 3, 5, 16, 8, 21, 24, 4, 15, 23, 19, 13, 12, 2, 20, 14, 22, 9, 6, 1)


def _rotl(value: int, shift: int) -> int:
    """Rotate a 64-bit lane left."""

    return ((value << shift) | (value >> (64 - shift))) & _MASK


def keccak_f1600(lanes: MutableSequence[int]) -> None:
    """Apply all 24 Keccak-f[1600] rounds to `lanes` in place."""

    if len(lanes) != LANE_COUNT:
        raise ValueError(f"Keccak-f[1600] state must have {LANE_COUNT} lanes.")

    for round_constant in _ROUND_CONSTANTS:
        # theta
        columns = [
            lanes[x] ^ lanes[x + 5] ^ lanes[x + 10] ^ lanes[x + 15] ^ lanes[x + 20]
            for x in range(5)
        ]
        for x in range(5):
            mix = columns[(x + 4) % 5] ^ _rotl(columns[(x + 1) % 5], 1)
            for y in range(0, LANE_COUNT, 5):
                lanes[x + y] ^= mix

        # rho and pi
        carried = lanes[1]
        for offset, destination in zip(_RHO, _PI):
            carried, lanes[destination] = lanes[destination], _rotl(carried, offset)

        # chi
        for y in range(0, LANE_COUNT, 5):
            row = lanes[y : y + 5]
            for x in range(5):
                lanes[y + x] = row[x] ^ (~row[(x + 1) % 5] & _MASK & row[(x + 2) % 5])

        # iota
        lanes[0] ^= round_constant
