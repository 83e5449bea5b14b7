"""Shared pytest fixtures for the full dectalkbot test suite."""

from __future__ import annotations

from array import array
import sys
from typing import Callable, Sequence

import pytest


def build_wav(
    samples: Sequence[int] = (),
    *,
    sample_rate: int = 44100,
    channels: int = 1,
    bits_per_sample: int = 16,
    audio_format: int = 1,
    frames: bytes | None = None,
    extra_chunks: Sequence[tuple[bytes, bytes]] = (),
    include_data: bool = True,
) -> bytes:
    """Build a RIFF/WAVE buffer byte by byte from samples or raw frame bytes."""

    if frames is None:
        pcm = array("h", samples)
        if sys.byteorder == "big":
            pcm.byteswap()
        frames = pcm.tobytes()

    block_align = channels * bits_per_sample // 8
    fmt_payload = (
        audio_format.to_bytes(2, "little")
        + channels.to_bytes(2, "little")
        + sample_rate.to_bytes(4, "little")
        + (sample_rate * block_align).to_bytes(4, "little")
        + block_align.to_bytes(2, "little")
        + bits_per_sample.to_bytes(2, "little")
    )
    chunks = b"fmt " + len(fmt_payload).to_bytes(4, "little") + fmt_payload
    for tag, payload in extra_chunks:
        chunks += tag + len(payload).to_bytes(4, "little") + payload
    if include_data:
        chunks += b"data" + len(frames).to_bytes(4, "little") + frames
    return b"RIFF" + (4 + len(chunks)).to_bytes(4, "little") + b"WAVE" + chunks


@pytest.fixture
def wav_builder() -> Callable[..., bytes]:
    """Provide the raw RIFF/WAVE buffer builder used by audio tests."""

    return build_wav
