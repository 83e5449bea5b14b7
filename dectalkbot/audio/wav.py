"""Byte-exact RIFF/WAVE parsing for in-memory PCM buffers.

Responsibilities:
- Walk the RIFF header, the leading `fmt ` chunk, and any unknown chunks up to
  the `data` chunk, failing with typed errors on every structural violation.
- Report playback duration from the declared data size.
- Decode signed 16-bit PCM samples for downstream transforms.

Key functions:
- `read_wav_layout`: locate format metadata and the data payload.
- `wav_duration`: duration in seconds.
- `decode_pcm16`: decoded `PcmWaveform`.
"""

from __future__ import annotations

from array import array
from dataclasses import dataclass
import io
import sys
import wave

from ..errors import MalformedContainerError, UnsupportedCodecError

WAVE_FORMAT_PCM = 1
_RIFF_HEADER_SIZE = 12
_CHUNK_HEADER_SIZE = 8
_MIN_FMT_SIZE = 16


@dataclass(frozen=True, slots=True)
class WavFormat:
    """Format metadata read from the `fmt ` chunk.

    Attributes:
        audio_format: Format code (`1` for linear PCM).
        channels: Interleaved channel count.
        sample_rate: Frames per second.
        byte_rate: Declared bytes per second.
        block_align: Bytes per frame across all channels.
        bits_per_sample: Bits per single-channel sample.
    """

    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int


@dataclass(frozen=True, slots=True)
class WavLayout:
    """Parsed format metadata and the location of the `data` payload."""

    format: WavFormat
    data_offset: int
    data_size: int


@dataclass(frozen=True, slots=True)
class PcmWaveform:
    """Decoded signed 16-bit samples plus the format they were read with."""

    format: WavFormat
    samples: tuple[int, ...]

    @property
    def frame_count(self) -> int:
        if self.format.channels <= 0:
            return 0
        return len(self.samples) // self.format.channels


def _read_exact(data: bytes, offset: int, size: int, what: str) -> bytes:
    """Return `size` bytes at `offset` or fail on a truncated buffer."""

    end = offset + size
    if offset < 0 or end > len(data):
        raise MalformedContainerError(
            f"WAV buffer truncated while reading {what} "
            f"({size} bytes at offset {offset}, buffer is {len(data)} bytes)."
        )
    return data[offset:end]


def _chunk_header(data: bytes, offset: int, what: str) -> tuple[bytes, int]:
    """Read one `(tag, declared size)` chunk header."""

    header = _read_exact(data, offset, _CHUNK_HEADER_SIZE, what)
    return header[0:4], int.from_bytes(header[4:8], "little")


def read_wav_layout(data: bytes) -> WavLayout:
    """Parse RIFF/WAVE structure up to the `data` chunk header.

    Raises:
        MalformedContainerError: On bad tags, truncation, or a missing `data` chunk.
        UnsupportedCodecError: When the format code is not linear PCM.
    """

    riff_header = _read_exact(data, 0, _RIFF_HEADER_SIZE, "RIFF header")
    if riff_header[0:4] != b"RIFF" or riff_header[8:12] != b"WAVE":
        raise MalformedContainerError("Buffer is not a RIFF/WAVE container.")

    offset = _RIFF_HEADER_SIZE
    tag, fmt_size = _chunk_header(data, offset, "fmt chunk header")
    if tag != b"fmt ":
        raise MalformedContainerError(
            f"Expected `fmt ` chunk after RIFF header, found {tag!r}."
        )
    offset += _CHUNK_HEADER_SIZE

    fmt_payload = _read_exact(data, offset, fmt_size, "fmt chunk payload")
    if fmt_size < _MIN_FMT_SIZE:
        raise MalformedContainerError(
            f"`fmt ` chunk is {fmt_size} bytes; at least {_MIN_FMT_SIZE} are required."
        )
    offset += fmt_size

    wav_format = WavFormat(
        audio_format=int.from_bytes(fmt_payload[0:2], "little"),
        channels=int.from_bytes(fmt_payload[2:4], "little"),
        sample_rate=int.from_bytes(fmt_payload[4:8], "little"),
        byte_rate=int.from_bytes(fmt_payload[8:12], "little"),
        block_align=int.from_bytes(fmt_payload[12:14], "little"),
        bits_per_sample=int.from_bytes(fmt_payload[14:16], "little"),
    )
    if wav_format.audio_format != WAVE_FORMAT_PCM:
        raise UnsupportedCodecError(
            f"Unsupported WAV format code {wav_format.audio_format}; "
            f"only linear PCM ({WAVE_FORMAT_PCM}) is supported."
        )

    tag, chunk_size = _chunk_header(data, offset, "chunk header before `data`")
    while tag != b"data":
        offset += _CHUNK_HEADER_SIZE + chunk_size
        tag, chunk_size = _chunk_header(data, offset, "chunk header before `data`")

    return WavLayout(
        format=wav_format,
        data_offset=offset + _CHUNK_HEADER_SIZE,
        data_size=chunk_size,
    )


def wav_duration(data: bytes) -> float:
    """Return playback duration in seconds from the declared `data` chunk size."""

    layout = read_wav_layout(data)
    block_align = layout.format.block_align
    sample_rate = layout.format.sample_rate
    if block_align == 0 or sample_rate == 0:
        raise MalformedContainerError(
            "WAV `fmt ` chunk declares zero block alignment or sample rate."
        )
    return layout.data_size / block_align / sample_rate


def decode_pcm16(data: bytes) -> PcmWaveform:
    """Decode every 16-bit PCM sample of a WAV buffer.

    Raises:
        MalformedContainerError: When the `data` payload extends past the buffer, or
            the format declares zero channels or a zero sample rate.
        UnsupportedCodecError: When samples are not 16-bit linear PCM.
    """

    layout = read_wav_layout(data)
    if layout.format.bits_per_sample != 16:
        raise UnsupportedCodecError(
            f"Unsupported PCM sample width {layout.format.bits_per_sample} bits; "
            "only 16-bit samples are supported."
        )
    if layout.format.channels == 0:
        raise MalformedContainerError("WAV `fmt ` chunk declares zero channels.")
    if layout.format.sample_rate == 0:
        raise MalformedContainerError("WAV `fmt ` chunk declares zero sample rate.")

    payload = _read_exact(data, layout.data_offset, layout.data_size, "data chunk payload")
    samples = array("h")
    samples.frombytes(payload[: len(payload) - len(payload) % 2])
    if sys.byteorder == "big":
        samples.byteswap()
    return PcmWaveform(format=layout.format, samples=tuple(samples))


def encode_pcm16(wav_format: WavFormat, samples: tuple[int, ...] | list[int]) -> bytes:
    """Write samples into a fresh WAV container using the given format."""

    frames = array("h", samples)
    if sys.byteorder == "big":
        frames.byteswap()

    with io.BytesIO() as buffer:
        with wave.open(buffer, "wb") as wav_file:
            wav_file.setnchannels(wav_format.channels)
            wav_file.setsampwidth(wav_format.bits_per_sample // 8)
            wav_file.setframerate(wav_format.sample_rate)
            wav_file.writeframes(frames.tobytes())
        return buffer.getvalue()
