"""Two-sided peak normalization for PCM16 WAV buffers.

Responsibilities:
- Stretch positive and negative excursions independently so the largest positive
  sample reaches `32767` and the most negative sample reaches `-32768`.
- Guard silent or one-sided signals against zero-peak division.
- Re-encode into a fresh WAV container with the source channel layout and rate.

The two sides use separate gains on purpose; DC offset or asymmetric waveforms are
amplified unevenly rather than scaled by one symmetric factor.
"""

from __future__ import annotations

from ..errors import DegenerateSignalError
from .wav import PcmWaveform, decode_pcm16, encode_pcm16

INT16_MAX = 32767
INT16_MIN = -32768


def _scale_sample(sample: int, peak_positive: int, peak_negative: int) -> int:
    """Rescale one sample against its side's peak, truncating toward zero."""

    if sample > 0:
        if peak_positive == 0:
            return sample
        return int(sample / peak_positive * INT16_MAX)
    if peak_negative == 0:
        return sample
    return int(sample / peak_negative * INT16_MIN)


class WavNormalizer:
    """Asymmetric peak normalizer for in-memory PCM16 WAV buffers."""

    def __init__(self, strict: bool = False) -> None:
        """Initialize the normalizer.

        Args:
            strict: Raise `DegenerateSignalError` for silent input instead of
                returning it unchanged.
        """

        self.strict = strict

    def normalize(self, data: bytes) -> bytes:
        """Return a normalized copy of a PCM16 WAV buffer.

        Input that is already at both integer bounds, or that is entirely silent,
        is returned unchanged.
        """

        waveform = decode_pcm16(data)
        peak_positive, peak_negative = self.peaks(waveform)

        if peak_positive == 0 and peak_negative == 0:
            if self.strict:
                raise DegenerateSignalError(
                    "WAV buffer is silent; there is no peak to normalize against."
                )
            return data
        if peak_positive == INT16_MAX and peak_negative == INT16_MIN:
            return data

        normalized = [
            _scale_sample(sample, peak_positive, peak_negative)
            for sample in waveform.samples
        ]
        return encode_pcm16(waveform.format, normalized)

    @staticmethod
    def peaks(waveform: PcmWaveform) -> tuple[int, int]:
        """Return `(max(0, max sample), min(0, min sample))` for a waveform."""

        if not waveform.samples:
            return 0, 0
        return max(0, max(waveform.samples)), min(0, min(waveform.samples))


def normalize_wav(data: bytes) -> bytes:
    """Normalize a PCM16 WAV buffer with the default non-strict policy."""

    return WavNormalizer().normalize(data)
