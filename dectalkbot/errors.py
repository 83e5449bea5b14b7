"""Domain exceptions for speech-stage and WAV diagnostics."""

from __future__ import annotations


class SpeechStageError(RuntimeError):
    """Raised when a specific speech stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped speech error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class WavError(ValueError):
    """Base class for WAV container parse and transform failures."""


class MalformedContainerError(WavError):
    """Raised for missing tags, truncated buffers, or an unterminated chunk scan."""


class UnsupportedCodecError(WavError):
    """Raised when the `fmt ` chunk does not describe supported linear PCM."""


class DegenerateSignalError(WavError):
    """Raised when a silent signal leaves no peak to normalize against."""
