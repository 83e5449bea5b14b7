"""Bridge to the external DECtalk `say` executable.

Responsibilities:
- Format voice profiles and palette selectors into DECtalk control sequences.
- Run the engine as a subprocess that writes a WAV file into a scratch directory,
  then return the WAV bytes and remove the scratch file.
"""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Protocol
import uuid

from ..errors import SpeechStageError
from ..parsing import normalize_optional_string
from ..runtime_tools import resolve_executable
from ..voice.profile import VoiceProfile

_PREAMBLE = "[:phoneme on]"


def format_voice_commands(profile: VoiceProfile) -> str:
    """Return the `[:nv]` + `[:dv ...]` control prefix for a synthesized profile."""

    commands = "".join(f"[:dv {code} {value}]" for code, value in profile.control_pairs())
    return f"{_PREAMBLE}[:nv]{commands}"


def format_selector_commands(selector: str) -> str:
    """Return the control prefix that switches to a built-in palette voice."""

    if len(selector) != 1 or not selector.isalpha():
        raise ValueError(f"Voice selector must be a single letter, got `{selector}`.")
    return f"{_PREAMBLE}[:n{selector.lower()}]"


class SpeechEngine(Protocol):
    """Protocol for engines that render text to WAV bytes."""

    def synthesize(self, text: str, voice: VoiceProfile | str) -> bytes:
        """Render text with a profile or palette selector and return WAV bytes."""


class SayEngine:
    """DECtalk `say` subprocess engine writing through a scratch directory."""

    def __init__(
        self,
        executable: str = "say",
        scratch_dir: Path = Path("dectalk"),
        timeout_seconds: float | None = 60.0,
    ) -> None:
        """Initialize engine executable and scratch settings."""

        self.executable = executable
        self.scratch_dir = scratch_dir
        self.timeout_seconds = timeout_seconds

    def build_command(self, text: str, voice: VoiceProfile | str, output_path: Path) -> list[str]:
        """Return the engine argv for one utterance."""

        prefix = (
            format_selector_commands(voice)
            if isinstance(voice, str)
            else format_voice_commands(voice)
        )
        return [
            resolve_executable(self.executable),
            "-a",
            text,
            "-fo",
            str(output_path),
            "-pre",
            prefix,
        ]

    def synthesize(self, text: str, voice: VoiceProfile | str) -> bytes:
        """Render one utterance and return the engine's WAV bytes."""

        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.scratch_dir / f"{uuid.uuid4()}.wav"
        command = self.build_command(text, voice, output_path)

        try:
            result = subprocess.run(
                command,
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
            )
            if result.returncode != 0:
                details = normalize_optional_string(result.stderr) or "no stderr output"
                raise SpeechStageError(
                    stage="tts",
                    detail=f"Speech engine `{self.executable}` failed: {details}",
                    hint="Run the engine manually with the same text to inspect its output.",
                )
            if not output_path.is_file():
                raise SpeechStageError(
                    stage="tts",
                    detail=f"Speech engine `{self.executable}` did not write `{output_path}`.",
                    hint="Verify the engine supports `-fo <file.wav>` output.",
                )
            return output_path.read_bytes()
        except FileNotFoundError as exc:
            raise SpeechStageError(
                stage="tts",
                detail=f"Speech engine `{self.executable}` is not available.",
                hint="Install DECtalk and point `say_executable` at its `say` binary.",
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise SpeechStageError(
                stage="tts",
                detail=f"Speech engine `{self.executable}` timed out after {exc.timeout}s.",
            ) from exc
        finally:
            if output_path.exists():
                output_path.unlink()
