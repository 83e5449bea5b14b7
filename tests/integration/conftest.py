"""Integration-test fixtures for deterministic speech engine behavior."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from dectalkbot.tts.say import SayEngine
from dectalkbot.voice.profile import VoiceProfile


@pytest.fixture
def stub_say_engine(
    monkeypatch: pytest.MonkeyPatch, wav_builder: Callable[..., bytes]
) -> list[tuple[str, VoiceProfile | str]]:
    """Replace `say` synthesis with an exact half-second clip and record each call."""

    calls: list[tuple[str, VoiceProfile | str]] = []

    def _mock_synthesize(self: SayEngine, text: str, voice: VoiceProfile | str) -> bytes:
        """Return a deterministic two-sided PCM16 clip instead of running DECtalk."""

        _ = self
        calls.append((text, voice))
        return wav_builder([1200, -600, 300] * 3675, sample_rate=22050)

    monkeypatch.setattr(SayEngine, "synthesize", _mock_synthesize)
    return calls


@pytest.fixture
def config_file(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing a YAML config rooted in the test temp directory."""

    def _write(**overrides: object) -> Path:
        values: dict[str, object] = {
            "rolls_path": str(tmp_path / "state" / "rolls.json"),
            "scratch_dir": str(tmp_path / "scratch"),
        }
        values.update(overrides)
        lines = [f"{key}: {value}" for key, value in values.items()]
        path = tmp_path / "dectalkbot.yml"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
