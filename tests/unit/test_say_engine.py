"""Unit tests for the DECtalk `say` subprocess engine."""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Callable

import pytest
from pytest import MonkeyPatch

from dectalkbot.errors import SpeechStageError
from dectalkbot.tts import say
from dectalkbot.tts.say import SayEngine, format_selector_commands, format_voice_commands
from dectalkbot.voice.synthesizer import preset_profile


def _fake_run(
    *,
    returncode: int = 0,
    stderr: str = "",
    payload: bytes | None = b"RIFFfake",
    calls: list[list[str]] | None = None,
) -> Callable[..., subprocess.CompletedProcess[str]]:
    """Build a `subprocess.run` replacement that writes the `-fo` target."""

    def _run(command: list[str], **_: object) -> subprocess.CompletedProcess[str]:
        if calls is not None:
            calls.append(command)
        if payload is not None:
            output_path = Path(command[command.index("-fo") + 1])
            output_path.write_bytes(payload)
        return subprocess.CompletedProcess(command, returncode, stdout="", stderr=stderr)

    return _run


def test_format_voice_commands_emits_design_voice_sequence() -> None:
    """Profiles render as `[:nv]` followed by one `[:dv]` per parameter."""

    prefix = format_voice_commands(preset_profile("a"))

    assert prefix.startswith("[:phoneme on][:nv][:dv ap 112][:dv as 100][:dv b4 280]")
    assert prefix.endswith("[:dv sx 1]")
    assert prefix.count("[:dv ") == 19


def test_format_selector_commands_switches_builtin_voice() -> None:
    """Palette selectors render as a lower-case `[:n<letter>]` command."""

    assert format_selector_commands("W") == "[:phoneme on][:nw]"


@pytest.mark.parametrize("selector", ["", "PB", "1"])
def test_format_selector_commands_rejects_non_letters(selector: str) -> None:
    """Selectors must be exactly one letter."""

    with pytest.raises(ValueError, match="single letter"):
        format_selector_commands(selector)


def test_build_command_passes_text_output_and_prefix(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """The engine argv carries text, output file, and control prefix flags."""

    monkeypatch.setattr(say, "resolve_executable", lambda name: f"/opt/{name}")
    engine = SayEngine(executable="say")

    command = engine.build_command("hello", "P", tmp_path / "out.wav")

    assert command == [
        "/opt/say",
        "-a",
        "hello",
        "-fo",
        str(tmp_path / "out.wav"),
        "-pre",
        "[:phoneme on][:np]",
    ]


def test_synthesize_returns_engine_output_and_removes_scratch_file(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """The written WAV is returned and the scratch file does not survive the call."""

    calls: list[list[str]] = []
    monkeypatch.setattr(say, "resolve_executable", lambda name: name)
    monkeypatch.setattr(say.subprocess, "run", _fake_run(calls=calls))
    scratch_dir = tmp_path / "scratch"
    engine = SayEngine(scratch_dir=scratch_dir)

    audio = engine.synthesize("hello", preset_profile("b"))

    assert audio == b"RIFFfake"
    assert len(calls) == 1
    assert calls[0][2] == "hello"
    assert "[:dv ap 195]" in calls[0][-1]
    assert list(scratch_dir.iterdir()) == []


def test_synthesize_maps_non_zero_exit_to_tts_stage_error(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """Engine failures surface stderr details and still clean up the scratch file."""

    monkeypatch.setattr(say, "resolve_executable", lambda name: name)
    monkeypatch.setattr(say.subprocess, "run", _fake_run(returncode=2, stderr=" bad voice "))
    engine = SayEngine(scratch_dir=tmp_path)

    with pytest.raises(SpeechStageError) as exc_info:
        engine.synthesize("hello", "P")

    assert exc_info.value.stage == "tts"
    assert "failed: bad voice" in exc_info.value.detail
    assert list(tmp_path.iterdir()) == []


def test_synthesize_requires_output_file(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """A zero exit without the WAV file is still a failed synthesis."""

    monkeypatch.setattr(say, "resolve_executable", lambda name: name)
    monkeypatch.setattr(say.subprocess, "run", _fake_run(payload=None))
    engine = SayEngine(scratch_dir=tmp_path)

    with pytest.raises(SpeechStageError, match="did not write"):
        engine.synthesize("hello", "P")


def test_synthesize_maps_missing_executable(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """A missing engine binary becomes a `tts` stage error with an install hint."""

    def _missing(*_: object, **__: object) -> subprocess.CompletedProcess[str]:
        raise FileNotFoundError("say")

    monkeypatch.setattr(say, "resolve_executable", lambda name: name)
    monkeypatch.setattr(say.subprocess, "run", _missing)
    engine = SayEngine(scratch_dir=tmp_path)

    with pytest.raises(SpeechStageError) as exc_info:
        engine.synthesize("hello", "P")

    assert "is not available" in exc_info.value.detail
    assert exc_info.value.hint is not None
    assert "say_executable" in exc_info.value.hint


def test_synthesize_maps_timeout(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    """A hung engine becomes a `tts` stage error."""

    def _timeout(command: list[str], **_: object) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(command, 5.0)

    monkeypatch.setattr(say, "resolve_executable", lambda name: name)
    monkeypatch.setattr(say.subprocess, "run", _timeout)
    engine = SayEngine(scratch_dir=tmp_path, timeout_seconds=5.0)

    with pytest.raises(SpeechStageError, match="timed out after 5.0s"):
        engine.synthesize("hello", "P")
