"""Unit tests for the voice cache and persisted roll store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import io
import json
from pathlib import Path

import pytest

from dectalkbot.telemetry.logger import RunLogger
from dectalkbot.voice.manager import VoiceManager
from dectalkbot.voice.synthesizer import VoiceSynthesizer, synthesize_voice


class _CountingSynthesizer(VoiceSynthesizer):
    """Synthesizer that records how often each identity is derived."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[int, int]] = []

    def synthesize(self, identity: int, roll: int = 0):  # type: ignore[override]
        self.calls.append((identity, roll))
        return super().synthesize(identity, roll)


def test_get_voice_caches_profiles_per_identity(tmp_path: Path) -> None:
    """A second lookup returns the cached profile without resynthesizing."""

    synthesizer = _CountingSynthesizer()
    manager = VoiceManager(tmp_path / "rolls.json", synthesizer=synthesizer)

    first = manager.get_voice(42)
    second = manager.get_voice(42)

    assert first is second
    assert first == synthesize_voice(42, 0)
    assert synthesizer.calls == [(42, 0)]


def test_set_roll_invalidates_cache_and_persists(tmp_path: Path) -> None:
    """Changing a roll regenerates the voice and writes the roll file."""

    rolls_path = tmp_path / "state" / "rolls.json"
    manager = VoiceManager(rolls_path)
    before = manager.get_voice(42)

    manager.set_roll(42, 9)
    after = manager.get_voice(42)

    assert after != before
    assert after == synthesize_voice(42, 9)
    assert manager.get_roll(42) == 9
    assert json.loads(rolls_path.read_text(encoding="utf-8")) == {"42": 9}


def test_clear_voice_forces_regeneration(tmp_path: Path) -> None:
    """Clearing a cached voice makes the next lookup synthesize again."""

    synthesizer = _CountingSynthesizer()
    manager = VoiceManager(tmp_path / "rolls.json", synthesizer=synthesizer)
    manager.get_voice(7)

    manager.clear_voice(7)
    manager.get_voice(7)

    assert synthesizer.calls == [(7, 0), (7, 0)]


def test_rolls_round_trip_through_a_new_manager(tmp_path: Path) -> None:
    """A restarted manager reproduces the voice from the persisted roll."""

    rolls_path = tmp_path / "rolls.json"
    VoiceManager(rolls_path).set_roll(18446744073709551615, 3)

    restarted = VoiceManager(rolls_path)
    restarted.load_rolls()

    assert restarted.get_roll(18446744073709551615) == 3
    assert restarted.get_voice(18446744073709551615) == synthesize_voice(
        18446744073709551615, 3
    )


def test_missing_roll_file_loads_as_empty(tmp_path: Path) -> None:
    """A roll file that does not exist yet means every roll defaults to zero."""

    manager = VoiceManager(tmp_path / "missing.json")

    manager.load_rolls()

    assert manager.get_roll(1) == 0


def test_load_rolls_rejects_invalid_json(tmp_path: Path) -> None:
    """A corrupt roll file is reported instead of silently discarded."""

    rolls_path = tmp_path / "rolls.json"
    rolls_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="is not valid JSON"):
        VoiceManager(rolls_path).load_rolls()


def test_load_rolls_rejects_non_object_payload(tmp_path: Path) -> None:
    """The roll file root must be a JSON object."""

    rolls_path = tmp_path / "rolls.json"
    rolls_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a JSON object"):
        VoiceManager(rolls_path).load_rolls()


def test_load_rolls_rejects_out_of_range_values(tmp_path: Path) -> None:
    """Roll values outside the unsigned 64-bit domain are rejected."""

    rolls_path = tmp_path / "rolls.json"
    rolls_path.write_text('{"5": -1}', encoding="utf-8")

    with pytest.raises(ValueError, match="`roll` must be an unsigned 64-bit integer"):
        VoiceManager(rolls_path).load_rolls()


def test_load_rolls_drops_cached_voices(tmp_path: Path) -> None:
    """Reloading rolls invalidates voices cached under the previous roll map."""

    rolls_path = tmp_path / "rolls.json"
    manager = VoiceManager(rolls_path)
    manager.get_voice(5)
    rolls_path.write_text('{"5": 11}', encoding="utf-8")

    manager.load_rolls()

    assert manager.get_voice(5) == synthesize_voice(5, 11)


def test_set_roll_rejects_invalid_values(tmp_path: Path) -> None:
    """Rolls must be unsigned 64-bit integers."""

    manager = VoiceManager(tmp_path / "rolls.json")

    with pytest.raises(ValueError, match="unsigned 64-bit integer"):
        manager.set_roll(1, 1 << 64)
    assert not (tmp_path / "rolls.json").exists()


def test_concurrent_lookups_agree(tmp_path: Path) -> None:
    """Parallel lookups for one identity all observe the same cached profile."""

    manager = VoiceManager(tmp_path / "rolls.json")

    with ThreadPoolExecutor(max_workers=8) as executor:
        profiles = list(executor.map(manager.get_voice, [99] * 32))

    assert all(profile is profiles[0] for profile in profiles)


def test_manager_logs_generation_and_keeps_cache_hits_at_debug(tmp_path: Path) -> None:
    """Generation is logged at info level; cache hits only appear at debug level."""

    sink = io.StringIO()
    manager = VoiceManager(tmp_path / "rolls.json", run_logger=RunLogger(sink=sink))

    manager.get_voice(3)
    manager.get_voice(3)

    output = sink.getvalue()
    assert "[phase] level=INFO stage=voice event=generate identity=3 roll=0" in output
    assert "event=cache_hit" not in output
