"""Per-identity voice cache and persisted roll store.

Responsibilities:
- Cache synthesized profiles by identity and regenerate them on demand.
- Persist the `identity -> roll` mapping as JSON and invalidate cached profiles
  whenever an identity's roll changes.
- Serialize every cache and roll mutation behind one lock per manager.
"""

from __future__ import annotations

import json
from pathlib import Path
import threading

from ..parsing import parse_u64
from ..telemetry.logger import RunLogger
from .profile import VoiceProfile
from .synthesizer import VoiceSynthesizer


class VoiceManager:
    """Thread-safe voice profile cache backed by a JSON roll file."""

    def __init__(
        self,
        rolls_path: Path,
        synthesizer: VoiceSynthesizer | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize an empty cache and roll map for the given roll file."""

        self.rolls_path = rolls_path
        self._synthesizer = synthesizer if synthesizer is not None else VoiceSynthesizer()
        self._run_logger = run_logger
        self._voices: dict[int, VoiceProfile] = {}
        self._rolls: dict[int, int] = {}
        self._lock = threading.RLock()

    def get_voice(self, identity: int) -> VoiceProfile:
        """Return the cached profile for `identity`, synthesizing it on a miss."""

        with self._lock:
            cached = self._voices.get(identity)
            if cached is not None:
                if self._run_logger is not None:
                    self._run_logger.log_debug("voice", "cache_hit", identity=identity)
                return cached

            roll = self._rolls.get(identity, 0)
            self._log("generate", identity=identity, roll=roll)
            voice = self._synthesizer.synthesize(identity, roll)
            self._voices[identity] = voice
            return voice

    def clear_voice(self, identity: int) -> None:
        """Drop the cached profile for `identity` if present."""

        with self._lock:
            self._voices.pop(identity, None)
            self._log("clear", identity=identity)

    def get_roll(self, identity: int) -> int:
        """Return the stored roll for `identity`, defaulting to `0`."""

        with self._lock:
            return self._rolls.get(identity, 0)

    def set_roll(self, identity: int, roll: int) -> None:
        """Store a new roll, invalidate the cached profile, and persist the roll file."""

        identity = parse_u64(identity, "identity")
        roll = parse_u64(roll, "roll")
        with self._lock:
            self._rolls[identity] = roll
            self._voices.pop(identity, None)
            self._log("set_roll", identity=identity, roll=roll)
            self.save_rolls()

    def load_rolls(self) -> None:
        """Replace the in-memory roll map with the contents of the roll file.

        A missing file leaves an empty roll map.

        Raises:
            ValueError: If the file is not a JSON object of identity/roll integers.
        """

        with self._lock:
            if not self.rolls_path.exists():
                self._log("rolls_missing", path=self.rolls_path)
                self._rolls = {}
                self._voices.clear()
                return

            raw_text = self.rolls_path.read_text(encoding="utf-8")
            try:
                payload = json.loads(raw_text)
            except json.JSONDecodeError as exc:
                raise ValueError(
                    f"Roll file `{self.rolls_path}` is not valid JSON: {exc.msg}."
                ) from exc
            if not isinstance(payload, dict):
                raise ValueError(f"Roll file `{self.rolls_path}` must contain a JSON object.")

            self._rolls = {
                parse_u64(key, "identity"): parse_u64(value, "roll")
                for key, value in payload.items()
            }
            self._voices.clear()
            self._log("rolls_loaded", count=len(self._rolls))

    def save_rolls(self) -> Path:
        """Write the roll map as a JSON object keyed by decimal identity strings."""

        with self._lock:
            payload = {str(identity): roll for identity, roll in self._rolls.items()}
            self.rolls_path.parent.mkdir(parents=True, exist_ok=True)
            self.rolls_path.write_text(
                json.dumps(payload, indent=2, sort_keys=True),
                encoding="utf-8",
            )
            self._log("rolls_saved", count=len(payload))
            return self.rolls_path

    def _log(self, event: str, **context: object) -> None:
        if self._run_logger is not None:
            self._run_logger.log_event("voice", event, **context)
