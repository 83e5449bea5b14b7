"""Configuration model and loaders for dectalkbot.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `BotConfig`: normalized runtime settings for the speech service.
- `ConfigLoader`: static construction helpers for `BotConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_u64
from .voice.allocator import DEFAULT_VOICE_PALETTE
from .voice.schema import DEFAULT_SCHEMA_VERSION, SCHEMAS

_DEFAULT_SAY_EXECUTABLE = "say"
_DEFAULT_SCRATCH_DIR = Path("dectalk")
_DEFAULT_ROLLS_PATH = Path("data") / "rolls.json"
_DEFAULT_MAX_MESSAGE_CHARS = 256
_DEFAULT_MAX_DURATION_SECONDS = 15.0
_DEFAULT_PLAYBACK_VOLUME = 0.25

VOICE_MODE_PROCEDURAL = "procedural"
VOICE_MODE_PALETTE = "palette"
_SUPPORTED_VOICE_MODES = frozenset({VOICE_MODE_PROCEDURAL, VOICE_MODE_PALETTE})


@dataclass(slots=True)
class BotConfig:
    """Runtime configuration for the speech service.

    Attributes:
        say_executable: DECtalk `say` executable name or path.
        scratch_dir: Directory where the engine writes temporary WAV files.
        rolls_path: JSON file persisting `identity -> roll`.
        owner_id: Privileged identity exempt from length and duration gates.
        max_message_chars: Raw message length ceiling for non-privileged users,
            counted in UTF-8 bytes.
        max_duration_seconds: Audio duration ceiling for non-privileged users.
        playback_volume: Track volume handed to the playback collaborator.
        schema_version: Voice schema used for synthesis.
        voice_palette: Built-in voice letters for round-robin allocation.
        voice_mode: `procedural` for per-identity synthesized voices, `palette` for
            round-robin built-in voices per guild.
    """

    say_executable: str = _DEFAULT_SAY_EXECUTABLE
    scratch_dir: Path = _DEFAULT_SCRATCH_DIR
    rolls_path: Path = _DEFAULT_ROLLS_PATH
    owner_id: int | None = None
    max_message_chars: int = _DEFAULT_MAX_MESSAGE_CHARS
    max_duration_seconds: float = _DEFAULT_MAX_DURATION_SECONDS
    playback_volume: float = _DEFAULT_PLAYBACK_VOLUME
    schema_version: str = DEFAULT_SCHEMA_VERSION
    voice_palette: tuple[str, ...] = field(default_factory=lambda: DEFAULT_VOICE_PALETTE)
    voice_mode: str = VOICE_MODE_PROCEDURAL

    def validate(self) -> None:
        """Validate runtime configuration values before use."""

        if not self.say_executable.strip():
            raise ValueError("`say_executable` must be a non-empty string.")
        if self.max_message_chars <= 0:
            raise ValueError("`max_message_chars` must be a positive integer.")
        if self.max_duration_seconds <= 0:
            raise ValueError("`max_duration_seconds` must be a positive number.")
        if not 0.0 <= self.playback_volume <= 1.0:
            raise ValueError("`playback_volume` must be between 0 and 1.")
        if self.schema_version not in SCHEMAS:
            supported = ", ".join(sorted(SCHEMAS))
            raise ValueError(
                f"Unsupported `schema_version` value `{self.schema_version}`; "
                f"supported: {supported}."
            )
        if not self.voice_palette:
            raise ValueError("`voice_palette` must contain at least one voice letter.")
        for voice in self.voice_palette:
            if len(voice) != 1 or not voice.isalpha():
                raise ValueError("`voice_palette` entries must be single letters.")
        if self.voice_mode not in _SUPPORTED_VOICE_MODES:
            supported = ", ".join(sorted(_SUPPORTED_VOICE_MODES))
            raise ValueError(
                f"Unsupported `voice_mode` value `{self.voice_mode}`; supported: {supported}."
            )

    def is_owner(self, identity: int) -> bool:
        """Return whether `identity` is the configured privileged owner."""

        return self.owner_id is not None and identity == self.owner_id


class ConfigLoader:
    """Factory methods for creating `BotConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "say_executable",
            "scratch_dir",
            "rolls_path",
            "owner_id",
            "max_message_chars",
            "max_duration_seconds",
            "playback_volume",
            "schema_version",
            "voice_palette",
            "voice_mode",
        }
    )
    _ENV_KEYS = {
        "say_executable": "DECTALKBOT_SAY_EXECUTABLE",
        "scratch_dir": "DECTALKBOT_SCRATCH_DIR",
        "rolls_path": "DECTALKBOT_ROLLS_PATH",
        "owner_id": "DECTALKBOT_OWNER_ID",
        "max_message_chars": "DECTALKBOT_MAX_MESSAGE_CHARS",
        "max_duration_seconds": "DECTALKBOT_MAX_DURATION_SECONDS",
        "playback_volume": "DECTALKBOT_PLAYBACK_VOLUME",
        "schema_version": "DECTALKBOT_SCHEMA_VERSION",
        "voice_palette": "DECTALKBOT_VOICE_PALETTE",
        "voice_mode": "DECTALKBOT_VOICE_MODE",
    }
    _LEGACY_OWNER_ENV_KEY = "DISCORD_OWNER"

    @staticmethod
    def from_yaml(path: Path) -> BotConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = ConfigLoader._parse_yaml_payload(path_text, path)
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> BotConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        payload: dict[str, Any] = {}
        for key, env_key in ConfigLoader._ENV_KEYS.items():
            value = normalize_optional_string(env_map.get(env_key))
            if value is not None:
                payload[key] = value
        if "owner_id" not in payload:
            legacy_owner = normalize_optional_string(
                env_map.get(ConfigLoader._LEGACY_OWNER_ENV_KEY)
            )
            if legacy_owner is not None:
                payload["owner_id"] = legacy_owner

        return ConfigLoader._build_config_from_mapping(payload, source_label="environment")

    @staticmethod
    def load(config_path: Path | None, env: Mapping[str, str] | None = None) -> BotConfig:
        """Load from YAML when a path is given, otherwise from the environment."""

        if config_path is not None:
            return ConfigLoader.from_yaml(config_path)
        return ConfigLoader.from_env(env)

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> BotConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        config = BotConfig(
            say_executable=ConfigLoader._optional_non_empty_string(payload, "say_executable")
            or _DEFAULT_SAY_EXECUTABLE,
            scratch_dir=ConfigLoader._optional_path(payload, "scratch_dir")
            or _DEFAULT_SCRATCH_DIR,
            rolls_path=ConfigLoader._optional_path(payload, "rolls_path") or _DEFAULT_ROLLS_PATH,
            owner_id=ConfigLoader._optional_identity(payload, "owner_id", source_label),
            max_message_chars=ConfigLoader._optional_positive_int(
                payload,
                "max_message_chars",
                source_label,
                default=_DEFAULT_MAX_MESSAGE_CHARS,
            ),
            max_duration_seconds=ConfigLoader._optional_positive_float(
                payload,
                "max_duration_seconds",
                source_label,
                default=_DEFAULT_MAX_DURATION_SECONDS,
            ),
            playback_volume=ConfigLoader._optional_positive_float(
                payload,
                "playback_volume",
                source_label,
                default=_DEFAULT_PLAYBACK_VOLUME,
            ),
            schema_version=ConfigLoader._optional_non_empty_string(payload, "schema_version")
            or DEFAULT_SCHEMA_VERSION,
            voice_palette=ConfigLoader._optional_palette(payload, "voice_palette", source_label),
            voice_mode=(
                ConfigLoader._optional_non_empty_string(payload, "voice_mode")
                or VOICE_MODE_PROCEDURAL
            ).lower(),
        )
        config.validate()
        return config

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_path(payload: Mapping[str, Any], key: str) -> Path | None:
        """Read an optional path-like field."""

        value = ConfigLoader._optional_non_empty_string(payload, key)
        if value is None:
            return None
        return Path(value)

    @staticmethod
    def _optional_identity(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> int | None:
        """Read an optional unsigned 64-bit identity field."""

        if key not in payload or normalize_optional_string(payload[key]) is None:
            return None
        try:
            return parse_u64(payload[key], key)
        except ValueError as exc:
            raise ValueError(
                f"{source_label} field `{key}` must be an unsigned 64-bit integer."
            ) from exc

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc

        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_positive_float(
        payload: Mapping[str, Any], key: str, source_label: str, default: float
    ) -> float:
        """Read and validate a positive numeric payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        if isinstance(raw_value, (int, float)):
            parsed = float(raw_value)
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = float(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive number."
                ) from exc

        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        return parsed

    @staticmethod
    def _optional_palette(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> tuple[str, ...]:
        """Read a voice palette from a YAML list or a comma/letter string."""

        if key not in payload or payload[key] is None:
            return DEFAULT_VOICE_PALETTE

        raw = payload[key]
        if isinstance(raw, (list, tuple)):
            entries = [normalize_optional_string(item) for item in raw]
        elif isinstance(raw, str):
            text = raw.strip()
            if "," in text:
                entries = [item.strip() for item in text.split(",")]
            else:
                entries = [character for character in text if not character.isspace()]
        else:
            raise ValueError(f"{source_label} field `{key}` must be a list or string.")

        palette = tuple(entry.upper() for entry in entries if entry)
        if not palette:
            raise ValueError(f"{source_label} field `{key}` must not be empty.")
        return palette
