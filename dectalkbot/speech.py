"""Message-to-audio speech service.

Responsibilities:
- Apply inline roll commands and message-length policy for one chat message.
- Resolve the speaker's voice, render it through the engine, and gate on duration.
- Normalize the engine output before it is handed to the playback collaborator.

Key public types:
- `SpeechService`: orchestrates one message from raw content to playable WAV bytes.
"""

from __future__ import annotations

from typing import Callable, Hashable, TypeVar

from .audio.normalize import WavNormalizer
from .audio.wav import wav_duration
from .config import VOICE_MODE_PALETTE, BotConfig
from .errors import SpeechStageError, WavError
from .models.datatypes import (
    SKIP_AUDIO_TOO_LONG,
    SKIP_EMPTY_MESSAGE,
    SKIP_MESSAGE_TOO_LONG,
    STATUS_SKIPPED,
    STATUS_SPOKEN,
    SpeechOutcome,
)
from .telemetry.logger import RunLogger
from .text.sanitize import MessageSanitizer, extract_roll
from .tts.say import SayEngine, SpeechEngine
from .voice.allocator import GuildAllocators
from .voice.manager import VoiceManager
from .voice.profile import VoiceProfile
from .voice.synthesizer import VoiceSynthesizer, preset_profile

_StageResult = TypeVar("_StageResult")


class SpeechService:
    """Turn chat messages into normalized speech audio."""

    def __init__(
        self,
        config: BotConfig,
        engine: SpeechEngine | None = None,
        voice_manager: VoiceManager | None = None,
        allocators: GuildAllocators | None = None,
        sanitizer: MessageSanitizer | None = None,
        normalizer: WavNormalizer | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize collaborators, defaulting each one from `config`."""

        config.validate()
        self.config = config
        self._run_logger = run_logger
        self.engine = (
            engine
            if engine is not None
            else SayEngine(executable=config.say_executable, scratch_dir=config.scratch_dir)
        )
        self.voice_manager = (
            voice_manager
            if voice_manager is not None
            else VoiceManager(
                config.rolls_path,
                synthesizer=VoiceSynthesizer(config.schema_version),
                run_logger=run_logger,
            )
        )
        self.allocators = (
            allocators if allocators is not None else GuildAllocators(config.voice_palette)
        )
        self.sanitizer = sanitizer if sanitizer is not None else MessageSanitizer()
        self.normalizer = normalizer if normalizer is not None else WavNormalizer()
        self._owner_voice = preset_profile("a", config.schema_version)

    def handle_message(
        self,
        author_id: int,
        content: str,
        *,
        guild_id: Hashable | None = None,
        is_owner: bool | None = None,
    ) -> SpeechOutcome:
        """Handle one chat message and return either playable audio or a skip reason.

        A `[:roll N]` command is applied before any gate, so it takes effect even
        when the rest of the message is skipped.
        """

        privileged = self.config.is_owner(author_id) if is_owner is None else is_owner

        roll = extract_roll(content)
        if roll is not None:
            self._run_stage("roll", lambda: self.voice_manager.set_roll(author_id, roll))

        if not privileged and len(content.encode("utf-8")) > self.config.max_message_chars:
            return self._skip(SKIP_MESSAGE_TOO_LONG, roll=roll)

        text = self.sanitizer.clean_message(content)
        if not text:
            return self._skip(SKIP_EMPTY_MESSAGE, roll=roll)

        voice = self._resolve_voice(author_id, guild_id, privileged)
        raw_audio = self._run_stage("tts", lambda: self.engine.synthesize(text, voice))
        duration = self._run_stage("duration", lambda: wav_duration(raw_audio))

        if not privileged and duration > self.config.max_duration_seconds:
            return self._skip(
                SKIP_AUDIO_TOO_LONG,
                roll=roll,
                text=text,
                duration_seconds=duration,
            )

        audio = self._run_stage("normalize", lambda: self.normalizer.normalize(raw_audio))
        return SpeechOutcome(
            status=STATUS_SPOKEN,
            text=text,
            audio=audio,
            duration_seconds=duration,
            roll=roll,
            voice=voice if isinstance(voice, VoiceProfile) else None,
            volume=self.config.playback_volume,
        )

    def release_user(self, guild_id: Hashable, author_id: int) -> None:
        """Drop a user's palette assignment when they leave a guild's voice channel."""

        self.allocators.remove(guild_id, author_id)

    def _resolve_voice(
        self, author_id: int, guild_id: Hashable | None, privileged: bool
    ) -> VoiceProfile | str:
        """Return the owner preset, a palette selector, or the user's procedural voice."""

        if privileged:
            return self._owner_voice
        if self.config.voice_mode == VOICE_MODE_PALETTE and guild_id is not None:
            return self.allocators.get_or_insert(guild_id, author_id)
        return self.voice_manager.get_voice(author_id)

    def _on_stage_failure(self, stage: str, exc: Exception) -> None:
        """Emit stage-failure event with sanitized exception metadata."""

        if self._run_logger is not None:
            self._run_logger.log_stage_failure(stage, type(exc).__name__)

    def _run_stage(self, stage: str, action: Callable[[], _StageResult]) -> _StageResult:
        """Run one named stage with telemetry, mapping WAV errors to stage errors."""

        if self._run_logger is not None:
            self._run_logger.log_stage_start(stage)
        try:
            result = action()
        except WavError as exc:
            self._on_stage_failure(stage, exc)
            raise SpeechStageError(
                stage=stage,
                detail=f"Engine output could not be processed: {exc}",
                hint="Verify the engine writes uncompressed 16-bit PCM WAV output.",
            ) from exc
        except Exception as exc:
            self._on_stage_failure(stage, exc)
            raise
        if self._run_logger is not None:
            self._run_logger.log_stage_complete(stage)
        return result

    def _skip(self, reason: str, **details: object) -> SpeechOutcome:
        """Build a skipped outcome and log its reason."""

        if self._run_logger is not None:
            self._run_logger.log_event("gate", "skip", reason=reason)
        return SpeechOutcome(
            status=STATUS_SKIPPED,
            reason=reason,
            text=details.get("text"),
            duration_seconds=details.get("duration_seconds"),
            roll=details.get("roll"),
            volume=self.config.playback_volume,
        )
