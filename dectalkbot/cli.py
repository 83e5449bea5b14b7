"""Command-line interface for dectalkbot.

Responsibilities:
- Expose voice inspection, WAV analysis/normalization, roll, and speech commands.
- Convert CLI arguments into `BotConfig` and map failures to concise diagnostics.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .audio.normalize import WavNormalizer
from .audio.wav import wav_duration
from .cli_rendering import (
    echo_range_table,
    echo_speech_outcome,
    echo_voice_profile,
    exit_with_command_error,
)
from .config import BotConfig, ConfigLoader
from .errors import SpeechStageError, WavError
from .parsing import parse_u64
from .speech import SpeechService
from .telemetry.logger import RunLogger
from .voice.manager import VoiceManager
from .voice.ranges import range_table
from .voice.schema import DEFAULT_SCHEMA_VERSION
from .voice.synthesizer import VoiceSynthesizer

app = typer.Typer(
    name="dectalkbot",
    no_args_is_help=True,
    help="DECtalk voice bot CLI.",
)

_SCHEMA_OPTION_HELP = "Voice schema version (`v1` or `v2`)."
_CONFIG_OPTION_HELP = "Path to YAML config file. Defaults to `DECTALKBOT_*` environment values."


def _load_config(config_path: Path | None) -> BotConfig:
    """Load YAML or environment config and map failures to stage errors."""

    try:
        return ConfigLoader.load(config_path)
    except FileNotFoundError as exc:
        raise SpeechStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        source = f"config file `{config_path}`" if config_path is not None else "environment"
        raise SpeechStageError(
            stage="config",
            detail=f"Invalid {source}: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _parse_identity_arguments(identity: str, roll: str | None = None) -> tuple[int, int]:
    """Parse identity and optional roll tokens as unsigned 64-bit integers."""

    try:
        parsed_identity = parse_u64(identity, "identity")
        parsed_roll = parse_u64(roll, "roll") if roll is not None else 0
    except ValueError as exc:
        raise SpeechStageError(
            stage="input",
            detail=str(exc),
            hint="Use decimal values between 0 and 18446744073709551615.",
        ) from exc
    return parsed_identity, parsed_roll


def _read_wav_file(path: Path) -> bytes:
    """Read WAV bytes from disk and map missing files to stage errors."""

    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise SpeechStageError(
            stage="input",
            detail=f"WAV file not found: `{path}`.",
        ) from exc


def _wav_stage_error(stage: str, path: Path, exc: WavError) -> SpeechStageError:
    """Wrap a WAV parse/transform error as a stage error for CLI diagnostics."""

    return SpeechStageError(
        stage=stage,
        detail=f"`{path}`: {exc}",
        hint="Only uncompressed 16-bit PCM RIFF/WAVE files are supported.",
    )


@app.command("voice")
def voice_command(
    identity: Annotated[str, typer.Argument(help="Numeric user identity.")],
    roll: Annotated[str, typer.Option("--roll", help="Roll value reseeding the voice.")] = "0",
    schema: Annotated[
        str, typer.Option("--schema", help=_SCHEMA_OPTION_HELP)
    ] = DEFAULT_SCHEMA_VERSION,
) -> None:
    """Print the synthesized voice profile for an identity and roll."""

    try:
        parsed_identity, parsed_roll = _parse_identity_arguments(identity, roll)
        profile = VoiceSynthesizer(schema).synthesize(parsed_identity, parsed_roll)
    except Exception as exc:
        exit_with_command_error("voice", exc)

    echo_voice_profile(profile)


@app.command("ranges")
def ranges_command(
    schema: Annotated[
        str, typer.Option("--schema", help=_SCHEMA_OPTION_HELP)
    ] = DEFAULT_SCHEMA_VERSION,
) -> None:
    """Print the derived parameter range table."""

    try:
        ranges = range_table(schema)
    except Exception as exc:
        exit_with_command_error("ranges", exc)

    echo_range_table(schema, ranges)


@app.command("duration")
def duration_command(
    wav_path: Annotated[Path, typer.Argument(help="Path to a PCM WAV file.")],
) -> None:
    """Print the playback duration of a WAV file in seconds."""

    try:
        data = _read_wav_file(wav_path)
        try:
            seconds = wav_duration(data)
        except WavError as exc:
            raise _wav_stage_error("duration", wav_path, exc) from exc
    except Exception as exc:
        exit_with_command_error("duration", exc)

    typer.echo(f"{seconds:.6f}")


@app.command("normalize")
def normalize_command(
    input_path: Annotated[Path, typer.Argument(help="Source PCM16 WAV file.")],
    output_path: Annotated[Path, typer.Argument(help="Destination WAV file.")],
    strict: Annotated[
        bool,
        typer.Option("--strict/--no-strict", help="Fail on silent input instead of copying it."),
    ] = False,
) -> None:
    """Write a two-sided peak-normalized copy of a WAV file."""

    try:
        data = _read_wav_file(input_path)
        try:
            normalized = WavNormalizer(strict=strict).normalize(data)
        except WavError as exc:
            raise _wav_stage_error("normalize", input_path, exc) from exc
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(normalized)
    except Exception as exc:
        exit_with_command_error("normalize", exc)

    typer.echo(f"Normalized audio: {output_path}")


@app.command("roll")
def roll_command(
    identity: Annotated[str, typer.Argument(help="Numeric user identity.")],
    roll: Annotated[str, typer.Argument(help="New roll value.")],
    config_file: Annotated[
        Path | None, typer.Option("--config", help=_CONFIG_OPTION_HELP)
    ] = None,
) -> None:
    """Persist a new roll for an identity in the configured roll file."""

    try:
        config = _load_config(config_file)
        parsed_identity, parsed_roll = _parse_identity_arguments(identity, roll)
        manager = VoiceManager(
            config.rolls_path,
            synthesizer=VoiceSynthesizer(config.schema_version),
            run_logger=RunLogger(),
        )
        manager.load_rolls()
        manager.set_roll(parsed_identity, parsed_roll)
        profile = manager.get_voice(parsed_identity)
    except Exception as exc:
        exit_with_command_error("roll", exc)

    typer.echo(f"Rolls: {config.rolls_path}")
    echo_voice_profile(profile)


@app.command("speak")
def speak_command(
    text: Annotated[str, typer.Argument(help="Message text, optionally with `[:roll N]`.")],
    out: Annotated[Path, typer.Option("--out", help="Destination WAV file.")],
    identity: Annotated[
        str, typer.Option("--identity", help="Numeric identity of the speaking user.")
    ] = "0",
    guild: Annotated[
        str | None,
        typer.Option("--guild", help="Guild id used for palette voice allocation."),
    ] = None,
    owner: Annotated[
        bool | None,
        typer.Option(
            "--owner/--no-owner",
            help="Force privileged owner handling (defaults to the configured owner id).",
        ),
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", help=_CONFIG_OPTION_HELP)
    ] = None,
) -> None:
    """Render a message through the full speech pipeline and write the WAV output."""

    try:
        config = _load_config(config_file)
        parsed_identity, _ = _parse_identity_arguments(identity)
        service = SpeechService(config, run_logger=RunLogger())
        service.voice_manager.load_rolls()
        outcome = service.handle_message(
            parsed_identity,
            text,
            guild_id=guild,
            is_owner=owner,
        )
        if outcome.spoken and outcome.audio is not None:
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_bytes(outcome.audio)
    except Exception as exc:
        exit_with_command_error("speak", exc)

    echo_speech_outcome(outcome)
    if outcome.spoken:
        typer.echo(f"Audio: {out}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
