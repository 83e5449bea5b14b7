"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
voice profiles, range tables, and speech outcomes.
"""

from __future__ import annotations

from typing import Mapping, NoReturn

import typer

from .errors import SpeechStageError
from .models.datatypes import SpeechOutcome
from .tts.say import format_voice_commands
from .voice.profile import VoiceProfile
from .voice.ranges import RangeSpec
from .voice.schema import get_schema


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, SpeechStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_voice_profile(profile: VoiceProfile) -> None:
    """Print one `name (code): value` row per parameter and the engine prefix."""

    schema = get_schema(profile.schema_version)
    typer.echo(f"Schema: {profile.schema_version}")
    for name, value in profile:
        typer.echo(f"{name} ({schema.parameter(name).code}): {value}")
    typer.echo(f"Engine prefix: {format_voice_commands(profile)}")


def echo_range_table(schema_version: str, ranges: Mapping[str, RangeSpec]) -> None:
    """Print derived parameter ranges in schema order."""

    schema = get_schema(schema_version)
    typer.echo(f"Schema: {schema_version}")
    for parameter in schema.parameters:
        bounds = ranges[parameter.name]
        typer.echo(
            f"{parameter.name} ({parameter.code}, u{parameter.width}): "
            f"{bounds.minimum}..{bounds.maximum}"
        )


def echo_speech_outcome(outcome: SpeechOutcome) -> None:
    """Print status, skip reason, and measured duration of one speech outcome."""

    typer.echo(f"Status: {outcome.status}")
    if outcome.reason:
        typer.echo(f"Reason: {outcome.reason}")
    if outcome.roll is not None:
        typer.echo(f"Roll applied: {outcome.roll}")
    if outcome.duration_seconds is not None:
        typer.echo(f"Duration (s): {outcome.duration_seconds:.3f}")
