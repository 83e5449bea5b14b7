"""Unit tests for structured runtime log lines."""

from __future__ import annotations

import io

from dectalkbot.telemetry.logger import RunLogger


def test_stage_events_render_deterministic_key_value_lines() -> None:
    """Context keys are sorted and values sanitized into shell-safe tokens."""

    sink = io.StringIO()
    logger = RunLogger(sink=sink)

    logger.log_stage_start("tts")
    logger.log_stage_complete("tts", seconds=1.5)
    logger.log_event("voice", "set_roll", roll=3, identity=42, path="data/rolls file.json")

    lines = sink.getvalue().splitlines()
    assert lines == [
        "[phase] level=INFO stage=tts event=start",
        "[phase] level=INFO stage=tts event=complete seconds=1.5",
        "[phase] level=INFO stage=voice event=set_roll "
        "identity=42 path=data/rolls_file.json roll=3",
    ]


def test_failure_lines_carry_only_error_type() -> None:
    """Stage failures log the exception type rather than its message."""

    sink = io.StringIO()
    logger = RunLogger(sink=sink)

    logger.log_stage_failure("normalize", "MalformedContainerError")

    assert sink.getvalue().strip() == (
        "[phase] level=ERROR stage=normalize event=failure error_type=MalformedContainerError"
    )


def test_level_threshold_filters_debug_events() -> None:
    """Debug lines are dropped at the default level and kept when requested."""

    quiet_sink = io.StringIO()
    RunLogger(sink=quiet_sink).log_debug("voice", "cache_hit")
    assert quiet_sink.getvalue() == ""

    verbose_sink = io.StringIO()
    verbose = RunLogger(sink=verbose_sink, level="DEBUG")
    verbose.log_debug("voice", "cache_hit", identity=1)
    verbose.log_event("gate", "skip", reason="")

    assert verbose_sink.getvalue().splitlines() == [
        "[phase] level=DEBUG stage=voice event=cache_hit identity=1",
        "[phase] level=INFO stage=gate event=skip reason=none",
    ]
