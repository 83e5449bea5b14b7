"""Telemetry and observability helpers.

This package emits deterministic stage-level run events.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
