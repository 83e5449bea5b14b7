"""Shared typed data models for dectalkbot.

This package contains dataclasses used across service modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import SpeechOutcome

__all__ = ["SpeechOutcome"]
