"""Reporters -- sinks for run lifecycle and per-case events."""

from evalcourt.reporting.base import BaseReporter, CollectingReporter, NullReporter
from evalcourt.reporting.console import ConsoleReporter, output_json

__all__ = [
    "BaseReporter",
    "CollectingReporter",
    "ConsoleReporter",
    "NullReporter",
    "output_json",
]
