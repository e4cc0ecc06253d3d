"""BaseReporter ABC and in-memory reporters.

The Runner calls init() once before the first case, report_result()
exactly once per completed case, and finalize() exactly once with the
summary. Reporters keep their own state between calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from evalcourt.models.result import CaseResult, RunSummary


class BaseReporter(ABC):
    """Sink for run lifecycle and per-case events."""

    @abstractmethod
    def init(self, total_cases: int) -> None:
        """Called before any case runs with the number of eligible cases."""

    @abstractmethod
    def report_result(self, result: CaseResult) -> None:
        """Called once per case, as soon as it completes."""

    @abstractmethod
    def finalize(self, summary: RunSummary) -> None:
        """Called once after all cases complete (or the run fails)."""


class NullReporter(BaseReporter):
    """Reporter that discards every event."""

    def init(self, total_cases: int) -> None:
        pass

    def report_result(self, result: CaseResult) -> None:
        pass

    def finalize(self, summary: RunSummary) -> None:
        pass


class CollectingReporter(BaseReporter):
    """Reporter that records events in order, for tests and embedding."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []
        self.total_cases: int | None = None
        self.results: list[CaseResult] = []
        self.summary: RunSummary | None = None

    def init(self, total_cases: int) -> None:
        self.total_cases = total_cases
        self.events.append(("init", total_cases))

    def report_result(self, result: CaseResult) -> None:
        self.results.append(result)
        self.events.append(("result", result))

    def finalize(self, summary: RunSummary) -> None:
        self.summary = summary
        self.events.append(("finalize", summary))
