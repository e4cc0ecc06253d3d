"""Persistence for run summaries."""

from evalcourt.storage.json_store import RunStore

__all__ = ["RunStore"]
