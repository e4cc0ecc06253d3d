"""JSON file storage layer for evalcourt run persistence.

Stores RunSummary objects as JSON files under .evalcourt/runs/. Uses
atomic writes to prevent corruption.
"""

from __future__ import annotations

from pathlib import Path

from evalcourt.models.result import RunSummary


class RunStore:
    """Persist and query RunSummary objects as JSON files.

    File layout:
        .evalcourt/
            runs/
                {run-id}.json    # One summary per run

    Writes are atomic (write to .tmp, then rename) to prevent partial files.
    """

    def __init__(self, project_root: Path, storage_dir: str | None = None) -> None:
        effective_dir = storage_dir or ".evalcourt"
        self.storage_root = project_root / effective_dir
        self.runs_dir = self.storage_root / "runs"

    def ensure_dirs(self) -> None:
        self.runs_dir.mkdir(parents=True, exist_ok=True)

    def save_summary(self, summary: RunSummary) -> str:
        """Save a RunSummary as a JSON file.

        Args:
            summary: The summary to persist.

        Returns:
            The run ID.
        """
        self.ensure_dirs()

        run_id = summary.run_id
        content = summary.to_json()

        # Atomic write
        run_file = self.runs_dir / f"{run_id}.json"
        tmp_file = self.runs_dir / f"{run_id}.json.tmp"
        tmp_file.write_text(content, encoding="utf-8")
        tmp_file.replace(run_file)

        return run_id

    def load_summary(self, run_id: str) -> RunSummary:
        """Load a RunSummary from its JSON file.

        Raises:
            FileNotFoundError: If no run with that ID exists.
        """
        run_file = self.runs_dir / f"{run_id}.json"
        content = run_file.read_text(encoding="utf-8")
        return RunSummary.model_validate_json(content)

    def list_runs(self) -> list[str]:
        """List stored run IDs ordered by start time, oldest first.

        Files that fail to parse are skipped.
        """
        if not self.runs_dir.exists():
            return []

        entries: list[tuple[str, str]] = []
        for run_file in self.runs_dir.glob("*.json"):
            try:
                summary = RunSummary.model_validate_json(
                    run_file.read_text(encoding="utf-8")
                )
            except (OSError, ValueError):
                continue
            entries.append((summary.started_at.isoformat(), run_file.stem))
        return [run_id for _, run_id in sorted(entries)]

    def latest_run_id(self) -> str | None:
        runs = self.list_runs()
        return runs[-1] if runs else None

    def load_latest(self) -> RunSummary | None:
        """Load the most recently started run, or None if there are none."""
        run_id = self.latest_run_id()
        if run_id is None:
            return None
        return self.load_summary(run_id)
