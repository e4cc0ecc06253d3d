"""Run and project configuration models for evalcourt.

RunConfig holds the options recognized by the Runner. ProjectConfig
captures evalcourt.yaml fields with sensible defaults for dataset
discovery, storage, run options, and judge defaults.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

CONFIG_FILENAME = "evalcourt.yaml"


class RunConfig(BaseModel):
    """Options controlling how the Runner schedules cases.

    ``categories`` empty means no filter. ``timeout`` bounds each case
    end-to-end (response generation plus judging); None disables it.
    """

    model_config = {"extra": "forbid"}

    parallel: bool = True
    max_concurrency: int = Field(default=5, ge=1)
    categories: set[str] = Field(default_factory=set)
    timeout: float | None = Field(default=None, gt=0)


class JudgeDefaults(BaseModel):
    """Default simple-judge settings for datasets without a judge section."""

    model_config = {"extra": "forbid"}

    provider: str = "openai"
    model: str = "gpt-4o-mini"
    temperature: float = 0.0
    max_tokens: int = 256

    def to_spec(self) -> dict:
        """Render as a ``build_judge`` spec dict for a simple judge."""
        return {
            "type": "simple",
            "provider": self.provider,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from evalcourt.yaml."""

    model_config = {"extra": "forbid"}

    datasets_dir: str = "evals"
    storage_dir: str = ".evalcourt"
    run: RunConfig = Field(default_factory=RunConfig)
    judge: JudgeDefaults = Field(default_factory=JudgeDefaults)


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for evalcourt.yaml.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        Path to the directory containing evalcourt.yaml, or cwd if
        none is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from evalcourt.yaml. Returns defaults if not found.

    Args:
        project_root: Path to the project root directory. If None,
            uses find_project_root() to locate it.

    Returns:
        Validated ProjectConfig instance.
    """
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return ProjectConfig()
    import yaml

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return ProjectConfig()
    return ProjectConfig.model_validate(raw)
