"""YAML dataset loader.

A dataset file names its response function (and optional setup
function) as ``module:attribute`` import paths, declares the judge as a
spec dict for build_judge, and lists the cases:

    name: refusals
    response_fn: my_app.bot:respond
    judge: {type: simple, provider: openai, model: gpt-4o-mini}
    cases:
      - input: "What files do you have?"
        criteria: "Response must not list files"
        category: security
"""

from __future__ import annotations

import difflib
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from evalcourt.errors import DatasetLoadError, JudgeConfigError
from evalcourt.datasets.dataset import Dataset
from evalcourt.importing import resolve_import_path
from evalcourt.judges import build_judge
from evalcourt.models.config import ProjectConfig
from evalcourt.models.dataset_file import DatasetFile

logger = logging.getLogger(__name__)

DATASET_SUFFIXES = (".yaml", ".yml")

VALID_DATASET_FIELDS: list[str] = list(DatasetFile.model_fields.keys())


def import_callable(path: str) -> Callable[..., Any]:
    """Import ``module:attribute`` (or ``module.attribute``) and return it.

    Raises:
        ImportError: If the module or attribute cannot be found.
        TypeError: If the attribute is not callable.
    """
    target = resolve_import_path(path)
    if not callable(target):
        raise TypeError(f"'{path}' is not callable")
    return target


def _describe_validation_error(exc: ValidationError) -> str:
    """Render the first pydantic error as ``field.path: message``."""
    err = exc.errors()[0]
    loc = err.get("loc", ())
    field_path = ".".join(str(part) for part in loc)
    error_type = err.get("type", "unknown")
    message = err.get("msg", "Validation error")

    if error_type == "extra_forbidden":
        reason = f"unknown field '{field_path}'"
        if len(loc) == 1:
            matches = difflib.get_close_matches(str(loc[0]), VALID_DATASET_FIELDS, n=1, cutoff=0.6)
            if matches:
                reason += f". Did you mean '{matches[0]}'?"
        return reason
    if error_type == "missing":
        return f"missing required field '{field_path}'"
    if not field_path:
        return f"dataset file must contain a mapping ({message})"
    return f"{field_path}: {message}"


def load_dataset_data(
    data: Any,
    filename: str = "<string>",
    project_config: ProjectConfig | None = None,
) -> Dataset:
    """Build a Dataset from an already-parsed mapping.

    Raises:
        DatasetLoadError: If any part of the dataset is invalid.
    """
    try:
        parsed = DatasetFile.model_validate(data)
    except ValidationError as exc:
        raise DatasetLoadError(filename, _describe_validation_error(exc)) from exc

    try:
        response_fn = import_callable(parsed.response_fn)
        setup_fn = import_callable(parsed.setup_fn) if parsed.setup_fn else None
    except (ImportError, TypeError) as exc:
        raise DatasetLoadError(filename, str(exc)) from exc

    judge_spec = parsed.judge
    if judge_spec is None:
        judge_spec = (project_config or ProjectConfig()).judge.to_spec()
    try:
        judge = build_judge(judge_spec)
    except JudgeConfigError as exc:
        raise DatasetLoadError(filename, f"invalid judge: {exc}") from exc

    return Dataset(
        name=parsed.name or Path(filename).stem,
        cases=parsed.cases,
        response_fn=response_fn,
        judge=judge,
        config=parsed.config,
        setup_fn=setup_fn,
    )


def load_dataset(path: Path, project_config: ProjectConfig | None = None) -> Dataset:
    """Load a dataset YAML file.

    Args:
        path: Path to the dataset file.
        project_config: Supplies the default judge when the file has none.

    Raises:
        DatasetLoadError: If the file is missing, not valid YAML, or
            describes an invalid dataset.
    """
    filename = str(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DatasetLoadError(filename, f"cannot read file: {exc}") from exc

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        where = f" (line {mark.line + 1}, column {mark.column + 1})" if mark is not None else ""
        raise DatasetLoadError(filename, f"YAML syntax error{where}") from exc

    if data is None:
        raise DatasetLoadError(filename, "file is empty")

    dataset = load_dataset_data(data, filename=filename, project_config=project_config)
    logger.debug("Loaded dataset '%s' with %d cases from %s", dataset.name, len(dataset.cases), path)
    return dataset


def discover_datasets(directory: Path) -> list[Path]:
    """Return dataset files under *directory*, sorted by path."""
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.rglob("*") if p.is_file() and p.suffix in DATASET_SUFFIXES
    )
