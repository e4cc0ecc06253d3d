"""DatasetFile model - the on-disk shape of a dataset YAML file.

The loader validates parsed YAML against this model before it imports
any callables or builds the judge.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from evalcourt.models.case import EvalCase


class DatasetFile(BaseModel):
    """A dataset file before its import paths and judge spec are resolved."""

    model_config = {"extra": "forbid"}

    name: str | None = None
    response_fn: str
    setup_fn: str | None = None
    judge: dict[str, Any] | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    cases: list[EvalCase] = Field(default_factory=list)

    @field_validator("config", "cases", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        # ``cases:`` with no items parses to None
        if value is None:
            return {} if info.field_name == "config" else []
        return value
