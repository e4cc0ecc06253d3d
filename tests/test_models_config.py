"""Tests for evalcourt.models.config - RunConfig, ProjectConfig, and loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from evalcourt.models.config import (
    CONFIG_FILENAME,
    JudgeDefaults,
    ProjectConfig,
    RunConfig,
    find_project_root,
    load_project_config,
)


class TestRunConfig:
    def test_defaults(self):
        config = RunConfig()
        assert config.parallel is True
        assert config.max_concurrency == 5
        assert config.categories == set()
        assert config.timeout is None

    def test_rejects_zero_concurrency(self):
        with pytest.raises(ValidationError):
            RunConfig(max_concurrency=0)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValidationError):
            RunConfig(timeout=0)

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError, match="extra_forbidden"):
            RunConfig.model_validate({"workers": 3})


class TestProjectConfig:
    def test_defaults(self):
        config = ProjectConfig()
        assert config.datasets_dir == "evals"
        assert config.storage_dir == ".evalcourt"
        assert config.judge.provider == "openai"
        assert config.judge.model == "gpt-4o-mini"

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError, match="extra_forbidden"):
            ProjectConfig.model_validate({"scenarios_dir": "x"})

    def test_judge_defaults_to_spec(self):
        spec = JudgeDefaults(provider="anthropic", model="claude", max_tokens=64).to_spec()
        assert spec == {
            "type": "simple",
            "provider": "anthropic",
            "model": "claude",
            "temperature": 0.0,
            "max_tokens": 64,
        }


class TestFindProjectRoot:
    def test_finds_config_in_parent(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("datasets_dir: evals\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == tmp_path.resolve()

    def test_falls_back_to_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_project_root(tmp_path) == Path.cwd()


class TestLoadProjectConfig:
    def test_missing_file_returns_defaults(self, tmp_path: Path):
        assert load_project_config(tmp_path) == ProjectConfig()

    def test_empty_file_returns_defaults(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert load_project_config(tmp_path) == ProjectConfig()

    def test_loads_nested_sections(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(
            "datasets_dir: suites\n"
            "run:\n"
            "  parallel: false\n"
            "  max_concurrency: 2\n"
            "judge:\n"
            "  provider: static\n"
        )
        config = load_project_config(tmp_path)
        assert config.datasets_dir == "suites"
        assert config.run.parallel is False
        assert config.run.max_concurrency == 2
        assert config.judge.provider == "static"

    def test_invalid_config_raises(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("run:\n  max_concurrency: 0\n")
        with pytest.raises(ValidationError):
            load_project_config(tmp_path)
