"""
pipeline-provenance — unit tests for config loading and validation

File: tests/unit/config/test_config_loader.py
Last updated: 2026-10-16

Purpose
- Validate config loading from defaults, TOML, env overrides, and CLI overrides.

What this test file should cover
- Precedence: CLI > env > file > defaults.
- Env var path mapping and boolean coercion.
- Structured validation errors and typed views.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pipeline_provenance.config import (
    DEFAULT_CONFIG,
    ConfigLoadError,
    ConfigValidationError,
    ReportSettings,
    default_config,
    dump_effective_config,
    load_config,
    validate_config,
    workflow_metadata_from_config,
)
from pipeline_provenance.domain.models import MergeOrder


def _write_config(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_when_no_file_exists(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_config(environ={}) == default_config()


def test_loader_precedence_file_env_cli(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path / "provenance.toml",
        """
[workflow]
name = "nf-core/demo"
version = "1.0.0"

[logging]
level = "info"
""".strip(),
    )
    env = {"PROVENANCE_WORKFLOW_VERSION": "2.0.0", "PROVENANCE_LOGGING_JSON": "yes"}

    loaded = load_config(
        config_path,
        environ=env,
        cli_overrides={"workflow.version": "3.0.0", "runtime.version": None},
    )

    assert loaded["workflow"]["name"] == "nf-core/demo"
    assert loaded["workflow"]["version"] == "3.0.0"
    assert loaded["logging"] == {"level": "INFO", "json": True}
    assert loaded["runtime"]["version"] == ""


def test_env_override_applies_without_cli(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "provenance.toml", "")
    env = {"PROVENANCE_REPORT_MERGE_ORDER": "legacy-then-topic"}
    loaded = load_config(config_path, environ=env)
    assert ReportSettings.from_config(loaded).merge_order is MergeOrder.LEGACY_THEN_TOPIC


def test_explicit_missing_file_is_load_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError, match="config file not found"):
        load_config(tmp_path / "absent.toml", environ={})


def test_invalid_toml_is_load_error(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "provenance.toml", "[report\n")
    with pytest.raises(ConfigLoadError, match="invalid TOML"):
        load_config(config_path, environ={})


def test_bad_boolean_env_is_load_error(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "provenance.toml", "")
    with pytest.raises(ConfigLoadError, match="PROVENANCE_LOGGING_JSON"):
        load_config(config_path, environ={"PROVENANCE_LOGGING_JSON": "maybe"})


def test_validation_collects_structured_issues(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path / "provenance.toml",
        """
[report]
merge_order = "random"
default_scope = "A:B"
colour = "blue"

[logging]
json = "yes"
""".strip(),
    )

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(config_path, environ={})

    paths = sorted(issue.path for issue in excinfo.value.issues)
    assert paths == ["logging.json", "report.colour", "report.default_scope", "report.merge_order"]


def test_unknown_section_is_rejected() -> None:
    result = validate_config({**DEFAULT_CONFIG, "extras": {}})
    assert not result.is_valid
    assert result.issues[0].path == "extras"


def test_report_settings_from_defaults() -> None:
    settings = ReportSettings.from_config(default_config())
    assert settings == ReportSettings()
    assert settings.runtime_version is None


def test_workflow_metadata_from_config() -> None:
    config = default_config()
    assert workflow_metadata_from_config(config) is None

    config["workflow"]["name"] = "nf-core/demo"
    config["runtime"]["version"] = "24.04.2"
    provider = workflow_metadata_from_config(config)

    assert provider is not None
    assert provider.pipeline_name() == "nf-core/demo"
    assert provider.pipeline_version() is None
    assert provider.runtime_version_config() == "24.04.2"


def test_dump_effective_config_is_deterministic() -> None:
    first = dump_effective_config(default_config())
    assert first == dump_effective_config(default_config())
    assert first.startswith('{"logging":{"json":false,"level":"WARNING"}')
