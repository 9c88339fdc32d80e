"""
pipeline-provenance — configuration schema and validation.

File: src/pipeline_provenance/config/schema.py
Last updated: 2026-10-16

Purpose
- Define configuration defaults and strict validation rules for
  ``provenance.toml``.

What should be included in this file
- Validation rules for known sections, field types, and enums.
- Deterministic deep-merge helper used by the loader.
- Typed views (``ReportSettings``, workflow metadata) consumed by the core.

Functional requirements
- Every problem is collected as a ``ConfigValidationIssue`` (dotted path + message)
  before anything is raised, so one run reports all of them.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, TypedDict

from pipeline_provenance.constants import (
    DEFAULT_SCOPE,
    RUNTIME_NAME,
    RUNTIME_VERSION_ENV,
    WORKFLOW_SCOPE,
)
from pipeline_provenance.domain.models import MergeOrder
from pipeline_provenance.workflow.metadata import StaticWorkflowMetadata

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
MERGE_ORDERS: Final[tuple[str, ...]] = tuple(order.value for order in MergeOrder)


class ReportConfig(TypedDict):
    default_scope: str
    workflow_scope: str
    merge_order: str


class WorkflowConfig(TypedDict):
    name: str
    version: str
    commit_id: str
    doi: str


class RuntimeConfig(TypedDict):
    name: str
    version: str
    version_env: str


class LoggingConfig(TypedDict):
    level: str
    json: bool


class ProvenanceConfig(TypedDict):
    report: ReportConfig
    workflow: WorkflowConfig
    runtime: RuntimeConfig
    logging: LoggingConfig


DEFAULT_CONFIG: Final[ProvenanceConfig] = {
    "report": {
        "default_scope": DEFAULT_SCOPE,
        "workflow_scope": WORKFLOW_SCOPE,
        "merge_order": MergeOrder.TOPIC_THEN_LEGACY.value,
    },
    "workflow": {
        "name": "",
        "version": "",
        "commit_id": "",
        "doi": "",
    },
    "runtime": {
        "name": RUNTIME_NAME,
        "version": "",
        "version_env": RUNTIME_VERSION_ENV,
    },
    "logging": {
        "level": "WARNING",
        "json": False,
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    """Single structured validation failure."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised when strict config validation fails."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        if not self.issues:
            rendered = "unknown validation failure"
        else:
            rendered = "\n".join(f"- {item.path}: {item.message}" for item in self.issues)
        super().__init__(f"invalid config:\n{rendered}")


class _IssueCollector:
    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[ConfigValidationIssue] = []

    def add(self, path: str, message: str) -> None:
        self._items.append(ConfigValidationIssue(path=path, message=message))

    def items(self) -> tuple[ConfigValidationIssue, ...]:
        return tuple(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)


@dataclass(frozen=True, slots=True)
class ReportSettings:
    """Typed view of the ``[report]`` and ``[runtime]`` sections."""

    default_scope: str = DEFAULT_SCOPE
    workflow_scope: str = WORKFLOW_SCOPE
    merge_order: MergeOrder = MergeOrder.TOPIC_THEN_LEGACY
    runtime_name: str = RUNTIME_NAME
    runtime_version: str | None = None
    runtime_version_env: str = RUNTIME_VERSION_ENV

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> ReportSettings:
        report = config.get("report", {})
        runtime = config.get("runtime", {})
        return cls(
            default_scope=report.get("default_scope", DEFAULT_SCOPE),
            workflow_scope=report.get("workflow_scope", WORKFLOW_SCOPE),
            merge_order=MergeOrder(report.get("merge_order", MergeOrder.TOPIC_THEN_LEGACY)),
            runtime_name=runtime.get("name", RUNTIME_NAME),
            runtime_version=runtime.get("version") or None,
            runtime_version_env=runtime.get("version_env", RUNTIME_VERSION_ENV),
        )


def default_config() -> ProvenanceConfig:
    """Return a deep copy of the built-in defaults."""

    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """New config with ``overlay`` tables merged key by key over ``base``.

    Neither argument is mutated; non-table values in ``overlay`` replace those in ``base``.
    """

    merged: dict[str, Any] = {key: copy.deepcopy(base[key]) for key in sorted(base)}
    for key in sorted(overlay):
        value = overlay[key]
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_config(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Validate config and return structured issues with deterministic paths."""

    issues = _IssueCollector()
    root = _as_object(config, "<root>", issues)
    if root is None:
        return ConfigValidationResult(config=None, issues=issues.items())

    _reject_unknown_keys(root, set(DEFAULT_CONFIG), "", issues)
    normalized: dict[str, Any] = {}
    _section(root, key="report", issues=issues, validator=_validate_report, out=normalized)
    _section(root, key="workflow", issues=issues, validator=_validate_workflow, out=normalized)
    _section(root, key="runtime", issues=issues, validator=_validate_runtime, out=normalized)
    _section(root, key="logging", issues=issues, validator=_validate_logging, out=normalized)

    if issues.has_issues:
        return ConfigValidationResult(config=None, issues=issues.items())
    return ConfigValidationResult(config=normalized, issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Validate config and raise ``ConfigValidationError`` on failure."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


def workflow_metadata_from_config(config: Mapping[str, Any]) -> StaticWorkflowMetadata | None:
    """Provider built from ``[workflow]``; ``None`` when every field is blank."""

    workflow = config.get("workflow", {})
    runtime = config.get("runtime", {})
    if not any(str(workflow.get(key, "")).strip() for key in WorkflowConfig.__annotations__):
        return None
    return StaticWorkflowMetadata.from_mapping(
        {
            "name": workflow.get("name", ""),
            "version": workflow.get("version"),
            "commit_id": workflow.get("commit_id"),
            "doi": workflow.get("doi"),
            "runtime_version": runtime.get("version"),
        }
    )


def _section(
    payload: Mapping[str, object],
    *,
    key: str,
    issues: _IssueCollector,
    validator: Callable[[Mapping[str, object], str, _IssueCollector], dict[str, Any]],
    out: dict[str, Any],
) -> None:
    raw = payload.get(key)
    if raw is None:
        return
    section_obj = _as_object(raw, key, issues)
    if section_obj is None:
        return
    out[key] = validator(section_obj, key, issues)


def _validate_report(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, set(ReportConfig.__annotations__), path, issues)
    out: dict[str, Any] = {}
    for key in ("default_scope", "workflow_scope"):
        if key in payload:
            parsed = _as_str(payload[key], _join(path, key), issues)
            if parsed is not None:
                if ":" in parsed:
                    issues.add(_join(path, key), "scope names must not contain ':'")
                else:
                    out[key] = parsed
    if "merge_order" in payload:
        parsed = _as_enum(
            payload["merge_order"],
            _join(path, "merge_order"),
            issues,
            allowed_values=MERGE_ORDERS,
        )
        if parsed is not None:
            out["merge_order"] = parsed
    return out


def _validate_workflow(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, set(WorkflowConfig.__annotations__), path, issues)
    out: dict[str, Any] = {}
    for key in sorted(WorkflowConfig.__annotations__):
        if key in payload:
            parsed = _as_text(payload[key], _join(path, key), issues)
            if parsed is not None:
                out[key] = parsed
    return out


def _validate_runtime(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, set(RuntimeConfig.__annotations__), path, issues)
    out: dict[str, Any] = {}
    if "name" in payload:
        parsed = _as_str(payload["name"], _join(path, "name"), issues)
        if parsed is not None:
            out["name"] = parsed
    if "version" in payload:
        parsed = _as_text(payload["version"], _join(path, "version"), issues)
        if parsed is not None:
            out["version"] = parsed
    if "version_env" in payload:
        parsed = _as_str(payload["version_env"], _join(path, "version_env"), issues)
        if parsed is not None:
            out["version_env"] = parsed
    return out


def _validate_logging(
    payload: Mapping[str, object], path: str, issues: _IssueCollector
) -> dict[str, Any]:
    _reject_unknown_keys(payload, set(LoggingConfig.__annotations__), path, issues)
    out: dict[str, Any] = {}
    if "level" in payload:
        raw = payload["level"]
        parsed = _as_enum(
            raw.upper() if isinstance(raw, str) else raw,
            _join(path, "level"),
            issues,
            allowed_values=LOG_LEVELS,
        )
        if parsed is not None:
            out["level"] = parsed
    if "json" in payload:
        parsed_bool = _as_bool(payload["json"], _join(path, "json"), issues)
        if parsed_bool is not None:
            out["json"] = parsed_bool
    return out


def _as_object(value: object, path: str, issues: _IssueCollector) -> dict[str, object] | None:
    if not isinstance(value, Mapping):
        issues.add(path, f"expected object, got {type(value).__name__}")
        return None
    out: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            issues.add(path, f"object key must be string, got {type(key).__name__}")
            continue
        out[key] = item
    return out


def _as_text(value: object, path: str, issues: _IssueCollector) -> str | None:
    if not isinstance(value, str):
        issues.add(path, f"expected string, got {type(value).__name__}")
        return None
    return value.strip()


def _as_str(value: object, path: str, issues: _IssueCollector) -> str | None:
    parsed = _as_text(value, path, issues)
    if parsed is None:
        return None
    if not parsed:
        issues.add(path, "must not be empty")
        return None
    return parsed


def _as_bool(value: object, path: str, issues: _IssueCollector) -> bool | None:
    if isinstance(value, bool):
        return value
    issues.add(path, f"expected boolean, got {type(value).__name__}")
    return None


def _as_enum(
    value: object,
    path: str,
    issues: _IssueCollector,
    *,
    allowed_values: tuple[str, ...],
) -> str | None:
    parsed = _as_str(value, path, issues)
    if parsed is None:
        return None
    if parsed not in allowed_values:
        expected = ", ".join(sorted(allowed_values))
        issues.add(path, f"invalid value {parsed!r}; expected one of: {expected}")
        return None
    return parsed


def _reject_unknown_keys(
    payload: Mapping[str, object],
    allowed: set[str],
    path: str,
    issues: _IssueCollector,
) -> None:
    for key in sorted(payload):
        if key not in allowed:
            issues.add(_join(path, key), "unknown field")


def _join(path: str, key: str) -> str:
    if not path:
        return key
    return f"{path}.{key}"


__all__ = [
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "LOG_LEVELS",
    "MERGE_ORDERS",
    "ProvenanceConfig",
    "ReportSettings",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "validate_config",
    "workflow_metadata_from_config",
]
