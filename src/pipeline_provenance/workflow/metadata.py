"""
pipeline-provenance — workflow metadata adapter

File: src/pipeline_provenance/workflow/metadata.py
Last updated: 2026-10-16

Purpose
- Read pipeline name/version and runtime version from an explicitly passed
  provider and fold them into a ``WorkflowInfo`` snapshot.

Functional requirements
- The provider is consulted read-only, once per report.
- Runtime version precedence: explicit override > provider configuration >
  environment variable > ``"unknown"``.

Non-functional requirements
- No process-wide session or singleton; every call receives its provider.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pipeline_provenance.constants import (
    COMMIT_SHORT_LENGTH,
    RUNTIME_VERSION_ENV,
    UNKNOWN_PIPELINE,
    UNKNOWN_VERSION,
)
from pipeline_provenance.domain.models import WorkflowInfo


@runtime_checkable
class WorkflowMetadataProvider(Protocol):
    """Read-only source of pipeline and runtime identity.

    Providers may additionally expose ``commit_id()`` and ``pipeline_doi()``;
    both are optional and treated as ``None`` when missing.
    """

    def pipeline_name(self) -> str: ...

    def pipeline_version(self) -> str | None: ...

    def runtime_version_config(self) -> str | None: ...


@dataclass(frozen=True, slots=True)
class StaticWorkflowMetadata:
    """Provider backed by fixed values, e.g. from config or CLI flags."""

    name: str = ""
    version: str | None = None
    runtime_version: str | None = None
    commit: str | None = None
    doi: str | None = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, object]) -> StaticWorkflowMetadata:
        """Build from a flat mapping or a manifest-shaped one.

        Accepted keys: ``name``, ``version``, ``commit_id``, ``doi`` and
        ``runtime_version``, or nested ``manifest``/``nextflow`` sections as
        found in a workflow metadata dump.
        """

        manifest = payload.get("manifest")
        fields = manifest if isinstance(manifest, Mapping) else payload
        runtime = payload.get("nextflow")
        runtime_version = (
            runtime.get("version") if isinstance(runtime, Mapping) else None
        ) or payload.get("runtime_version")
        return cls(
            name=_optional_text(fields.get("name")) or "",
            version=_optional_text(fields.get("version")),
            runtime_version=_optional_text(runtime_version),
            commit=_optional_text(payload.get("commit_id", payload.get("commitId"))),
            doi=_optional_text(fields.get("doi")),
        )

    def pipeline_name(self) -> str:
        return self.name

    def pipeline_version(self) -> str | None:
        return self.version

    def runtime_version_config(self) -> str | None:
        return self.runtime_version

    def commit_id(self) -> str | None:
        return self.commit

    def pipeline_doi(self) -> str | None:
        return self.doi


def resolve_workflow_info(
    provider: WorkflowMetadataProvider,
    *,
    runtime_version: str | None = None,
    environ: Mapping[str, str] | None = None,
    runtime_version_env: str = RUNTIME_VERSION_ENV,
) -> WorkflowInfo:
    """Take one snapshot of ``provider`` for a single report."""

    env_map = os.environ if environ is None else environ
    name = _optional_text(provider.pipeline_name()) or UNKNOWN_PIPELINE
    version = _optional_text(provider.pipeline_version()) or ""

    resolved_runtime = (
        _optional_text(runtime_version)
        or _optional_text(provider.runtime_version_config())
        or _optional_text(env_map.get(runtime_version_env))
        or UNKNOWN_VERSION
    )

    return WorkflowInfo(
        pipeline_name=name,
        pipeline_version=version,
        runtime_version=resolved_runtime,
        commit_id=_optional_text(_optional_call(provider, "commit_id")),
        doi=_optional_text(_optional_call(provider, "pipeline_doi")),
    )


def format_workflow_version(version: str | None, commit_id: str | None = None) -> str:
    """Render ``v<version>[-g<short sha>]``; a leading ``v`` is never doubled."""

    rendered = ""
    cleaned = _optional_text(version)
    if cleaned:
        prefix = "" if cleaned.startswith("v") else "v"
        rendered = f"{prefix}{cleaned}"
    commit = _optional_text(commit_id)
    if commit:
        rendered += f"-g{commit[:COMMIT_SHORT_LENGTH]}"
    return rendered


def _optional_call(provider: object, method_name: str) -> object:
    method = getattr(provider, method_name, None)
    if not callable(method):
        return None
    return method()


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = [
    "StaticWorkflowMetadata",
    "WorkflowMetadataProvider",
    "format_workflow_version",
    "resolve_workflow_info",
]
