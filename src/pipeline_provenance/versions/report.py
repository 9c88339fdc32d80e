"""
pipeline-provenance — software version report entry point

File: src/pipeline_provenance/versions/report.py
Last updated: 2026-10-16

Purpose
- Single call that classifies, normalizes, aggregates, and serializes
  heterogeneous version sources into the nested YAML report.

Functional requirements
- Output is a pure function of the input list and the provider snapshot.
- Empty input with a provider renders only the workflow scope; without a
  provider it renders ``""``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from pipeline_provenance.constants import (
    DEFAULT_SCOPE,
    RUNTIME_NAME,
    RUNTIME_VERSION_ENV,
    WORKFLOW_SCOPE,
)
from pipeline_provenance.domain.models import MergeOrder
from pipeline_provenance.ingest.classifier import require_source_list
from pipeline_provenance.observability.logging import get_logger
from pipeline_provenance.utils.fs import FilesystemProvider
from pipeline_provenance.versions.aggregator import VersionTable, aggregate_versions
from pipeline_provenance.versions.normalizer import normalize_version_sources
from pipeline_provenance.versions.serializer import render_versions_yaml
from pipeline_provenance.workflow.metadata import WorkflowMetadataProvider, resolve_workflow_info

_logger = get_logger(__name__)


def build_version_table(
    sources: Iterable[object],
    *,
    provider: WorkflowMetadataProvider | None = None,
    runtime_version: str | None = None,
    default_scope: str = DEFAULT_SCOPE,
    workflow_scope: str = WORKFLOW_SCOPE,
    runtime_name: str = RUNTIME_NAME,
    runtime_version_env: str = RUNTIME_VERSION_ENV,
    environ: Mapping[str, str] | None = None,
    fs: FilesystemProvider | None = None,
) -> VersionTable:
    """Normalize and aggregate ``sources``; the table is not yet rendered."""

    results = normalize_version_sources(sources, default_scope=default_scope, fs=fs)
    workflow = None
    if provider is not None:
        workflow = resolve_workflow_info(
            provider,
            runtime_version=runtime_version,
            environ=environ,
            runtime_version_env=runtime_version_env,
        )
    table = aggregate_versions(
        results,
        workflow=workflow,
        workflow_scope=workflow_scope,
        runtime_name=runtime_name,
    )
    _logger.debug(
        "version_table_built",
        records=len(table),
        dropped=len(table.dropped),
        workflow=workflow is not None,
    )
    return table


def software_versions_to_yaml(
    sources: Sequence[object],
    *,
    provider: WorkflowMetadataProvider | None = None,
    runtime_version: str | None = None,
    default_scope: str = DEFAULT_SCOPE,
    workflow_scope: str = WORKFLOW_SCOPE,
    runtime_name: str = RUNTIME_NAME,
    runtime_version_env: str = RUNTIME_VERSION_ENV,
    environ: Mapping[str, str] | None = None,
    fs: FilesystemProvider | None = None,
) -> str:
    """Render the nested YAML version report for a list of mixed-shape sources."""

    require_source_list(sources, "sources")
    table = build_version_table(
        sources,
        provider=provider,
        runtime_version=runtime_version,
        default_scope=default_scope,
        workflow_scope=workflow_scope,
        runtime_name=runtime_name,
        runtime_version_env=runtime_version_env,
        environ=environ,
        fs=fs,
    )
    return render_versions_yaml(table)


def combine_version_sources(
    topic_versions: Sequence[object] | None,
    legacy_versions: Sequence[object] | None,
    *,
    merge_order: MergeOrder = MergeOrder.TOPIC_THEN_LEGACY,
) -> list[object]:
    """Concatenate topic and legacy lists so that the later list wins duplicates."""

    topic = (
        [] if topic_versions is None else require_source_list(topic_versions, "topic_versions")
    )
    legacy = (
        [] if legacy_versions is None else require_source_list(legacy_versions, "legacy_versions")
    )
    return merge_order.arrange(topic, legacy)


__all__ = [
    "build_version_table",
    "combine_version_sources",
    "software_versions_to_yaml",
]
