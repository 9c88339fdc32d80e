"""
pipeline-provenance — methods description substitution

File: src/pipeline_provenance/citations/methods.py
Last updated: 2026-10-16

Purpose
- Fill a methods-description template with the citation sentence, the
  bibliography block, and workflow metadata.

Placeholders
- ``${tool_citations}``, ``${tool_bibliography}``, ``${doi_text}``, ``${nodoi_text}``.
- ``${workflow.manifest.name}``, ``${workflow.manifest.version}``,
  ``${workflow.manifest.doi}``, ``${workflow.nextflow.version}``,
  ``${workflow.commitId}`` and the ``${manifest_map.*}`` equivalents.

Functional requirements
- Substitution is textual. Unknown placeholders are left untouched; unfilled
  placeholders in the ``workflow``/``manifest_map`` namespaces become ``""``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Final

from pipeline_provenance.citations.aggregator import (
    CitationTable,
    tool_bibliography_text,
    tool_citation_text,
)
from pipeline_provenance.constants import DOI_URL_PREFIX, NODOI_REMINDER, RUNTIME_VERSION_ENV
from pipeline_provenance.domain.models import CitationRecord, WorkflowInfo
from pipeline_provenance.observability.logging import get_logger
from pipeline_provenance.workflow.metadata import WorkflowMetadataProvider, resolve_workflow_info

_PLACEHOLDER: Final[re.Pattern[str]] = re.compile(
    r"\$\{\s*([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)\s*\}"
)
_WORKFLOW_NAMESPACES: Final[tuple[str, ...]] = ("workflow.", "manifest_map.")

_logger = get_logger(__name__)


def methods_description_text(
    template: str,
    citations: CitationTable | Iterable[CitationRecord],
    *,
    provider: WorkflowMetadataProvider | None = None,
    extra_fields: Mapping[str, object] | None = None,
    runtime_version: str | None = None,
    environ: Mapping[str, str] | None = None,
    runtime_version_env: str = RUNTIME_VERSION_ENV,
) -> str:
    """Return ``template`` with every known placeholder substituted."""

    if not isinstance(template, str):
        raise TypeError(f"template must be str, got {type(template).__name__}")

    records = citations if isinstance(citations, CitationTable) else tuple(citations)
    fields: dict[str, str] = {
        "tool_citations": tool_citation_text(records),
        "tool_bibliography": tool_bibliography_text(records),
        "doi_text": "",
        "nodoi_text": "",
    }
    if provider is not None:
        info = resolve_workflow_info(
            provider,
            runtime_version=runtime_version,
            environ=environ,
            runtime_version_env=runtime_version_env,
        )
        fields.update(workflow_fields(info))
    if extra_fields:
        fields.update({str(key): _field_text(value) for key, value in extra_fields.items()})

    return render_template(template, fields)


def workflow_fields(info: WorkflowInfo) -> dict[str, str]:
    """Placeholder values derived from one workflow snapshot."""

    doi = info.doi or ""
    fields = {
        "workflow.manifest.name": info.pipeline_name,
        "workflow.manifest.version": info.pipeline_version,
        "workflow.manifest.doi": doi,
        "workflow.nextflow.version": info.runtime_version,
        "workflow.commitId": info.commit_id or "",
        "manifest_map.name": info.pipeline_name,
        "manifest_map.version": info.pipeline_version,
        "manifest_map.doi": doi,
        "doi_text": doi_text(doi),
        "nodoi_text": nodoi_text(doi),
    }
    return fields


def doi_text(doi: str | None) -> str:
    """Render each comma-separated DOI as a ``(doi: <a ...>)`` link."""

    if not doi:
        return ""
    links = []
    for raw in doi.split(","):
        cleaned = raw.replace(DOI_URL_PREFIX, "").replace(" ", "")
        if cleaned:
            links.append(f"(doi: <a href='{DOI_URL_PREFIX}{cleaned}'>{cleaned}</a>)")
    return ", ".join(links)


def nodoi_text(doi: str | None) -> str:
    return "" if doi else NODOI_REMINDER


def render_template(template: str, fields: Mapping[str, str]) -> str:
    """Substitute ``${name}`` markers found in ``fields``."""

    unknown: set[str] = set()

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in fields:
            return fields[name]
        if name.startswith(_WORKFLOW_NAMESPACES):
            return ""
        unknown.add(name)
        return match.group(0)

    rendered = _PLACEHOLDER.sub(_replace, template)
    if unknown:
        _logger.debug("template_placeholders_untouched", placeholders=sorted(unknown))
    return rendered


def _field_text(value: object) -> str:
    return "" if value is None else str(value)


__all__ = [
    "doi_text",
    "methods_description_text",
    "nodoi_text",
    "render_template",
    "workflow_fields",
]
