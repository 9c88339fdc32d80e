"""
pipeline-provenance — reporting orchestrator

File: src/pipeline_provenance/reporting/orchestrator.py
Last updated: 2026-10-16

Purpose
- Facade that runs classification, normalization, aggregation, and rendering
  for both the version and the citation side and returns one composite bundle.

Functional requirements
- Missing or malformed optional inputs degrade to the documented empty-case
  strings; only caller misuse (a required container that is ``None``, a string,
  or not a sequence) raises ``TypeError``.
- Identical inputs and metadata snapshot produce byte-identical bundles.

Non-functional requirements
- Performs no writes; the caller decides where artifacts go.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Final

from pipeline_provenance.citations.aggregator import (
    CitationTable,
    aggregate_citations,
    tool_bibliography_text,
    tool_citation_text,
)
from pipeline_provenance.citations.methods import methods_description_text
from pipeline_provenance.citations.normalizer import normalize_citation_sources
from pipeline_provenance.config.schema import ReportSettings
from pipeline_provenance.constants import (
    BIBLIOGRAPHY_FILENAME,
    CITATIONS_FILENAME,
    METHODS_FILENAME,
    VERSIONS_FILENAME,
)
from pipeline_provenance.domain.models import CitationRecord, Dropped
from pipeline_provenance.ingest.classifier import require_source_list
from pipeline_provenance.observability.logging import get_logger
from pipeline_provenance.utils.fs import FilesystemProvider, LocalFilesystem
from pipeline_provenance.utils.hashing import sha256_parts
from pipeline_provenance.versions.report import build_version_table, combine_version_sources
from pipeline_provenance.versions.serializer import render_versions_yaml
from pipeline_provenance.workflow.metadata import WorkflowMetadataProvider

_logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ReportBundle:
    """The four report artifacts plus the citation records behind them."""

    versions_yaml: str = ""
    tool_citations: str = ""
    tool_bibliography: str = ""
    methods_description: str = ""
    citations: tuple[CitationRecord, ...] = ()
    dropped: tuple[Dropped, ...] = ()

    def artifacts(self) -> tuple[tuple[str, str], ...]:
        """``(file name, file text)`` pairs in a fixed order.

        File text is the artifact plus a trailing newline, or ``""`` for an
        empty artifact; it is exactly what a caller should write to disk.
        """

        return tuple(
            (name, f"{content}\n" if content else "")
            for name, content in (
                (VERSIONS_FILENAME, self.versions_yaml),
                (CITATIONS_FILENAME, self.tool_citations),
                (BIBLIOGRAPHY_FILENAME, self.tool_bibliography),
                (METHODS_FILENAME, self.methods_description),
            )
        )

    def digest(self) -> str:
        """SHA-256 over the four file texts from :meth:`artifacts`."""

        return sha256_parts(self.artifacts())


class ReportingOrchestrator:
    """Build version and citation reports from already-collected sources."""

    def __init__(
        self,
        *,
        settings: ReportSettings | None = None,
        fs: FilesystemProvider | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._settings = settings if settings is not None else ReportSettings()
        self._fs = fs if fs is not None else LocalFilesystem()
        self._environ = environ

    @property
    def settings(self) -> ReportSettings:
        return self._settings

    def generate_comprehensive_report(
        self,
        version_sources: Sequence[object],
        citation_sources: Sequence[object] | None = (),
        methods_template: str | os.PathLike[str] | None = None,
        provider: WorkflowMetadataProvider | None = None,
        *,
        legacy_versions: Sequence[object] | None = None,
        runtime_version: str | None = None,
        extra_fields: Mapping[str, object] | None = None,
    ) -> ReportBundle:
        """Versions, citation sentence, bibliography, and methods description."""

        versions = self.generate_version_report(
            version_sources,
            provider,
            legacy_versions=legacy_versions,
            runtime_version=runtime_version,
        )
        citations = self.generate_citation_report(
            citation_sources,
            methods_template,
            provider,
            runtime_version=runtime_version,
            extra_fields=extra_fields,
        )
        bundle = ReportBundle(
            versions_yaml=versions.versions_yaml,
            tool_citations=citations.tool_citations,
            tool_bibliography=citations.tool_bibliography,
            methods_description=citations.methods_description,
            citations=citations.citations,
            dropped=versions.dropped + citations.dropped,
        )
        _logger.info(
            "report_generated",
            citations=len(bundle.citations),
            dropped=len(bundle.dropped),
            digest=bundle.digest(),
        )
        return bundle

    def generate_version_report(
        self,
        version_sources: Sequence[object],
        provider: WorkflowMetadataProvider | None = None,
        *,
        legacy_versions: Sequence[object] | None = None,
        runtime_version: str | None = None,
    ) -> ReportBundle:
        """Bundle holding only ``versions_yaml``."""

        sources = combine_version_sources(
            require_source_list(version_sources, "version_sources"),
            legacy_versions,
            merge_order=self._settings.merge_order,
        )
        table = build_version_table(
            sources,
            provider=provider,
            runtime_version=runtime_version or self._settings.runtime_version,
            default_scope=self._settings.default_scope,
            workflow_scope=self._settings.workflow_scope,
            runtime_name=self._settings.runtime_name,
            runtime_version_env=self._settings.runtime_version_env,
            environ=self._environ,
            fs=self._fs,
        )
        return ReportBundle(versions_yaml=render_versions_yaml(table), dropped=table.dropped)

    def generate_citation_report(
        self,
        citation_sources: Sequence[object] | None = (),
        methods_template: str | os.PathLike[str] | None = None,
        provider: WorkflowMetadataProvider | None = None,
        *,
        runtime_version: str | None = None,
        extra_fields: Mapping[str, object] | None = None,
    ) -> ReportBundle:
        """Bundle holding the citation sentence, bibliography, and methods text."""

        sources = (
            [] if citation_sources is None
            else require_source_list(citation_sources, "citation_sources")
        )
        table: CitationTable = aggregate_citations(
            normalize_citation_sources(sources, fs=self._fs)
        )
        template = self._load_template(methods_template)
        methods = ""
        if template is not None:
            methods = methods_description_text(
                template,
                table,
                provider=provider,
                extra_fields=extra_fields,
                runtime_version=runtime_version or self._settings.runtime_version,
                environ=self._environ,
                runtime_version_env=self._settings.runtime_version_env,
            )
        return ReportBundle(
            tool_citations=tool_citation_text(table),
            tool_bibliography=tool_bibliography_text(table),
            methods_description=methods,
            citations=table.records(),
            dropped=table.dropped,
        )

    def _load_template(self, template: str | os.PathLike[str] | None) -> str | None:
        """Template text, read from disk when given a path; ``None`` when unavailable.

        A ``str`` is a path when it names an existing file or is shaped like one
        (a single token with a separator or a template suffix); otherwise it is
        the template text itself.
        """

        if template is None:
            return None
        if isinstance(template, str) and not _names_path(template, self._fs):
            return template
        if not isinstance(template, (str, os.PathLike)):
            raise TypeError(
                f"methods_template must be str or path-like, got {type(template).__name__}"
            )
        path = template.strip() if isinstance(template, str) else template
        try:
            return self._fs.read_text(path)
        except OSError as exc:
            _logger.warning("methods_template_unreadable", path=os.fspath(path), error=str(exc))
            return None


_TEMPLATE_SUFFIXES: Final[tuple[str, ...]] = (".html", ".htm", ".txt", ".yml", ".yaml")


def _names_path(text: str, fs: FilesystemProvider) -> bool:
    stripped = text.strip()
    if not stripped or "\n" in stripped:
        return False
    if fs.is_file(stripped):
        return True
    if any(char.isspace() for char in stripped) or "<" in stripped or "${" in stripped:
        return False
    has_separator = "/" in stripped or os.sep in stripped
    return has_separator or stripped.lower().endswith(_TEMPLATE_SUFFIXES)


__all__ = ["ReportBundle", "ReportingOrchestrator"]
