"""
pipeline-provenance — citation normalizer

File: src/pipeline_provenance/citations/normalizer.py
Last updated: 2026-10-16

Purpose
- Turn module metadata documents (``meta.yml``) and ``(module, tool, metadata)``
  topic tuples into ``CitationRecord`` results.

Formatting rules
- Citation text: ``<tool> (DOI: <doi>)``, else ``<tool> (<description>)``, else ``<tool>``.
- Bibliography: ``<li>`` + present clauses of author, year, title (defaults to
  the tool name), journal, ``doi: <doi>`` joined by ``". "``, followed by
  ``. <a href='<homepage>'><homepage></a>`` when a homepage exists.

Functional requirements
- Missing or malformed documents yield no records and never raise.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TypeAlias

from pipeline_provenance.domain.models import (
    CitationRecord,
    DescribedMetadata,
    Dropped,
    StructuredMetadata,
    ToolMetadata,
    tool_metadata_from_mapping,
)
from pipeline_provenance.domain.sources import (
    MalformedSource,
    MappingSource,
    Source,
    TextSource,
    TupleSource,
)
from pipeline_provenance.ingest.classifier import expand_sources
from pipeline_provenance.ingest.parsing import describe_item, parse_yaml_text
from pipeline_provenance.observability.logging import get_logger
from pipeline_provenance.utils.fs import FilesystemProvider, LocalFilesystem

CitationResult: TypeAlias = CitationRecord | Dropped

_UNKNOWN_MODULE = "UNKNOWN_MODULE"

_logger = get_logger(__name__)


def normalize_citation_sources(
    items: Iterable[object],
    *,
    fs: FilesystemProvider | None = None,
) -> list[CitationResult]:
    """Classify and normalize citation sources; results keep input order."""

    results: list[CitationResult] = []
    for source in expand_sources(items, fs=fs):
        results.extend(normalize_citation_source(source))
    return results


def normalize_citation_source(source: Source) -> list[CitationResult]:
    if isinstance(source, TupleSource):
        return [citation_from_topic(source.name, source.value)]
    if isinstance(source, MappingSource):
        return citations_from_document(source.entries, origin="<mapping>")
    if isinstance(source, TextSource):
        parsed = parse_yaml_text(source.text, origin=source.origin)
        if isinstance(parsed, Dropped):
            return [parsed]
        return citations_from_document(parsed.payload, origin=parsed.origin)
    if isinstance(source, MalformedSource):
        return [Dropped(reason=source.reason, item=source.item)]
    return [Dropped(reason=f"unexpected source variant {type(source).__name__}")]


def citations_from_document(document: object, *, origin: str) -> list[CitationResult]:
    """Records for every entry of a metadata document's ``tools`` list."""

    if not isinstance(document, Mapping):
        kind = type(document).__name__
        return [Dropped(reason=f"expected a metadata mapping, got {kind}", item=origin)]

    tools = document.get("tools")
    if tools is None or tools == "":
        return []
    if not isinstance(tools, Sequence) or isinstance(tools, (str, bytes)):
        return [Dropped(reason="'tools' must be a list of tool entries", item=origin)]

    results: list[CitationResult] = []
    for index, entry in enumerate(tools):
        if not isinstance(entry, Mapping):
            results.append(Dropped(reason=f"tools[{index}] is not a mapping", item=origin))
            continue
        for tool_name, info in entry.items():
            tool = _tool_name(tool_name)
            if tool is None:
                results.append(Dropped(reason=f"tools[{index}] has a blank name", item=origin))
                continue
            if isinstance(info, Mapping):
                results.append(citation_from_metadata(tool, tool_metadata_from_mapping(info)))
            else:
                results.append(CitationRecord(tool=tool, citation_text=tool))
    return results


def citation_from_topic(tool: str, value: object) -> CitationResult:
    """Record for the value slot of a ``(module, tool, metadata)`` tuple."""

    if isinstance(value, Mapping):
        return citation_from_metadata(tool, tool_metadata_from_mapping(value))
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        text = str(value).strip()
        if text:
            return CitationRecord(
                tool=tool, citation_text=text, bibliography_entry=f"<li>{text}</li>"
            )
    return Dropped(
        reason="citation value must be a metadata mapping or citation text",
        item=describe_item((tool, value)),
    )


def citation_from_metadata(tool: str, metadata: ToolMetadata) -> CitationRecord:
    return CitationRecord(
        tool=tool,
        citation_text=format_citation_text(tool, metadata),
        bibliography_entry=format_bibliography_entry(tool, metadata),
    )


def format_citation_text(tool: str, metadata: ToolMetadata) -> str:
    if isinstance(metadata, DescribedMetadata):
        return f"{tool} ({metadata.description})"
    if metadata.doi:
        return f"{tool} (DOI: {metadata.doi})"
    if metadata.description:
        return f"{tool} ({metadata.description})"
    return tool


def format_bibliography_entry(tool: str, metadata: ToolMetadata) -> str:
    if isinstance(metadata, DescribedMetadata):
        return f"<li>{tool}</li>"
    return f"<li>{_bibliography_body(tool, metadata)}</li>"


def _bibliography_body(tool: str, metadata: StructuredMetadata) -> str:
    clauses = [
        metadata.author,
        metadata.year,
        metadata.title or tool,
        metadata.journal,
        f"doi: {metadata.doi}" if metadata.doi else None,
    ]
    body = ". ".join(clause for clause in clauses if clause)
    if metadata.homepage:
        body += f". <a href='{metadata.homepage}'>{metadata.homepage}</a>"
    return body


def meta_yaml_to_topic(
    path: str | os.PathLike[str],
    *,
    module_name: str | None = None,
    fs: FilesystemProvider | None = None,
) -> list[tuple[str, str, Mapping[object, object]]]:
    """Convert a module ``meta.yml`` into ``(module, tool, metadata)`` tuples.

    The module name defaults to the parent directory, upper-cased
    (``modules/nf-core/fastqc/meta.yml`` -> ``FASTQC``). Unreadable or
    unparsable files yield an empty list.
    """

    filesystem = fs if fs is not None else LocalFilesystem()
    try:
        text = filesystem.read_text(path)
    except OSError as exc:
        _logger.warning("meta_yaml_unreadable", path=os.fspath(path), error=str(exc))
        return []

    parsed = parse_yaml_text(text, origin=os.fspath(path))
    if isinstance(parsed, Dropped) or not isinstance(parsed.payload, Mapping):
        _logger.warning("meta_yaml_unparsable", path=os.fspath(path))
        return []

    tools = parsed.payload.get("tools")
    if not isinstance(tools, list):
        return []

    module = module_name.strip() if module_name and module_name.strip() else None
    resolved_module = module or module_name_from_path(path)
    tuples: list[tuple[str, str, Mapping[object, object]]] = []
    for entry in tools:
        if not isinstance(entry, Mapping):
            continue
        for tool_name, info in entry.items():
            tool = _tool_name(tool_name)
            if tool is not None and isinstance(info, Mapping):
                tuples.append((resolved_module, tool, info))
    return tuples


def module_name_from_path(path: str | os.PathLike[str]) -> str:
    """Upper-cased name of the directory holding a ``meta.yml``."""

    parent = Path(os.fspath(path)).parent.name
    return parent.upper() if parent else _UNKNOWN_MODULE


def _tool_name(key: object) -> str | None:
    if key is None:
        return None
    text = str(key).strip()
    return text or None


__all__ = [
    "CitationResult",
    "citation_from_metadata",
    "citation_from_topic",
    "citations_from_document",
    "format_bibliography_entry",
    "format_citation_text",
    "meta_yaml_to_topic",
    "module_name_from_path",
    "normalize_citation_source",
    "normalize_citation_sources",
]
