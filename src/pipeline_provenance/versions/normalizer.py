"""Convert classified version sources into ``VersionRecord`` results."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TypeAlias

from pipeline_provenance.constants import DEFAULT_SCOPE
from pipeline_provenance.domain.models import Dropped, VersionRecord
from pipeline_provenance.domain.sources import (
    MalformedSource,
    MappingSource,
    Source,
    TextSource,
    TupleSource,
)
from pipeline_provenance.ingest.classifier import expand_sources
from pipeline_provenance.ingest.parsing import (
    ParsedDocument,
    describe_item,
    last_key_segment,
    parse_yaml_text,
)
from pipeline_provenance.observability.logging import get_logger
from pipeline_provenance.utils.fs import FilesystemProvider

VersionResult: TypeAlias = VersionRecord | Dropped

_logger = get_logger(__name__)


def normalize_version_sources(
    items: Iterable[object],
    *,
    default_scope: str = DEFAULT_SCOPE,
    fs: FilesystemProvider | None = None,
) -> list[VersionResult]:
    """Classify and normalize every item; results keep input order."""

    results: list[VersionResult] = []
    for source in expand_sources(items, fs=fs):
        results.extend(normalize_version_source(source, default_scope=default_scope))
    return results


def normalize_version_source(
    source: Source,
    *,
    default_scope: str = DEFAULT_SCOPE,
) -> list[VersionResult]:
    """Normalize one already expanded source into zero or more results."""

    if isinstance(source, TupleSource):
        return [_from_tuple(source)]
    if isinstance(source, MappingSource):
        return list(_from_document(source.entries, default_scope, origin="<mapping>"))
    if isinstance(source, TextSource):
        parsed = parse_yaml_text(source.text, origin=source.origin)
        if isinstance(parsed, Dropped):
            return [parsed]
        return _from_parsed(parsed, default_scope)
    if isinstance(source, MalformedSource):
        return [Dropped(reason=source.reason, item=source.item)]
    return [Dropped(reason=f"unexpected source variant {type(source).__name__}")]


def legacy_yaml_to_topic(
    text: str,
    *,
    scope: str = DEFAULT_SCOPE,
) -> list[tuple[str, str, str]]:
    """Convert a legacy ``versions.yml`` document into ``(scope, tool, version)`` tuples.

    Flat documents take ``scope``; two-level documents keep their own outer keys.
    Unparsable text yields an empty list.
    """

    parsed = parse_yaml_text(text)
    if isinstance(parsed, Dropped):
        return []
    return [
        (record.scope, record.tool, record.version)
        for record in _from_parsed(parsed, scope)
        if isinstance(record, VersionRecord)
    ]


def _from_tuple(source: TupleSource) -> VersionResult:
    if not _is_version_scalar(source.value):
        return Dropped(
            reason="version tuple value must be a scalar",
            item=describe_item((source.scope, source.name, source.value)),
        )
    scope = last_key_segment(source.scope)
    return VersionRecord(scope=scope, tool=source.name, version=_version_text(source.value))


def _from_parsed(parsed: ParsedDocument, default_scope: str) -> list[VersionResult]:
    if not isinstance(parsed.payload, Mapping):
        kind = type(parsed.payload).__name__
        return [Dropped(reason=f"expected a YAML mapping, got {kind}", item=parsed.origin)]
    return list(_from_document(parsed.payload, default_scope, origin=parsed.origin))


def _from_document(
    document: Mapping[object, object],
    default_scope: str,
    *,
    origin: str,
) -> Iterator[VersionResult]:
    """Yield records for a flat, two-level, or mixed ``versions.yml`` mapping."""

    for key, value in document.items():
        if key is None or not str(key).strip():
            yield Dropped(reason="blank key", item=origin)
            continue
        if isinstance(value, Mapping):
            scope = last_key_segment(key)
            for tool_key, version in value.items():
                yield _leaf_record(scope, tool_key, version, origin=origin)
            continue
        yield _leaf_record(default_scope, key, value, origin=origin)


def _leaf_record(scope: str, tool_key: object, version: object, *, origin: str) -> VersionResult:
    if tool_key is None or not str(tool_key).strip():
        return Dropped(reason="blank tool name", item=origin)
    if not _is_version_scalar(version):
        _logger.debug("version_value_not_scalar", origin=origin, tool=str(tool_key))
        return Dropped(
            reason=f"version for {tool_key!s} is a {type(version).__name__}, not a scalar",
            item=origin,
        )
    return VersionRecord(
        scope=scope,
        tool=last_key_segment(tool_key),
        version=_version_text(version),
    )


def _is_version_scalar(value: object) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _version_text(value: object) -> str:
    return str(value).strip()


__all__ = [
    "VersionResult",
    "legacy_yaml_to_topic",
    "normalize_version_source",
    "normalize_version_sources",
]
