"""
pipeline-provenance — source classifier

File: src/pipeline_provenance/ingest/classifier.py
Last updated: 2026-10-16

Purpose
- Tag one arbitrary input item with the shape it has, so that normalizers
  dispatch on a closed set of variants instead of inspecting raw values.

Classification order
1. Non-string sequence wrapping further source items -> NestedSource (one level).
2. Sequence of exactly three elements (scalar, scalar, non-null) -> TupleSource.
3. Any other sequence -> MalformedSource.
4. Mapping -> MappingSource.
5. Path object, file handle, or single-line string naming an existing file -> FileRefSource.
6. Other text -> TextSource.
7. ``None`` or blank text -> IgnoredSource.
Anything else is MalformedSource.

Functional requirements
- Never raise for content problems; malformed items are tagged, not rejected.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from pipeline_provenance.domain.sources import (
    FileRefSource,
    IgnoredSource,
    MalformedSource,
    MappingSource,
    NestedSource,
    Source,
    TextSource,
    TupleSource,
)
from pipeline_provenance.ingest.parsing import describe_item
from pipeline_provenance.observability.logging import get_logger
from pipeline_provenance.utils.fs import FilesystemProvider, LocalFilesystem

_TUPLE_ARITY = 3

_logger = get_logger(__name__)


def classify_source(
    item: object,
    *,
    fs: FilesystemProvider | None = None,
    allow_nested: bool = True,
) -> Source:
    """Return the tagged variant for ``item``."""

    filesystem = fs if fs is not None else LocalFilesystem()

    if item is None:
        return IgnoredSource()
    if isinstance(item, (bytes, bytearray)):
        try:
            item = bytes(item).decode("utf-8")
        except UnicodeDecodeError:
            return MalformedSource(reason="bytes are not valid UTF-8", item=describe_item(item))
    if isinstance(item, str):
        return _classify_text(item, filesystem)
    if isinstance(item, os.PathLike):
        return FileRefSource(path=Path(item))
    if _is_handle(item):
        return FileRefSource(handle=item)  # type: ignore[arg-type]
    if isinstance(item, Mapping):
        return MappingSource(entries=item)
    if _is_sequence(item):
        return _classify_sequence(item, filesystem, allow_nested=allow_nested)
    return MalformedSource(
        reason=f"unsupported item type {type(item).__name__}", item=describe_item(item)
    )


def classify_text_content(text: str, *, origin: str) -> Source:
    """Classify text read from a file; it is never re-interpreted as a path."""

    if not text.strip():
        return IgnoredSource()
    return TextSource(text=text, origin=origin)


def expand_sources(
    items: Iterable[object],
    *,
    fs: FilesystemProvider | None = None,
) -> list[Source]:
    """Classify ``items``, flatten nesting, and resolve file references to text.

    The result contains only ``TextSource``, ``TupleSource``, ``MappingSource``
    and ``MalformedSource`` entries, in input order. Ignored items are omitted.
    """

    filesystem = fs if fs is not None else LocalFilesystem()
    expanded: list[Source] = []
    for item in items:
        _append_resolved(expanded, classify_source(item, fs=filesystem), filesystem)
    return expanded


def resolve_file_ref(source: FileRefSource, fs: FilesystemProvider) -> Source:
    """Read a file reference; read failures downgrade to ``MalformedSource``."""

    origin = source.origin
    try:
        if source.handle is not None:
            raw = source.handle.read()
        elif source.path is not None:
            raw = fs.read_text(source.path)
        else:
            return MalformedSource(reason="file reference without path or handle")
    except (OSError, ValueError) as exc:
        _logger.debug("file_ref_unreadable", origin=origin, error=str(exc))
        return MalformedSource(reason=f"unreadable file ({exc.__class__.__name__})", item=origin)

    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return MalformedSource(reason="file content is not valid UTF-8", item=origin)
    if not isinstance(raw, str):
        return MalformedSource(reason="file handle returned non-text content", item=origin)
    return classify_text_content(raw, origin=origin)


def require_source_list(value: object, name: str) -> list[object]:
    """Reject containers that are not a list-like sequence of items."""

    if value is None:
        raise TypeError(f"{name} must be a sequence of source items, not None")
    if isinstance(value, (str, bytes, bytearray, Mapping)) or not isinstance(value, Sequence):
        raise TypeError(f"{name} must be a sequence of source items, got {type(value).__name__}")
    return list(value)


def _append_resolved(target: list[Source], source: Source, fs: FilesystemProvider) -> None:
    if isinstance(source, IgnoredSource):
        return
    if isinstance(source, NestedSource):
        for inner in source.items:
            _append_resolved(target, inner, fs)
        return
    if isinstance(source, FileRefSource):
        _append_resolved(target, resolve_file_ref(source, fs), fs)
        return
    target.append(source)


def _classify_text(text: str, fs: FilesystemProvider) -> Source:
    if not text.strip():
        return IgnoredSource()
    candidate = text.strip()
    if "\n" not in candidate and fs.is_file(candidate):
        return FileRefSource(path=Path(candidate))
    return TextSource(text=text)


def _classify_sequence(
    item: Sequence[object],
    fs: FilesystemProvider,
    *,
    allow_nested: bool,
) -> Source:
    if _wraps_sources(item):
        if not allow_nested:
            return MalformedSource(
                reason="nested more than one level deep", item=describe_item(item)
            )
        return NestedSource(
            items=tuple(classify_source(inner, fs=fs, allow_nested=False) for inner in item)
        )

    if len(item) != _TUPLE_ARITY:
        return MalformedSource(
            reason=f"expected {_TUPLE_ARITY}-element tuple, got {len(item)} element(s)",
            item=describe_item(item),
        )

    scope, name, value = item
    if not _is_scalar(scope) or not _is_scalar(name) or value is None:
        return MalformedSource(
            reason="tuple needs non-null scalar scope and name and a non-null value",
            item=describe_item(item),
        )
    scope_text = str(scope).strip()
    name_text = str(name).strip()
    if not scope_text or not name_text:
        return MalformedSource(
            reason="tuple scope and name must not be blank", item=describe_item(item)
        )
    return TupleSource(scope=scope_text, name=name_text, value=value)


def _wraps_sources(item: Sequence[object]) -> bool:
    """Whether ``item`` is a collection of further source items rather than a tuple."""

    if any(
        _is_sequence(inner) or isinstance(inner, os.PathLike) or _is_handle(inner)
        for inner in item
    ):
        return True
    mapping_positions = [index for index, inner in enumerate(item) if isinstance(inner, Mapping)]
    if not mapping_positions:
        return False
    # (scope, tool, metadata) keeps its mapping in the value slot.
    return not (len(item) == _TUPLE_ARITY and mapping_positions == [_TUPLE_ARITY - 1])


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _is_scalar(value: object) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _is_handle(value: object) -> bool:
    return callable(getattr(value, "read", None)) and not isinstance(value, (str, bytes))


__all__ = [
    "classify_source",
    "classify_text_content",
    "expand_sources",
    "require_source_list",
    "resolve_file_ref",
]
