"""Immutable fact records produced by the normalizers and consumed by the aggregators."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, NoReturn, TypeAlias, TypeVar

T = TypeVar("T")

_CITATION_FIELDS: Final[tuple[str, ...]] = (
    "doi",
    "homepage",
    "author",
    "year",
    "title",
    "journal",
)


def _fail(path: str, message: str) -> NoReturn:
    raise ValueError(f"{path}: {message}")


def _require_text(value: object, path: str, *, allow_empty: bool = False) -> str:
    if not isinstance(value, str):
        _fail(path, f"expected str, got {type(value).__name__}")
    if not allow_empty and not value.strip():
        _fail(path, "must not be empty")
    return value


@dataclass(frozen=True, slots=True)
class VersionRecord:
    """One ``(scope, tool) -> version`` fact."""

    scope: str
    tool: str
    version: str

    def __post_init__(self) -> None:
        _require_text(self.scope, "VersionRecord.scope")
        _require_text(self.tool, "VersionRecord.tool")
        _require_text(self.version, "VersionRecord.version", allow_empty=True)

    def key(self) -> tuple[str, str]:
        return (self.scope, self.tool)


@dataclass(frozen=True, slots=True)
class StructuredMetadata:
    """Bibliographic metadata for one tool; every field is optional."""

    doi: str | None = None
    homepage: str | None = None
    author: str | None = None
    year: str | None = None
    title: str | None = None
    journal: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class DescribedMetadata:
    """Metadata that carries only a free-text description."""

    description: str


ToolMetadata: TypeAlias = StructuredMetadata | DescribedMetadata


def tool_metadata_from_mapping(payload: Mapping[object, object]) -> ToolMetadata:
    """Build the matching :data:`ToolMetadata` variant from a ``meta.yml`` tool entry.

    Blank values count as absent. Keys outside the citation vocabulary
    (``licence``, ``documentation`` ...) are ignored.
    """

    values: dict[str, str | None] = {}
    for name in (*_CITATION_FIELDS, "description"):
        values[name] = _metadata_text(payload.get(name))

    description = values["description"]
    if description is not None and all(values[name] is None for name in _CITATION_FIELDS):
        return DescribedMetadata(description=description)
    return StructuredMetadata(**values)


def _metadata_text(value: object) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (list, tuple)):
        parts = [text for text in (_metadata_text(item) for item in value) if text]
        return ", ".join(parts) or None
    if isinstance(value, Mapping):
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True, slots=True)
class CitationRecord:
    """Citation sentence fragment and HTML bibliography entry for one tool."""

    tool: str
    citation_text: str
    bibliography_entry: str | None = None

    def __post_init__(self) -> None:
        _require_text(self.tool, "CitationRecord.tool")
        _require_text(self.citation_text, "CitationRecord.citation_text")
        if self.bibliography_entry is not None:
            _require_text(
                self.bibliography_entry, "CitationRecord.bibliography_entry", allow_empty=True
            )

    def has_bibliography(self) -> bool:
        return bool(self.bibliography_entry and self.bibliography_entry.strip())


@dataclass(frozen=True, slots=True)
class WorkflowInfo:
    """Pipeline and runtime identity folded into the version report."""

    pipeline_name: str
    pipeline_version: str
    runtime_version: str
    commit_id: str | None = None
    doi: str | None = None


@dataclass(frozen=True, slots=True)
class Dropped:
    """Explicit result for a source item that produced no record."""

    reason: str
    item: str = ""


class MergeOrder(StrEnum):
    """Order in which independent source lists are merged; the later list wins."""

    TOPIC_THEN_LEGACY = "topic-then-legacy"
    LEGACY_THEN_TOPIC = "legacy-then-topic"

    def arrange(self, topic: Iterable[T], legacy: Iterable[T]) -> list[T]:
        if self is MergeOrder.TOPIC_THEN_LEGACY:
            return [*topic, *legacy]
        return [*legacy, *topic]


__all__ = [
    "CitationRecord",
    "DescribedMetadata",
    "Dropped",
    "MergeOrder",
    "StructuredMetadata",
    "ToolMetadata",
    "VersionRecord",
    "WorkflowInfo",
    "tool_metadata_from_mapping",
]
