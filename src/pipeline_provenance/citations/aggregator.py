"""Ordered ``tool -> CitationRecord`` table and its two text renderings."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pipeline_provenance.constants import (
    CITATION_TEXT_PREFIX,
    NO_BIBLIOGRAPHY_TEXT,
    NO_TOOLS_TEXT,
)
from pipeline_provenance.domain.models import CitationRecord, Dropped
from pipeline_provenance.observability.logging import get_logger

_logger = get_logger(__name__)


class CitationTable:
    """Citations keyed by tool name.

    A tool keeps the position of its first insertion; a later record for the
    same tool replaces the stored value in place.
    """

    __slots__ = ("_dropped", "_records")

    def __init__(self) -> None:
        self._records: dict[str, CitationRecord] = {}
        self._dropped: list[Dropped] = []

    def add(self, record: CitationRecord) -> None:
        if record.tool in self._records:
            _logger.debug("citation_replaced", tool=record.tool)
        self._records[record.tool] = record

    def extend(self, results: Iterable[CitationRecord | Dropped]) -> None:
        for result in results:
            if isinstance(result, Dropped):
                _logger.debug("citation_source_dropped", reason=result.reason, item=result.item)
                self._dropped.append(result)
                continue
            self.add(result)

    @property
    def dropped(self) -> tuple[Dropped, ...]:
        return tuple(self._dropped)

    def records(self) -> tuple[CitationRecord, ...]:
        return tuple(self._records.values())

    def get(self, tool: str) -> CitationRecord | None:
        return self._records.get(tool)

    def __contains__(self, tool: object) -> bool:
        return tool in self._records

    def __iter__(self) -> Iterator[CitationRecord]:
        return iter(self.records())

    def __len__(self) -> int:
        return len(self._records)


def aggregate_citations(results: Iterable[CitationRecord | Dropped]) -> CitationTable:
    table = CitationTable()
    table.extend(results)
    return table


def tool_citation_text(citations: CitationTable | Iterable[CitationRecord]) -> str:
    """One sentence listing every citation in table order."""

    records = _records_of(citations)
    if not records:
        return NO_TOOLS_TEXT
    return CITATION_TEXT_PREFIX + ", ".join(record.citation_text for record in records) + "."


def tool_bibliography_text(citations: CitationTable | Iterable[CitationRecord]) -> str:
    """Non-blank ``<li>`` entries joined by a single space."""

    entries = [
        record.bibliography_entry
        for record in _records_of(citations)
        if record.has_bibliography()
    ]
    if not entries:
        return NO_BIBLIOGRAPHY_TEXT
    return " ".join(entries)  # type: ignore[arg-type]


def _records_of(citations: CitationTable | Iterable[CitationRecord]) -> tuple[CitationRecord, ...]:
    if isinstance(citations, CitationTable):
        return citations.records()
    # Plain iterables still collapse duplicate tools the same way a table does.
    table = CitationTable()
    for record in citations:
        table.add(record)
    return table.records()


__all__ = [
    "CitationTable",
    "aggregate_citations",
    "tool_bibliography_text",
    "tool_citation_text",
]
