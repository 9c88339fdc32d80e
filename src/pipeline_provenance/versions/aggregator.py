"""Canonical ``scope -> tool -> version`` table built from normalized results."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from pipeline_provenance.constants import RUNTIME_NAME, WORKFLOW_SCOPE
from pipeline_provenance.domain.models import Dropped, VersionRecord, WorkflowInfo
from pipeline_provenance.observability.logging import get_logger
from pipeline_provenance.workflow.metadata import format_workflow_version

_logger = get_logger(__name__)


class VersionTable:
    """Last-write-wins table of version facts.

    Insertion order is kept only for bookkeeping; rendering always sorts.
    """

    __slots__ = ("_dropped", "_entries")

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, str]] = {}
        self._dropped: list[Dropped] = []

    def add(self, record: VersionRecord) -> None:
        tools = self._entries.setdefault(record.scope, {})
        previous = tools.get(record.tool)
        if previous is not None and previous != record.version:
            _logger.debug(
                "version_overwritten",
                scope=record.scope,
                tool=record.tool,
                previous=previous,
                version=record.version,
            )
        tools[record.tool] = record.version

    def extend(self, results: Iterable[VersionRecord | Dropped]) -> None:
        for result in results:
            if isinstance(result, Dropped):
                _logger.debug("version_source_dropped", reason=result.reason, item=result.item)
                self._dropped.append(result)
                continue
            self.add(result)

    def add_workflow(
        self,
        info: WorkflowInfo,
        *,
        scope: str = WORKFLOW_SCOPE,
        runtime_name: str = RUNTIME_NAME,
    ) -> None:
        """Write the workflow pseudo-scope; it overrides earlier entries of that scope."""

        self.add(
            VersionRecord(
                scope=scope,
                tool=info.pipeline_name,
                version=format_workflow_version(info.pipeline_version, info.commit_id),
            )
        )
        self.add(VersionRecord(scope=scope, tool=runtime_name, version=info.runtime_version))

    @property
    def dropped(self) -> tuple[Dropped, ...]:
        return tuple(self._dropped)

    def is_empty(self) -> bool:
        return not any(self._entries.values())

    def __len__(self) -> int:
        return sum(len(tools) for tools in self._entries.values())

    def __iter__(self) -> Iterator[VersionRecord]:
        return iter(self.records())

    def records(self) -> tuple[VersionRecord, ...]:
        """All records ordered by scope, then tool."""

        return tuple(
            VersionRecord(scope=scope, tool=tool, version=version)
            for scope, tools in self.sorted_entries().items()
            for tool, version in tools.items()
        )

    def sorted_entries(self) -> dict[str, dict[str, str]]:
        """Nested copy with scopes and tools in ascending lexicographic order."""

        return {
            scope: {tool: self._entries[scope][tool] for tool in sorted(self._entries[scope])}
            for scope in sorted(self._entries)
            if self._entries[scope]
        }


def aggregate_versions(
    results: Iterable[VersionRecord | Dropped],
    *,
    workflow: WorkflowInfo | None = None,
    workflow_scope: str = WORKFLOW_SCOPE,
    runtime_name: str = RUNTIME_NAME,
) -> VersionTable:
    """Fold ``results`` in order, then inject ``workflow`` when given."""

    table = VersionTable()
    table.extend(results)
    if workflow is not None:
        table.add_workflow(workflow, scope=workflow_scope, runtime_name=runtime_name)
    return table


__all__ = ["VersionTable", "aggregate_versions"]
