"""Domain records and source variants."""

from pipeline_provenance.domain.models import (
    CitationRecord,
    DescribedMetadata,
    Dropped,
    MergeOrder,
    StructuredMetadata,
    ToolMetadata,
    VersionRecord,
    WorkflowInfo,
    tool_metadata_from_mapping,
)
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

__all__ = [
    "CitationRecord",
    "DescribedMetadata",
    "Dropped",
    "FileRefSource",
    "IgnoredSource",
    "MalformedSource",
    "MappingSource",
    "MergeOrder",
    "NestedSource",
    "Source",
    "StructuredMetadata",
    "TextSource",
    "ToolMetadata",
    "TupleSource",
    "VersionRecord",
    "WorkflowInfo",
    "tool_metadata_from_mapping",
]
