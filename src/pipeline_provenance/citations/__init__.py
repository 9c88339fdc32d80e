"""Citation normalization, aggregation, and methods-description rendering."""

from pipeline_provenance.citations.aggregator import (
    CitationTable,
    aggregate_citations,
    tool_bibliography_text,
    tool_citation_text,
)
from pipeline_provenance.citations.methods import (
    doi_text,
    methods_description_text,
    nodoi_text,
    render_template,
)
from pipeline_provenance.citations.normalizer import (
    CitationResult,
    format_bibliography_entry,
    format_citation_text,
    meta_yaml_to_topic,
    module_name_from_path,
    normalize_citation_source,
    normalize_citation_sources,
)

__all__ = [
    "CitationResult",
    "CitationTable",
    "aggregate_citations",
    "doi_text",
    "format_bibliography_entry",
    "format_citation_text",
    "meta_yaml_to_topic",
    "methods_description_text",
    "module_name_from_path",
    "nodoi_text",
    "normalize_citation_source",
    "normalize_citation_sources",
    "render_template",
    "tool_bibliography_text",
    "tool_citation_text",
]
