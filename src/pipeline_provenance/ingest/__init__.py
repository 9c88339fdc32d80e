"""Input classification and YAML parsing shared by the normalizers."""

from pipeline_provenance.ingest.classifier import (
    classify_source,
    expand_sources,
    require_source_list,
    resolve_file_ref,
)
from pipeline_provenance.ingest.parsing import ParsedDocument, last_key_segment, parse_yaml_text

__all__ = [
    "ParsedDocument",
    "classify_source",
    "expand_sources",
    "last_key_segment",
    "parse_yaml_text",
    "require_source_list",
    "resolve_file_ref",
]
