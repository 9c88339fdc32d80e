"""Version normalization, aggregation, and YAML rendering."""

from pipeline_provenance.versions.aggregator import VersionTable, aggregate_versions
from pipeline_provenance.versions.normalizer import (
    VersionResult,
    legacy_yaml_to_topic,
    normalize_version_source,
    normalize_version_sources,
)
from pipeline_provenance.versions.report import (
    build_version_table,
    combine_version_sources,
    software_versions_to_yaml,
)
from pipeline_provenance.versions.serializer import render_versions_yaml

__all__ = [
    "VersionResult",
    "VersionTable",
    "aggregate_versions",
    "build_version_table",
    "combine_version_sources",
    "legacy_yaml_to_topic",
    "normalize_version_source",
    "normalize_version_sources",
    "render_versions_yaml",
    "software_versions_to_yaml",
]
