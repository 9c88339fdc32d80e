"""
pipeline-provenance config package public API.

File: src/pipeline_provenance/config/__init__.py
Last updated: 2026-10-16

Purpose
- Export config loading/validation entrypoints and public error types.

Functional requirements
- Support loading from ``provenance.toml`` + ``PROVENANCE_`` env overrides.
- Fail fast with clear structured validation/load errors.
"""

from pipeline_provenance.config.loader import (
    DEFAULT_CONFIG_FILE,
    ENV_PREFIX,
    ConfigLoadError,
    dump_effective_config,
    load_config,
)
from pipeline_provenance.config.schema import (
    DEFAULT_CONFIG,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    ProvenanceConfig,
    ReportSettings,
    assert_valid_config,
    default_config,
    merge_config,
    validate_config,
    workflow_metadata_from_config,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "ProvenanceConfig",
    "ReportSettings",
    "assert_valid_config",
    "default_config",
    "dump_effective_config",
    "load_config",
    "merge_config",
    "validate_config",
    "workflow_metadata_from_config",
]
