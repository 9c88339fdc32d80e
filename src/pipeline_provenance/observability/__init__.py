"""Public observability primitives: structured logging setup."""

from pipeline_provenance.observability.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
