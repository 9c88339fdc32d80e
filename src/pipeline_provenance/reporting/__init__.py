"""Reporting facade combining the version and citation pipelines."""

from pipeline_provenance.reporting.orchestrator import ReportBundle, ReportingOrchestrator

__all__ = ["ReportBundle", "ReportingOrchestrator"]
