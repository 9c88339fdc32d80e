"""Workflow metadata adapter public API."""

from pipeline_provenance.workflow.metadata import (
    StaticWorkflowMetadata,
    WorkflowMetadataProvider,
    format_workflow_version,
    resolve_workflow_info,
)

__all__ = [
    "StaticWorkflowMetadata",
    "WorkflowMetadataProvider",
    "format_workflow_version",
    "resolve_workflow_info",
]
