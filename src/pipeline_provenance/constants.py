"""Stable constants shared across the normalizers, aggregators, and serializers."""

from __future__ import annotations

from typing import Final

# Reserved scope names.
DEFAULT_SCOPE: Final[str] = "Software"
WORKFLOW_SCOPE: Final[str] = "Workflow"

# Runtime identity used for the workflow pseudo-scope.
RUNTIME_NAME: Final[str] = "Nextflow"
RUNTIME_VERSION_ENV: Final[str] = "NXF_VER"
UNKNOWN_VERSION: Final[str] = "unknown"
UNKNOWN_PIPELINE: Final[str] = "unknown"

# Empty-case report strings.
NO_TOOLS_TEXT: Final[str] = "No tools used in the workflow."
NO_BIBLIOGRAPHY_TEXT: Final[str] = "No bibliography entries found."
CITATION_TEXT_PREFIX: Final[str] = "Tools used in the workflow included: "
NODOI_REMINDER: Final[str] = (
    "<li>If available, make sure to update the text to include the Zenodo DOI of "
    "version of the pipeline used. </li>"
)
DOI_URL_PREFIX: Final[str] = "https://doi.org/"

# Commit suffix length for workflow version strings (git short sha).
COMMIT_SHORT_LENGTH: Final[int] = 7

# Default output file names written by the CLI.
VERSIONS_FILENAME: Final[str] = "software_versions.yml"
CITATIONS_FILENAME: Final[str] = "tool_citations.txt"
BIBLIOGRAPHY_FILENAME: Final[str] = "tool_bibliography.html"
METHODS_FILENAME: Final[str] = "methods_description.html"

__all__ = [
    "BIBLIOGRAPHY_FILENAME",
    "CITATIONS_FILENAME",
    "CITATION_TEXT_PREFIX",
    "COMMIT_SHORT_LENGTH",
    "DEFAULT_SCOPE",
    "DOI_URL_PREFIX",
    "METHODS_FILENAME",
    "NODOI_REMINDER",
    "NO_BIBLIOGRAPHY_TEXT",
    "NO_TOOLS_TEXT",
    "RUNTIME_NAME",
    "RUNTIME_VERSION_ENV",
    "UNKNOWN_PIPELINE",
    "UNKNOWN_VERSION",
    "VERSIONS_FILENAME",
    "WORKFLOW_SCOPE",
]
