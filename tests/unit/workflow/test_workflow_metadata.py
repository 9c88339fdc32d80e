"""Unit tests for workflow metadata resolution and version formatting."""

from __future__ import annotations

import pytest

from pipeline_provenance.domain.models import WorkflowInfo
from pipeline_provenance.workflow import (
    StaticWorkflowMetadata,
    WorkflowMetadataProvider,
    format_workflow_version,
    resolve_workflow_info,
)


class _MinimalProvider:
    """Implements only the required provider methods."""

    def pipeline_name(self) -> str:
        return "  "

    def pipeline_version(self) -> str | None:
        return None

    def runtime_version_config(self) -> str | None:
        return None


@pytest.mark.parametrize(
    ("version", "commit", "expected"),
    [
        ("1.2.0", None, "v1.2.0"),
        ("v1.2.0", None, "v1.2.0"),
        ("1.2.0dev", "0123456789abcdef", "v1.2.0dev-g0123456"),
        (None, "abc", "-gabc"),
        (None, None, ""),
    ],
)
def test_format_workflow_version(version: str | None, commit: str | None, expected: str) -> None:
    assert format_workflow_version(version, commit) == expected


def test_minimal_provider_falls_back_to_unknowns() -> None:
    provider = _MinimalProvider()
    assert isinstance(provider, WorkflowMetadataProvider)

    info = resolve_workflow_info(provider, environ={})

    assert info == WorkflowInfo(
        pipeline_name="unknown", pipeline_version="", runtime_version="unknown"
    )


def test_runtime_version_precedence() -> None:
    provider = StaticWorkflowMetadata(name="demo", runtime_version="24.04.0")
    env = {"NXF_VER": "23.04.0", "CUSTOM_VER": "22.10.0"}

    assert resolve_workflow_info(provider, environ=env).runtime_version == "24.04.0"
    assert (
        resolve_workflow_info(provider, runtime_version="25.0", environ=env).runtime_version
        == "25.0"
    )
    bare = StaticWorkflowMetadata(name="demo")
    assert resolve_workflow_info(bare, environ=env).runtime_version == "23.04.0"
    assert (
        resolve_workflow_info(bare, environ=env, runtime_version_env="CUSTOM_VER").runtime_version
        == "22.10.0"
    )


def test_static_metadata_from_manifest_shaped_mapping() -> None:
    provider = StaticWorkflowMetadata.from_mapping(
        {
            "manifest": {"name": "nf-core/sarek", "version": "3.4.0", "doi": "10.1/sarek"},
            "nextflow": {"version": "23.10.1"},
            "commitId": "feedfacecafe",
        }
    )

    info = resolve_workflow_info(provider, environ={})

    assert info.pipeline_name == "nf-core/sarek"
    assert info.pipeline_version == "3.4.0"
    assert info.runtime_version == "23.10.1"
    assert info.commit_id == "feedfacecafe"
    assert info.doi == "10.1/sarek"


def test_static_metadata_from_flat_mapping() -> None:
    provider = StaticWorkflowMetadata.from_mapping(
        {"name": "demo", "version": "", "commit_id": None, "runtime_version": "24.10.0"}
    )
    assert provider.pipeline_name() == "demo"
    assert provider.pipeline_version() is None
    assert provider.commit_id() is None
    assert provider.runtime_version_config() == "24.10.0"
