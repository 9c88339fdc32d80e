"""
pipeline-provenance — unit tests for domain records

File: tests/unit/domain/test_records.py
Last updated: 2026-10-16

Purpose
- Validate record construction rules, metadata variant selection, and merge ordering.
"""

from __future__ import annotations

import pytest

from pipeline_provenance.domain import (
    CitationRecord,
    DescribedMetadata,
    MergeOrder,
    StructuredMetadata,
    VersionRecord,
    tool_metadata_from_mapping,
)


def test_version_record_rejects_blank_scope_and_tool() -> None:
    with pytest.raises(ValueError, match="VersionRecord.scope"):
        VersionRecord(scope="  ", tool="fastqc", version="0.12.1")
    with pytest.raises(ValueError, match="VersionRecord.tool"):
        VersionRecord(scope="FASTQC", tool="", version="0.12.1")


def test_version_record_allows_empty_version() -> None:
    record = VersionRecord(scope="FASTQC", tool="fastqc", version="")
    assert record.key() == ("FASTQC", "fastqc")


def test_citation_record_bibliography_presence() -> None:
    with_entry = CitationRecord(tool="a", citation_text="a", bibliography_entry="<li>a</li>")
    blank_entry = CitationRecord(tool="a", citation_text="a", bibliography_entry="  ")

    assert with_entry.has_bibliography()
    assert not blank_entry.has_bibliography()
    assert not CitationRecord(tool="a", citation_text="a").has_bibliography()


def test_metadata_with_only_description_is_described_variant() -> None:
    metadata = tool_metadata_from_mapping(
        {"description": "Quality control", "licence": ["GPL-3.0"], "homepage": ""}
    )
    assert metadata == DescribedMetadata(description="Quality control")


def test_metadata_with_citation_fields_is_structured_variant() -> None:
    metadata = tool_metadata_from_mapping(
        {
            "description": "Aggregate results",
            "doi": "10.1093/bioinformatics/btw354",
            "author": ["Ewels P", "Magnusson M"],
            "year": 2016,
            "homepage": None,
        }
    )
    assert isinstance(metadata, StructuredMetadata)
    assert metadata.doi == "10.1093/bioinformatics/btw354"
    assert metadata.author == "Ewels P, Magnusson M"
    assert metadata.year == "2016"
    assert metadata.homepage is None
    assert metadata.description == "Aggregate results"


def test_empty_metadata_is_structured_with_no_fields() -> None:
    assert tool_metadata_from_mapping({}) == StructuredMetadata()


def test_merge_order_later_list_wins() -> None:
    topic = ["t1", "t2"]
    legacy = ["l1"]
    assert MergeOrder.TOPIC_THEN_LEGACY.arrange(topic, legacy) == ["t1", "t2", "l1"]
    assert MergeOrder.LEGACY_THEN_TOPIC.arrange(topic, legacy) == ["l1", "t1", "t2"]
    assert MergeOrder("legacy-then-topic") is MergeOrder.LEGACY_THEN_TOPIC
