"""
pipeline-provenance — unit tests for the citation normalizer

File: tests/unit/citations/test_citation_normalizer.py
Last updated: 2026-10-16

Purpose
- Validate citation text and bibliography formatting for every metadata shape.

What this test file should cover
- Structured, described, and non-mapping tool entries in ``meta.yml`` documents.
- Topic tuples carrying a metadata mapping or a literal citation string.
- Missing files, unparsable documents, and ``meta.yml`` to topic conversion.
"""

from __future__ import annotations

from pathlib import Path

from pipeline_provenance.citations.normalizer import (
    meta_yaml_to_topic,
    module_name_from_path,
    normalize_citation_sources,
)
from pipeline_provenance.domain.models import CitationRecord, Dropped

MULTIQC_META = """\
name: multiqc
description: Aggregate results from bioinformatics analyses
tools:
  - multiqc:
      description: |
        MultiQC searches a given directory for analysis logs and compiles a HTML report.
      homepage: https://multiqc.info/
      documentation: https://multiqc.info/docs/
      licence: ["GPL-3.0-or-later"]
      doi: 10.1093/bioinformatics/btw354
      author: Ewels P
      year: 2016
      title: MultiQC
      journal: Bioinformatics
"""


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_structured_entry_with_doi_and_homepage(tmp_path: Path) -> None:
    meta = _write(tmp_path / "modules" / "multiqc" / "meta.yml", MULTIQC_META)

    results = normalize_citation_sources([meta])

    assert results == [
        CitationRecord(
            tool="multiqc",
            citation_text="multiqc (DOI: 10.1093/bioinformatics/btw354)",
            bibliography_entry=(
                "<li>Ewels P. 2016. MultiQC. Bioinformatics. doi: 10.1093/bioinformatics/btw354."
                " <a href='https://multiqc.info/'>https://multiqc.info/</a></li>"
            ),
        )
    ]


def test_structured_entry_without_doi_uses_description_and_tool_as_title() -> None:
    results = normalize_citation_sources(
        [("FASTQC", "fastqc", {"description": "QC tool", "homepage": "https://fastqc.org"})]
    )
    assert results == [
        CitationRecord(
            tool="fastqc",
            citation_text="fastqc (QC tool)",
            bibliography_entry=(
                "<li>fastqc. <a href='https://fastqc.org'>https://fastqc.org</a></li>"
            ),
        )
    ]


def test_described_only_entry() -> None:
    results = normalize_citation_sources([("TRIM", "trimgalore", {"description": "Trimming"})])
    assert results == [
        CitationRecord(
            tool="trimgalore",
            citation_text="trimgalore (Trimming)",
            bibliography_entry="<li>trimgalore</li>",
        )
    ]


def test_empty_metadata_mapping_cites_bare_tool_name() -> None:
    results = normalize_citation_sources([("X", "bedtools", {})])
    assert results == [
        CitationRecord(
            tool="bedtools", citation_text="bedtools", bibliography_entry="<li>bedtools</li>"
        )
    ]


def test_literal_citation_string_in_tuple() -> None:
    results = normalize_citation_sources([("X", "salmon", "Patro et al. 2017")])
    assert results == [
        CitationRecord(
            tool="salmon",
            citation_text="Patro et al. 2017",
            bibliography_entry="<li>Patro et al. 2017</li>",
        )
    ]


def test_non_mapping_tool_metadata_in_document_has_no_bibliography() -> None:
    text = "tools:\n  - star: just a string\n  - hisat2:\n      doi: 10.1038/x\n"
    results = normalize_citation_sources([text])
    assert results == [
        CitationRecord(tool="star", citation_text="star"),
        CitationRecord(
            tool="hisat2",
            citation_text="hisat2 (DOI: 10.1038/x)",
            bibliography_entry="<li>hisat2. doi: 10.1038/x</li>",
        ),
    ]


def test_missing_file_and_malformed_documents_produce_no_records(tmp_path: Path) -> None:
    results = normalize_citation_sources(
        [
            tmp_path / "absent" / "meta.yml",
            "tools: [unclosed",
            "tools: just text",
            "name: no-tools-here",
            ("X", "tool", None),
        ]
    )
    assert not any(isinstance(item, CitationRecord) for item in results)
    assert all(isinstance(item, Dropped) for item in results)


def test_already_parsed_mapping_document() -> None:
    results = normalize_citation_sources([{"tools": [{"bwa": {"doi": "10.1/bwa"}}]}])
    assert [item.citation_text for item in results if isinstance(item, CitationRecord)] == [
        "bwa (DOI: 10.1/bwa)"
    ]


def test_meta_yaml_to_topic_uses_upper_cased_parent_directory(tmp_path: Path) -> None:
    meta = _write(tmp_path / "modules" / "nf-core" / "fastqc" / "meta.yml", MULTIQC_META)

    tuples = meta_yaml_to_topic(meta)

    assert len(tuples) == 1
    module, tool, info = tuples[0]
    assert (module, tool) == ("FASTQC", "multiqc")
    assert info["doi"] == "10.1093/bioinformatics/btw354"


def test_meta_yaml_to_topic_explicit_module_name_and_missing_file(tmp_path: Path) -> None:
    meta = _write(tmp_path / "meta.yml", MULTIQC_META)

    assert meta_yaml_to_topic(meta, module_name="CUSTOM")[0][0] == "CUSTOM"
    assert meta_yaml_to_topic(tmp_path / "nope" / "meta.yml") == []


def test_module_name_from_path() -> None:
    assert module_name_from_path("modules/nf-core/fastqc/meta.yml") == "FASTQC"
    assert module_name_from_path("meta.yml") == "UNKNOWN_MODULE"
