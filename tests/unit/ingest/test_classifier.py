"""
pipeline-provenance — unit tests for the source classifier

File: tests/unit/ingest/test_classifier.py
Last updated: 2026-10-16

Purpose
- Validate that every supported input shape maps to exactly one source variant.

What this test file should cover
- Text vs file reference disambiguation through the filesystem provider.
- Tuple arity and scalar rules, nested flattening, ignored items.
- Fail-soft file resolution and caller-misuse errors.
"""

from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from pipeline_provenance.domain.sources import (
    FileRefSource,
    IgnoredSource,
    MalformedSource,
    MappingSource,
    NestedSource,
    TextSource,
    TupleSource,
)
from pipeline_provenance.ingest.classifier import (
    classify_source,
    expand_sources,
    require_source_list,
    resolve_file_ref,
)


class _MemoryFilesystem:
    def __init__(self, files: dict[str, str]) -> None:
        self._files = files

    def read_text(self, path: str | os.PathLike[str]) -> str:
        key = os.fspath(path)
        if key not in self._files:
            raise FileNotFoundError(key)
        return self._files[key]

    def is_file(self, path: str | os.PathLike[str]) -> bool:
        return os.fspath(path) in self._files


def test_none_and_blank_text_are_ignored() -> None:
    fs = _MemoryFilesystem({})
    assert classify_source(None, fs=fs) == IgnoredSource()
    assert classify_source("", fs=fs) == IgnoredSource()
    assert classify_source("   \n", fs=fs) == IgnoredSource()


def test_text_is_text_unless_it_names_an_existing_file() -> None:
    fs = _MemoryFilesystem({"versions.yml": "fastqc: 0.12.1\n"})

    assert classify_source("fastqc: 0.12.1", fs=fs) == TextSource(text="fastqc: 0.12.1")
    assert classify_source("versions.yml", fs=fs) == FileRefSource(path=Path("versions.yml"))
    assert classify_source("missing.yml", fs=fs) == TextSource(text="missing.yml")


def test_path_objects_and_handles_are_file_refs() -> None:
    fs = _MemoryFilesystem({})
    handle = io.StringIO("fastqc: 0.12.1")

    assert classify_source(Path("a/versions.yml"), fs=fs) == FileRefSource(
        path=Path("a/versions.yml")
    )
    classified = classify_source(handle, fs=fs)
    assert isinstance(classified, FileRefSource)
    assert classified.handle is handle


def test_utf8_bytes_are_text_and_invalid_bytes_are_malformed() -> None:
    fs = _MemoryFilesystem({})
    assert classify_source(b"multiqc: 1.15", fs=fs) == TextSource(text="multiqc: 1.15")
    assert isinstance(classify_source(b"\xff\xfe\x00", fs=fs), MalformedSource)


def test_three_element_sequence_is_tuple() -> None:
    fs = _MemoryFilesystem({})
    classified = classify_source(("NFCORE_SAMTOOLS", "samtools", "1.17"), fs=fs)
    assert classified == TupleSource(scope="NFCORE_SAMTOOLS", name="samtools", value="1.17")


def test_tuple_with_mapping_value_is_still_a_tuple() -> None:
    fs = _MemoryFilesystem({})
    metadata = {"doi": "10.1/x"}
    classified = classify_source(["FASTQC", "fastqc", metadata], fs=fs)
    assert classified == TupleSource(scope="FASTQC", name="fastqc", value=metadata)


@pytest.mark.parametrize(
    "item",
    [
        ("only-one",),
        ("scope", "tool"),
        ("a", "b", "c", "d"),
        ("scope", None, "1.0"),
        ("scope", "tool", None),
        (True, "tool", "1.0"),
        ("  ", "tool", "1.0"),
    ],
)
def test_bad_tuples_are_malformed(item: tuple[object, ...]) -> None:
    assert isinstance(classify_source(item, fs=_MemoryFilesystem({})), MalformedSource)


def test_mapping_is_mapping_source() -> None:
    entries = {"multiqc": "1.15"}
    assert classify_source(entries, fs=_MemoryFilesystem({})) == MappingSource(entries=entries)


def test_unsupported_scalars_are_malformed() -> None:
    fs = _MemoryFilesystem({})
    assert isinstance(classify_source(42, fs=fs), MalformedSource)
    assert isinstance(classify_source(object(), fs=fs), MalformedSource)


def test_one_level_of_nesting_is_flattened() -> None:
    fs = _MemoryFilesystem({})
    classified = classify_source(
        [("A", "a", "1"), {"b": "2"}, ("C", "c", "3")],
        fs=fs,
    )
    assert isinstance(classified, NestedSource)
    assert [type(item) for item in classified.items] == [TupleSource, MappingSource, TupleSource]


def test_second_level_of_nesting_is_malformed() -> None:
    fs = _MemoryFilesystem({})
    classified = classify_source([[("A", "a", "1"), ("B", "b", "2")], "x: 1"], fs=fs)
    assert isinstance(classified, NestedSource)
    assert isinstance(classified.items[0], MalformedSource)
    assert classified.items[1] == TextSource(text="x: 1")


def test_expand_sources_resolves_files_and_drops_ignored_items() -> None:
    fs = _MemoryFilesystem({"v.yml": "fastqc: 0.12.1\n", "empty.yml": "  \n"})
    expanded = expand_sources(
        [None, "", "v.yml", Path("empty.yml"), Path("missing.yml"), [("A", "a", "1")]],
        fs=fs,
    )

    assert expanded[0] == TextSource(text="fastqc: 0.12.1\n", origin="v.yml")
    assert isinstance(expanded[1], MalformedSource)
    assert "unreadable" in expanded[1].reason
    assert expanded[2] == TupleSource(scope="A", name="a", value="1")
    assert len(expanded) == 3


def test_resolve_file_ref_reads_binary_handles() -> None:
    source = FileRefSource(handle=io.BytesIO(b"samtools: '1.17'\n"))
    resolved = resolve_file_ref(source, _MemoryFilesystem({}))
    assert isinstance(resolved, TextSource)
    assert resolved.text == "samtools: '1.17'\n"


@pytest.mark.parametrize("value", [None, "fastqc: 1", b"x", {"a": "1"}, 7])
def test_require_source_list_rejects_non_sequences(value: object) -> None:
    with pytest.raises(TypeError, match="sources"):
        require_source_list(value, "sources")


def test_require_source_list_copies_tuples_to_list() -> None:
    assert require_source_list(("a", "b"), "sources") == ["a", "b"]
