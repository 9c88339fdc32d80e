"""Unit tests for the local filesystem provider, atomic writes, and digests."""

from __future__ import annotations

from pathlib import Path

import pytest

from pipeline_provenance.utils import (
    FilesystemProvider,
    LocalFilesystem,
    atomic_write,
    sha256_parts,
    sha256_text,
)


def test_local_filesystem_reads_and_detects_files(tmp_path: Path) -> None:
    target = tmp_path / "versions.yml"
    target.write_text("fastqc: 0.12.1\n", encoding="utf-8")
    fs = LocalFilesystem()

    assert isinstance(fs, FilesystemProvider)
    assert fs.read_text(target) == "fastqc: 0.12.1\n"
    assert fs.is_file(str(target))
    assert not fs.is_file(tmp_path)
    assert not fs.is_file("")
    assert not fs.is_file("bad\x00name")
    assert not fs.is_file("x" * 5000)


def test_undecodable_content_surfaces_as_os_error(tmp_path: Path) -> None:
    target = tmp_path / "binary.yml"
    target.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(OSError, match="not valid utf-8"):
        LocalFilesystem().read_text(target)


def test_atomic_write_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "out" / "software_versions.yml"
    target.parent.mkdir()
    atomic_write(target, "first\n")
    atomic_write(target, "second\n")

    assert target.read_text(encoding="utf-8") == "second\n"
    assert sorted(path.name for path in target.parent.iterdir()) == ["software_versions.yml"]


def test_sha256_parts_frames_each_part() -> None:
    assert sha256_parts([("a", "xy"), ("b", "")]) != sha256_parts([("a", "x"), ("b", "y")])
    assert sha256_parts([("a", "xy")]) == sha256_parts([("a", "xy")])
    assert len(sha256_text("")) == 64
