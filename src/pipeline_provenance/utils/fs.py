"""
pipeline-provenance — filesystem utilities

File: src/pipeline_provenance/utils/fs.py
Last updated: 2026-10-16

Purpose
- Provide the read-only filesystem collaborator used by the normalizers.
- Provide atomic writes for the CLI, which is the only component that writes files.

Functional requirements
- Reads are synchronous; failures surface as ``OSError`` for the caller to downgrade.
- Atomic writes use temp files in the destination directory and replace in a single step.

Non-functional requirements
- Standard library only.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

PathLike = str | os.PathLike[str]

# Strings longer than this are never treated as candidate paths.
_MAX_PATH_CANDIDATE = 4096

__all__ = [
    "FilesystemProvider",
    "LocalFilesystem",
    "atomic_write",
]


@runtime_checkable
class FilesystemProvider(Protocol):
    """Read-only filesystem access consumed by the classifier and normalizers."""

    def read_text(self, path: PathLike) -> str:
        """Return file content as text; raise ``OSError`` on failure."""
        ...

    def is_file(self, path: PathLike) -> bool:
        """Return ``True`` when ``path`` names an existing regular file."""
        ...


class LocalFilesystem:
    """:class:`FilesystemProvider` backed by the local disk."""

    __slots__ = ("_encoding",)

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def read_text(self, path: PathLike) -> str:
        try:
            return Path(path).read_text(encoding=self._encoding)
        except UnicodeDecodeError as exc:
            raise OSError(f"{path}: not valid {self._encoding} text ({exc.reason})") from exc

    def is_file(self, path: PathLike) -> bool:
        raw = os.fspath(path)
        if not raw or len(raw) > _MAX_PATH_CANDIDATE or "\x00" in raw:
            return False
        try:
            return Path(raw).is_file()
        except (OSError, ValueError):
            return False


def atomic_write(path: PathLike, data: bytes | str, *, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``data`` so readers see either the old or the new file.

    Content goes to a sibling temp file that is fsynced and then ``os.replace``-d
    over the target; the temp file is removed if anything fails.
    """

    target = Path(path)
    directory = target.parent.resolve(strict=True)
    if not directory.is_dir():
        raise NotADirectoryError(f"{directory!s} is not a directory")
    payload = data.encode(encoding) if isinstance(data, str) else data

    fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_name, target)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_name)
        raise
    _sync_directory(directory)


def _sync_directory(directory: Path) -> None:
    # Not every platform or filesystem can fsync a directory.
    if os.name == "nt":
        return
    with contextlib.suppress(OSError):
        dir_fd = os.open(directory, os.O_RDONLY | getattr(os, "O_DIRECTORY", 0))
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
