"""Utility exports for filesystem access and hashing helpers."""

from pipeline_provenance.utils.fs import FilesystemProvider, LocalFilesystem, atomic_write
from pipeline_provenance.utils.hashing import sha256_parts, sha256_text

__all__ = [
    "FilesystemProvider",
    "LocalFilesystem",
    "atomic_write",
    "sha256_parts",
    "sha256_text",
]
