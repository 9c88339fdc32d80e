"""
pipeline-provenance — hashing utilities

File: src/pipeline_provenance/utils/hashing.py
Last updated: 2026-10-16

Purpose
- Deterministic SHA-256 helpers used to fingerprint finished report artifacts.

Non-functional requirements
- Standard library only; behavior is cross-platform deterministic.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "sha256_parts",
    "sha256_text",
]


def sha256_text(text: str, *, encoding: str = "utf-8") -> str:
    """SHA-256 hex digest of ``text`` encoded with ``encoding``."""

    return hashlib.sha256(text.encode(encoding)).hexdigest()


def sha256_parts(parts: Iterable[tuple[str, str]], *, encoding: str = "utf-8") -> str:
    """
    Return one digest over named text parts.

    Each part is framed as ``name``, NUL, byte length, NUL, content so that
    moving text between adjacent parts changes the digest.
    """

    digest = hashlib.sha256()
    for name, text in parts:
        payload = text.encode(encoding)
        digest.update(name.encode(encoding))
        digest.update(b"\x00")
        digest.update(str(len(payload)).encode("ascii"))
        digest.update(b"\x00")
        digest.update(payload)
    return digest.hexdigest()
