"""Closed set of tagged variants describing the shape of one source item."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import IO, TypeAlias


@dataclass(frozen=True, slots=True)
class TextSource:
    """Raw structured text, parsed as YAML by the normalizers."""

    text: str
    origin: str = "<text>"


@dataclass(frozen=True, slots=True)
class FileRefSource:
    """A path or open handle whose content is read and re-classified as text."""

    path: Path | None = None
    handle: IO[str] | IO[bytes] | None = None

    @property
    def origin(self) -> str:
        if self.path is not None:
            return self.path.as_posix()
        name = getattr(self.handle, "name", None)
        return str(name) if name is not None else "<handle>"


@dataclass(frozen=True, slots=True)
class TupleSource:
    """Fixed-arity ``(scope, name, value)`` topic tuple."""

    scope: str
    name: str
    value: object


@dataclass(frozen=True, slots=True)
class MappingSource:
    """Key-value mapping given directly by the caller."""

    entries: Mapping[object, object]


@dataclass(frozen=True, slots=True)
class NestedSource:
    """One level of wrapping around further, already classified, items."""

    items: tuple[Source, ...]


@dataclass(frozen=True, slots=True)
class MalformedSource:
    """Item that matches no supported shape; it is dropped without raising."""

    reason: str
    item: str = ""


@dataclass(frozen=True, slots=True)
class IgnoredSource:
    """``None`` or blank text: a no-op rather than a drop."""


Source: TypeAlias = (
    TextSource
    | FileRefSource
    | TupleSource
    | MappingSource
    | NestedSource
    | MalformedSource
    | IgnoredSource
)

__all__ = [
    "FileRefSource",
    "IgnoredSource",
    "MalformedSource",
    "MappingSource",
    "NestedSource",
    "Source",
    "TextSource",
    "TupleSource",
]
