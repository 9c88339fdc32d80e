"""YAML text parsing that keeps every scalar as its literal string form."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

import yaml

from pipeline_provenance.domain.models import Dropped

_PREVIEW_CHARS: Final[int] = 80


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Successfully parsed YAML payload plus the origin it came from."""

    payload: object
    origin: str


def parse_yaml_text(text: str, *, origin: str = "<text>") -> ParsedDocument | Dropped:
    """Parse one YAML document without implicit type resolution.

    ``yaml.BaseLoader`` leaves ``1.10`` as ``"1.10"`` instead of the float
    ``1.1``, so version strings survive exactly as written.
    """

    try:
        payload = yaml.load(text, Loader=yaml.BaseLoader)  # noqa: S506
    except yaml.YAMLError as exc:
        problem = getattr(exc, "problem", None) or exc.__class__.__name__
        return Dropped(reason=f"invalid YAML ({problem})", item=_preview(origin, text))
    return ParsedDocument(payload=payload, origin=origin)


def last_key_segment(key: object) -> str:
    """Return the part of ``key`` after its last colon (``"ns:tool"`` -> ``"tool"``).

    Empty segments are skipped so ``"A:B:"`` yields ``"B"``; a key made only of
    colons is returned stripped.
    """

    text = str(key).strip()
    segments = [segment.strip() for segment in text.split(":") if segment.strip()]
    if not segments:
        return text
    return segments[-1]


def describe_item(item: object) -> str:
    """Short, single-line ``repr`` used in drop diagnostics."""

    rendered = repr(item).replace("\n", "\\n")
    if len(rendered) > _PREVIEW_CHARS:
        return rendered[: _PREVIEW_CHARS - 3] + "..."
    return rendered


def _preview(origin: str, text: str) -> str:
    if origin != "<text>":
        return origin
    return describe_item(text)


__all__ = [
    "ParsedDocument",
    "describe_item",
    "last_key_segment",
    "parse_yaml_text",
]
