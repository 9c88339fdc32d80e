"""Render a ``VersionTable`` as deterministic nested YAML."""

from __future__ import annotations

from typing import Final

import yaml

from pipeline_provenance.versions.aggregator import VersionTable

# Long version strings must never be folded onto a second line.
_NO_WRAP_WIDTH: Final[int] = 1 << 20


def render_versions_yaml(table: VersionTable) -> str:
    """Return ``scope:\\n  tool: version`` blocks sorted by scope, then tool.

    PyYAML quotes exactly the strings that its resolver would read back as a
    different type, so ``'1.15'`` and ``'1.0'`` are single-quoted while
    ``0.12.1`` and ``v1.0.0`` stay plain. An empty table renders as ``""``.
    """

    entries = table.sorted_entries()
    if not entries:
        return ""
    rendered = yaml.safe_dump(
        entries,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=_NO_WRAP_WIDTH,
        indent=2,
    )
    return rendered.rstrip("\n")


__all__ = ["render_versions_yaml"]
