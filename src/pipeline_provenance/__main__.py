"""Module entrypoint for ``python -m pipeline_provenance``."""

from __future__ import annotations

from pipeline_provenance.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
