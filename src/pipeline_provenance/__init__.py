"""
pipeline-provenance — package root

File: src/pipeline_provenance/__init__.py
Last updated: 2026-10-16

Purpose
- Normalize and merge software-version and tool-citation facts emitted by
  pipeline steps into deterministic report artifacts.

Import boundary rules
- No config loading at import time.
- The only logging side effect is a ``NullHandler`` on the package logger, so
  library use without ``configure_logging`` emits nothing.
- Heavy submodules are imported lazily by callers, not here.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.3.0"

__all__ = ["__version__"]
