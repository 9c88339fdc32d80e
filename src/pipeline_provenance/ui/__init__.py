"""UI package exports for the command-line interface."""

from pipeline_provenance.ui.cli import CLIError, build_parser, run_cli

__all__ = ["CLIError", "build_parser", "run_cli"]
