"""Command-line interface router for pipeline-provenance."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pipeline_provenance.config import (
    ConfigLoadError,
    ConfigValidationError,
    ReportSettings,
    dump_effective_config,
    load_config,
    workflow_metadata_from_config,
)
from pipeline_provenance.domain.models import Dropped
from pipeline_provenance.ingest.parsing import parse_yaml_text
from pipeline_provenance.observability import configure_logging, get_logger
from pipeline_provenance.reporting import ReportBundle, ReportingOrchestrator
from pipeline_provenance.utils.fs import LocalFilesystem, atomic_write
from pipeline_provenance.utils.hashing import sha256_text

_logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = 2

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="provenance",
        description=(
            "pipeline-provenance — software version and citation reports for pipelines.\n\n"
            "Common workflows:\n"
            "  provenance versions versions.yml         Merge version files into one report\n"
            "  provenance citations fastqc/meta.yml     Render citation sentence + bibliography\n"
            "  provenance report --outdir results/      Write all four report artifacts\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="Path to provenance TOML config (default: ./provenance.toml if present).",
    )
    common.add_argument("--pipeline-name", default=None, help="Pipeline name override.")
    common.add_argument("--pipeline-version", default=None, help="Pipeline version override.")
    common.add_argument("--commit-id", default=None, help="Pipeline commit id override.")
    common.add_argument(
        "--runtime-version",
        default=None,
        help="Runtime version override (default: config, then $NXF_VER, then 'unknown').",
    )
    common.add_argument(
        "--log-level",
        default=None,
        help="Log level for stderr diagnostics (default: WARNING).",
    )
    common.add_argument(
        "--log-json",
        action="store_true",
        default=None,
        help="Emit diagnostics as JSON lines.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # versions ------------------------------------------------------------
    versions_parser = subparsers.add_parser(
        "versions",
        parents=[common],
        help="Render the nested software version report",
        description=(
            "Merge version files and topic tuples into one YAML report.\n\n"
            "Examples:\n"
            "  provenance versions collated_versions.yml\n"
            "  provenance versions legacy.yml --topic topic_versions.yml\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    versions_parser.add_argument("sources", nargs="*", help="Version YAML files.")
    versions_parser.add_argument(
        "--topic",
        action="append",
        default=[],
        help="YAML list of [scope, tool, version] tuples (repeatable).",
    )
    versions_parser.set_defaults(handler=_cmd_versions)

    # citations -----------------------------------------------------------
    citations_parser = subparsers.add_parser(
        "citations",
        parents=[common],
        help="Render the citation sentence and bibliography",
    )
    citations_parser.add_argument("meta", nargs="*", help="Module meta.yml files.")
    citations_parser.add_argument(
        "--json", action="store_true", default=False, help="Emit machine-readable JSON."
    )
    citations_parser.set_defaults(handler=_cmd_citations)

    # report --------------------------------------------------------------
    report_parser = subparsers.add_parser(
        "report",
        parents=[common],
        help="Write versions, citations, bibliography, and methods description",
    )
    report_parser.add_argument(
        "--versions", action="append", default=[], help="Version YAML file (repeatable)."
    )
    report_parser.add_argument(
        "--topic", action="append", default=[], help="Topic tuple YAML file (repeatable)."
    )
    report_parser.add_argument(
        "--meta", action="append", default=[], help="Module meta.yml file (repeatable)."
    )
    report_parser.add_argument("--template", default=None, help="Methods description template.")
    report_parser.add_argument("--outdir", required=True, help="Directory for report artifacts.")
    report_parser.set_defaults(handler=_cmd_report)

    # config --------------------------------------------------------------
    config_parser = subparsers.add_parser(
        "config",
        parents=[common],
        help="Print the effective configuration as JSON",
    )
    config_parser.set_defaults(handler=_cmd_config)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_versions(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    orchestrator = _orchestrator(config)
    bundle = orchestrator.generate_version_report(
        _read_topic_files(args.topic),
        workflow_metadata_from_config(config),
        legacy_versions=[Path(item) for item in args.sources],
    )
    _write_stdout(bundle.versions_yaml)
    return 0


def _cmd_citations(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    orchestrator = _orchestrator(config)
    bundle = orchestrator.generate_citation_report([Path(item) for item in args.meta])

    if args.json:
        _emit_json(
            {
                "command": "citations",
                "tool_citations": bundle.tool_citations,
                "tool_bibliography": bundle.tool_bibliography,
                "tools": [record.tool for record in bundle.citations],
            }
        )
        return 0

    _write_stdout(bundle.tool_citations)
    _write_stdout(bundle.tool_bibliography)
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    orchestrator = _orchestrator(config)
    template = _existing_file(args.template, "template") if args.template else None
    bundle = orchestrator.generate_comprehensive_report(
        _read_topic_files(args.topic),
        [Path(item) for item in args.meta],
        template,
        workflow_metadata_from_config(config),
        legacy_versions=[Path(item) for item in args.versions],
    )
    # One `sha256sum -c` compatible line per written file.
    for path, checksum in _write_bundle(bundle, Path(args.outdir).expanduser()):
        _write_stdout(f"{checksum}  {path.as_posix()}")
    _write_stdout(f"sha256:{bundle.digest()}")
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    config = _load_effective_config(args)
    _write_stdout(dump_effective_config(config))
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_effective_config(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, object] = {
        "workflow.name": _optional_str(args.pipeline_name),
        "workflow.version": _optional_str(args.pipeline_version),
        "workflow.commit_id": _optional_str(args.commit_id),
        "runtime.version": _optional_str(args.runtime_version),
        "logging.level": _optional_str(args.log_level),
        "logging.json": args.log_json,
    }
    try:
        config = load_config(args.config_path, cli_overrides=overrides)
    except (ConfigLoadError, ConfigValidationError) as exc:
        raise CLIError(str(exc), exit_code=2) from exc

    logging_section = config["logging"]
    configure_logging(logging_section["level"], json_output=logging_section["json"])
    _logger.debug("config_loaded", command=args.command, config_path=args.config_path)
    return config


def _orchestrator(config: Mapping[str, Any]) -> ReportingOrchestrator:
    return ReportingOrchestrator(settings=ReportSettings.from_config(config), fs=LocalFilesystem())


def _read_topic_files(paths: Sequence[str]) -> list[object]:
    """Load ``[scope, tool, version]`` lists from each topic file, in order."""

    tuples: list[object] = []
    fs = LocalFilesystem()
    for raw in paths:
        path = _existing_file(raw, "topic file")
        try:
            text = fs.read_text(path)
        except OSError as exc:
            raise CLIError(f"unable to read topic file {path}: {exc}") from exc
        parsed = parse_yaml_text(text, origin=path.as_posix())
        if isinstance(parsed, Dropped):
            raise CLIError(f"topic file {path}: {parsed.reason}")
        if parsed.payload is None:
            continue
        if not isinstance(parsed.payload, list):
            raise CLIError(f"topic file {path}: expected a YAML list of [scope, tool, version]")
        tuples.extend(tuple(item) if isinstance(item, list) else item for item in parsed.payload)
    return tuples


def _write_bundle(bundle: ReportBundle, outdir: Path) -> list[tuple[Path, str]]:
    try:
        outdir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CLIError(f"unable to create output directory {outdir}: {exc}") from exc

    written: list[tuple[Path, str]] = []
    for name, text in bundle.artifacts():
        target = outdir / name
        atomic_write(target, text)
        written.append((target, sha256_text(text)))
    _logger.info("report_written", outdir=outdir.as_posix(), files=len(written))
    return written


def _existing_file(raw: str, label: str) -> Path:
    candidate = Path(raw).expanduser()
    if not candidate.is_file():
        raise CLIError(f"{label} not found: {candidate}")
    return candidate


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False))


def _write_stdout(text: str) -> None:
    if text:
        sys.stdout.write(text.rstrip("\n") + "\n")


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CLIError("invalid optional string argument")
    cleaned = value.strip()
    return cleaned or None


__all__ = ["CLIError", "build_parser", "run_cli"]
