"""Executable CLI entrypoint for ``pipeline_provenance``."""

from __future__ import annotations

import sys
import traceback
from enum import IntEnum
from typing import TYPE_CHECKING, Final

from pipeline_provenance.config import ConfigLoadError, ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class ExitCode(IntEnum):
    """Process exit-code contract."""

    SUCCESS = 0
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 4


# Failures the user can fix by changing flags, config, or input paths.
_USER_ERRORS: Final[tuple[type[BaseException], ...]] = (
    ConfigLoadError,
    ConfigValidationError,
    FileNotFoundError,
    NotADirectoryError,
    PermissionError,
)


def cli_entrypoint(argv: Sequence[str] | None = None) -> int:
    """Entrypoint used by ``python -m pipeline_provenance`` and the ``provenance`` script."""

    try:
        from pipeline_provenance.ui.cli import run_cli

        return _exit_code_from(run_cli(argv))
    except SystemExit as exc:
        # argparse exits 0 for --help and 2 for usage errors.
        return _exit_code_from(exc.code)
    except Exception as exc:  # noqa: BLE001 - CLI boundary normalization.
        if any(isinstance(item, _USER_ERRORS) for item in _causes(exc)):
            sys.stderr.write(f"error: {str(exc).strip() or type(exc).__name__}\n")
            return int(ExitCode.CONFIG_ERROR)
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
        return int(ExitCode.INTERNAL_ERROR)


def _exit_code_from(raw: object) -> int:
    if raw is None:
        return int(ExitCode.SUCCESS)
    if isinstance(raw, int) and raw in {code.value for code in ExitCode}:
        return raw
    if isinstance(raw, str) and raw.strip():
        sys.stderr.write(raw.strip() + "\n")
    return int(ExitCode.INTERNAL_ERROR)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk ``__cause__``/``__context__`` links, stopping on cycles."""

    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


__all__ = ["ExitCode", "cli_entrypoint"]
