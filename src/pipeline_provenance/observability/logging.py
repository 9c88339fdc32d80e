"""Structured logging setup: structlog events rendered through stdlib handlers."""

from __future__ import annotations

import logging
import sys
from typing import Final, TextIO

import structlog

_LOGGER_NAME: Final[str] = "pipeline_provenance"
_HANDLER_NAME: Final[str] = "pipeline_provenance.stderr"

_SHARED_PROCESSORS: Final[tuple[structlog.types.Processor, ...]] = (
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)


def configure_logging(
    level: int | str = "WARNING",
    *,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Route every ``pipeline_provenance`` structlog event to ``stream`` (stderr).

    ``json_output`` renders canonical JSON lines (sorted keys, compact
    separators); otherwise events render as ``key=value`` console lines.
    Calling this again replaces the previously installed handler.
    """

    resolved_level = _resolve_level(level)
    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True, separators=(",", ":"))
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=list(_SHARED_PROCESSORS),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    logger = logging.getLogger(_LOGGER_NAME)
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(resolved_level)
    logger.propagate = False

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    return logger


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """structlog logger bound to the stdlib logger ``name``.

    Events go through stdlib ``logging``; until :func:`configure_logging` installs
    a handler they reach only the package ``NullHandler`` and stay off stdout.
    """

    return structlog.wrap_logger(  # type: ignore[no-any-return]
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level {level!r}")
    return resolved


__all__ = ["configure_logging", "get_logger"]
