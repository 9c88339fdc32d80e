"""
pipeline-provenance — runtime config loader.

File: src/pipeline_provenance/config/loader.py
Last updated: 2026-10-16

Purpose
- Load effective config from defaults, TOML file, env vars, and CLI overrides.

What should be included in this file
- Precedence logic: CLI > env (PROVENANCE_) > file > defaults.
- TOML loading via ``tomllib``.
- Deterministic environment variable mapping and coercion.

Non-functional requirements
- Keep loading deterministic and reproducible.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pipeline_provenance.config.schema import (
    DEFAULT_CONFIG,
    assert_valid_config,
    default_config,
    merge_config,
)

DEFAULT_CONFIG_FILE: Final[str] = "provenance.toml"
ENV_PREFIX: Final[str] = "PROVENANCE_"

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


class ConfigLoadError(ValueError):
    """Raised when config cannot be loaded or overrides cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Load effective config with deterministic precedence: CLI > env > file > defaults.

    A missing default ``provenance.toml`` is fine; a missing explicit path is
    a ``ConfigLoadError``. The file layer is validated before overrides apply.
    """

    from_file = assert_valid_config(merge_config(default_config(), _read_config_file(config_path)))
    env_map = os.environ if environ is None else environ
    layered = merge_config(from_file, _collect_env_overrides(env_map))
    layered = merge_config(layered, _cli_payload(cli_overrides or {}))
    return assert_valid_config(layered)


def dump_effective_config(config: Mapping[str, object]) -> str:
    """Return a deterministic JSON dump of the effective config."""

    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _read_config_file(config_path: str | Path | None) -> dict[str, Any]:
    explicit = config_path is not None
    path = Path(config_path).expanduser() if explicit else Path.cwd() / DEFAULT_CONFIG_FILE
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        if not explicit:
            return {}
        raise ConfigLoadError(f"config file not found: {path}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc

    try:
        return tomllib.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc


def _collect_env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """``PROVENANCE_<SECTION>_<KEY>`` values, coerced to the type of the default."""

    overrides: dict[str, Any] = {}
    for env_name, (section, key, default) in sorted(_env_bindings().items()):
        raw = environ.get(env_name)
        if raw is None:
            continue
        value: object = raw.strip()
        if isinstance(default, bool):
            value = _parse_bool(raw, env_name, f"{section}.{key}")
        overrides.setdefault(section, {})[key] = value
    return overrides


def _env_bindings() -> dict[str, tuple[str, str, object]]:
    return {
        f"{ENV_PREFIX}{section.upper()}_{key.upper()}": (section, key, default)
        for section, values in DEFAULT_CONFIG.items()
        for key, default in values.items()
    }


def _parse_bool(raw: str, env_name: str, dotted: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _BOOLEAN_TRUE:
        return True
    if lowered in _BOOLEAN_FALSE:
        return False
    raise ConfigLoadError(
        f"{env_name} -> {dotted} must be a boolean (true/false/1/0/yes/no/on/off)"
    )


def _cli_payload(cli_overrides: Mapping[str, object]) -> dict[str, Any]:
    """Turn ``{"section.key": value}`` overrides into a config overlay; ``None`` means unset."""

    payload: dict[str, Any] = {}
    for dotted, value in sorted(cli_overrides.items()):
        if value is None:
            continue
        section, sep, key = dotted.partition(".")
        if not sep or not section or not key or "." in key:
            raise ConfigLoadError(f"CLI override key must look like 'section.key', got {dotted!r}")
        payload.setdefault(section, {})[key] = value
    return payload


__all__ = [
    "ConfigLoadError",
    "DEFAULT_CONFIG_FILE",
    "ENV_PREFIX",
    "dump_effective_config",
    "load_config",
]
