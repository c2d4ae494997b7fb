"""
dashboard-explorer — runtime config loader.

File: src/dashboard_explorer/config/loader.py

Purpose
- Build the effective explorer config by stacking layers:
  built-in defaults < ``explorer.toml`` < ``EXPLORER_*`` env vars < explicit overrides.

Behavior
- Without an explicit path, ``./explorer.toml`` is optional; an explicit path
  must exist.
- Every scalar setting has an env var named ``EXPLORER_<SECTION>_<KEY>``; the
  raw string is coerced to the type of the value it replaces.
- Override keys are dotted paths (``"observability.log_level"``).
- Relative paths resolve against the directory holding the config file.
"""

from __future__ import annotations

import functools
import json
import os
import tomllib
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, Final

from dashboard_explorer.config.schema import (
    PATH_FIELDS,
    assert_valid_config,
    default_config,
    merge_config,
)
from dashboard_explorer.constants import DEFAULT_CONFIG_FILE, ENV_PREFIX

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSY: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


class ConfigLoadError(ValueError):
    """Raised when config cannot be read or an env var cannot be coerced."""


def load_config(
    config_path: str | Path | None = None,
    *,
    overrides: Mapping[str, object] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return the validated effective config."""

    path = _config_file(config_path)
    layers: list[Mapping[str, object]] = [
        default_config(),
        _read_toml(path, required=config_path is not None),
    ]
    # Env coercion keys off the file layer's types, so validate that first.
    file_config = assert_valid_config(_stack(layers))

    layers.append(_env_layer(file_config, os.environ if environ is None else environ))
    layers.append(_override_layer(overrides or {}))
    effective = assert_valid_config(_stack(layers))
    return assert_valid_config(normalize_paths(effective, base_dir=path.parent))


def env_var_name(path: tuple[str, ...]) -> str:
    """``("observability", "log_level")`` -> ``EXPLORER_OBSERVABILITY_LOG_LEVEL``."""

    return ENV_PREFIX + "_".join(path).upper()


def normalize_paths(config: Mapping[str, object], *, base_dir: Path) -> dict[str, Any]:
    """Return a copy of ``config`` with path fields made absolute against ``base_dir``."""

    result = merge_config({}, config)
    for section, key in PATH_FIELDS:
        table = result.get(section)
        if not isinstance(table, dict):
            continue
        raw = table.get(key)
        # Empty means "use the built-in default" and stays empty.
        if isinstance(raw, str) and raw.strip():
            table[key] = _absolute(raw, base_dir)
    return result


def dump_effective_config(config: Mapping[str, object]) -> str:
    return json.dumps(config, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _config_file(config_path: str | Path | None) -> Path:
    if config_path is None:
        return (Path.cwd() / DEFAULT_CONFIG_FILE).resolve()
    return Path(config_path).expanduser().resolve()


def _read_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.is_file():
        if required:
            raise ConfigLoadError(f"config file not found: {path}")
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"unable to read config file {path}: {exc}") from exc


def _stack(layers: list[Mapping[str, object]]) -> dict[str, Any]:
    return functools.reduce(merge_config, layers, {})


def _leaves(
    payload: Mapping[str, object], prefix: tuple[str, ...] = ()
) -> Iterator[tuple[tuple[str, ...], object]]:
    for key in sorted(payload):
        value = payload[key]
        if isinstance(value, Mapping):
            yield from _leaves(value, (*prefix, key))
        else:
            yield (*prefix, key), value


def _env_layer(config: Mapping[str, object], environ: Mapping[str, str]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for path, current in _leaves(config):
        name = env_var_name(path)
        if name in environ:
            _assign(layer, path, _coerce(environ[name], type(current), name, path))
    return layer


def _coerce(raw: str, kind: type, name: str, path: tuple[str, ...]) -> object:
    text = raw.strip()
    target = ".".join(path)
    if kind is bool:
        lowered = text.lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
        raise ConfigLoadError(
            f"{name} -> {target} must be a boolean (true/false/1/0/yes/no/on/off)"
        )
    if kind is int:
        try:
            return int(text)
        except ValueError as exc:
            raise ConfigLoadError(f"{name} -> {target} must be an integer") from exc
    if kind is float:
        try:
            return float(text)
        except ValueError as exc:
            raise ConfigLoadError(f"{name} -> {target} must be a number") from exc
    return text


def _override_layer(overrides: Mapping[str, object]) -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for key in sorted(overrides):
        path = tuple(part for part in key.split(".") if part)
        if not path:
            raise ConfigLoadError(f"invalid override key {key!r}")
        _assign(layer, path, overrides[key])
    return layer


def _assign(target: dict[str, Any], path: tuple[str, ...], value: object) -> None:
    *parents, leaf = path
    for part in parents:
        child = target.get(part)
        if not isinstance(child, dict):
            child = target[part] = {}
        target = child
    target[leaf] = value


def _absolute(raw: str, base_dir: Path) -> str:
    candidate = Path(os.path.expandvars(raw)).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return Path(os.path.normpath(candidate)).as_posix()


__all__ = [
    "ConfigLoadError",
    "dump_effective_config",
    "env_var_name",
    "load_config",
    "normalize_paths",
]
