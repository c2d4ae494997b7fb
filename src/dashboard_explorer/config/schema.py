"""
dashboard-explorer — configuration schema and validation.

File: src/dashboard_explorer/config/schema.py

Purpose
- Define the built-in defaults for ``explorer.toml`` and the strict rules a
  config must satisfy.

Functional requirements
- Validation reports every issue (dotted field path + message), not just the
  first one.
- Unknown keys are rejected so typos surface instead of silently falling back.
- A file declaring another schema version gets migration guidance.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final, Literal, TypeAlias, TypedDict

from dashboard_explorer.constants import CONFIG_SCHEMA_VERSION

ConfigSchemaVersion: Final[int] = CONFIG_SCHEMA_VERSION
LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

# (section, key) pairs resolved relative to the config file's directory.
PATH_FIELDS: Final[tuple[tuple[str, str], ...]] = (
    ("observability", "log_dir"),
    ("sidebar", "catalog_path"),
)


class MetaConfig(TypedDict):
    schema_version: int


class ObservabilityConfig(TypedDict):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"]
    log_dir: str
    log_to_stdout: bool
    redact_secrets: bool


class SidebarConfig(TypedDict):
    catalog_path: str


class ExplorerConfig(TypedDict):
    meta: MetaConfig
    observability: ObservabilityConfig
    sidebar: SidebarConfig


DEFAULT_CONFIG: Final[ExplorerConfig] = {
    "meta": {"schema_version": ConfigSchemaVersion},
    "observability": {
        "log_level": "INFO",
        "log_dir": "logs/",
        "log_to_stdout": True,
        "redact_secrets": True,
    },
    "sidebar": {
        # Empty means the built-in sidebar catalog.
        "catalog_path": "",
    },
}


@dataclass(frozen=True, slots=True)
class ConfigValidationIssue:
    path: str
    message: str


@dataclass(frozen=True, slots=True)
class ConfigValidationResult:
    """``config`` is a normalized copy when valid, else ``None``."""

    config: dict[str, Any] | None
    issues: tuple[ConfigValidationIssue, ...]

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.issues


class ConfigValidationError(ValueError):
    """Raised by ``assert_valid_config``; ``issues`` lists every failure."""

    def __init__(self, issues: Sequence[ConfigValidationIssue]) -> None:
        self.issues = tuple(issues)
        lines = [f"- {issue.path}: {issue.message}" for issue in self.issues]
        super().__init__("invalid config:\n" + ("\n".join(lines) or "unknown validation failure"))


def default_config() -> ExplorerConfig:
    return copy.deepcopy(DEFAULT_CONFIG)


def migration_guidance(found_version: int) -> str:
    if found_version < ConfigSchemaVersion:
        return (
            f"schema version {found_version} is older than supported {ConfigSchemaVersion}; "
            "upgrade explorer.toml to the current schema"
        )
    if found_version > ConfigSchemaVersion:
        return (
            f"schema version {found_version} is newer than supported {ConfigSchemaVersion}; "
            "upgrade dashboard-explorer or use a matching config"
        )
    return f"schema version {found_version} is supported"


def merge_config(base: Mapping[str, object], overlay: Mapping[str, object]) -> dict[str, Any]:
    """Deep-merge ``overlay`` onto a copy of ``base``; tables merge, scalars replace."""

    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in overlay.items():
        if isinstance(value, Mapping):
            current = merged.get(key)
            merged[key] = merge_config(current if isinstance(current, Mapping) else {}, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


# A check returns an error message, or None when the value is acceptable.
_Check: TypeAlias = Callable[[object], str | None]


def _check_schema_version(value: object) -> str | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return f"expected integer, got {type(value).__name__}"
    if value < 1:
        return "must be >= 1"
    if value != ConfigSchemaVersion:
        return migration_guidance(value)
    return None


def _check_log_level(value: object) -> str | None:
    if not isinstance(value, str):
        return f"expected string, got {type(value).__name__}"
    level = value.strip()
    if not level:
        return "must not be empty"
    if level not in LOG_LEVELS:
        return f"invalid value {level!r}; expected one of: {', '.join(sorted(LOG_LEVELS))}"
    return None


def _check_bool(value: object) -> str | None:
    if isinstance(value, bool):
        return None
    return f"expected boolean, got {type(value).__name__}"


def _path_check(*, allow_empty: bool) -> _Check:
    def check(value: object) -> str | None:
        if not isinstance(value, str):
            return f"expected string, got {type(value).__name__}"
        if not allow_empty and not value.strip():
            return "must not be empty"
        if "\x00" in value:
            return "must not contain NUL bytes"
        return None

    return check


_SECTION_CHECKS: Final[dict[str, dict[str, _Check]]] = {
    "meta": {"schema_version": _check_schema_version},
    "observability": {
        "log_level": _check_log_level,
        "log_dir": _path_check(allow_empty=False),
        "log_to_stdout": _check_bool,
        "redact_secrets": _check_bool,
    },
    "sidebar": {"catalog_path": _path_check(allow_empty=True)},
}


def validate_config(config: Mapping[str, object] | object) -> ConfigValidationResult:
    """Check ``config`` against the schema, collecting every issue."""

    if not isinstance(config, Mapping):
        issue = ConfigValidationIssue("<root>", f"expected object, got {type(config).__name__}")
        return ConfigValidationResult(config=None, issues=(issue,))

    issues: list[ConfigValidationIssue] = []
    for name in sorted(set(config) - set(_SECTION_CHECKS), key=str):
        issues.append(ConfigValidationIssue(str(name), "unknown field"))

    for section_name, checks in _SECTION_CHECKS.items():
        if section_name not in config:
            issues.append(ConfigValidationIssue(section_name, "missing required field"))
            continue
        section = config[section_name]
        if not isinstance(section, Mapping):
            found = type(section).__name__
            issues.append(ConfigValidationIssue(section_name, f"expected object, got {found}"))
            continue

        for key in sorted(set(section) - set(checks), key=str):
            issues.append(ConfigValidationIssue(f"{section_name}.{key}", "unknown field"))
        for key, check in checks.items():
            path = f"{section_name}.{key}"
            if key not in section:
                issues.append(ConfigValidationIssue(path, "missing required field"))
                continue
            message = check(section[key])
            if message is not None:
                issues.append(ConfigValidationIssue(path, message))

    if issues:
        return ConfigValidationResult(config=None, issues=tuple(issues))
    return ConfigValidationResult(config=merge_config({}, config), issues=())


def assert_valid_config(config: Mapping[str, object] | object) -> dict[str, Any]:
    """Return the validated config or raise ``ConfigValidationError``."""

    result = validate_config(config)
    if result.config is None:
        raise ConfigValidationError(result.issues)
    return result.config


__all__ = [
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "ExplorerConfig",
    "LOG_LEVELS",
    "PATH_FIELDS",
    "assert_valid_config",
    "default_config",
    "merge_config",
    "migration_guidance",
    "validate_config",
]
