"""Explorer runtime configuration: schema, defaults, and loader."""

from dashboard_explorer.config.loader import (
    ConfigLoadError,
    dump_effective_config,
    env_var_name,
    load_config,
    normalize_paths,
)
from dashboard_explorer.config.schema import (
    DEFAULT_CONFIG,
    ConfigSchemaVersion,
    ConfigValidationError,
    ConfigValidationIssue,
    ConfigValidationResult,
    ExplorerConfig,
    assert_valid_config,
    default_config,
    merge_config,
    migration_guidance,
    validate_config,
)

__all__ = [
    "ConfigLoadError",
    "ConfigSchemaVersion",
    "ConfigValidationError",
    "ConfigValidationIssue",
    "ConfigValidationResult",
    "DEFAULT_CONFIG",
    "ExplorerConfig",
    "assert_valid_config",
    "default_config",
    "dump_effective_config",
    "env_var_name",
    "load_config",
    "merge_config",
    "migration_guidance",
    "normalize_paths",
    "validate_config",
]
