"""Dashboard document schema versions and the migration chain that applies them."""

from dashboard_explorer.dashboard.errors import (
    DashboardMigrationError,
    DuplicateVersionError,
    InvalidDocumentError,
    UnknownVersionError,
)
from dashboard_explorer.dashboard.migration import MigrationEngine, MigrationReport
from dashboard_explorer.dashboard.registry import Document, SchemaRegistry, SchemaVersion
from dashboard_explorer.dashboard.versions import (
    DASHBOARD_SCHEMA_VERSIONS,
    DashboardSchemaVersion,
    build_dashboard_registry,
)

__all__ = [
    "DASHBOARD_SCHEMA_VERSIONS",
    "DashboardMigrationError",
    "DashboardSchemaVersion",
    "Document",
    "DuplicateVersionError",
    "InvalidDocumentError",
    "MigrationEngine",
    "MigrationReport",
    "SchemaRegistry",
    "SchemaVersion",
    "UnknownVersionError",
    "build_dashboard_registry",
]
