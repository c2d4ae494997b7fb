"""Dashboard schema revisions, with their verify and update scripts.

v1   2013-Aug    Initial release of the dashboard explorer. Supports widgets
                 with datasource and chart top-level elements.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

from dashboard_explorer.constants import DOCUMENT_TYPE_FIELD
from dashboard_explorer.dashboard.registry import Document, SchemaRegistry, SchemaVersion


class DashboardSchemaVersion(StrEnum):
    """Every dashboard schema revision this build understands, oldest first."""

    V1 = "1"


def verify_v1(dashboard: Document) -> bool:
    return DOCUMENT_TYPE_FIELD in dashboard


def update_v1(dashboard: Document) -> None:
    """First revision; nothing to transform from."""


DASHBOARD_SCHEMA_VERSIONS: Final[tuple[SchemaVersion[DashboardSchemaVersion], ...]] = (
    SchemaVersion(id=DashboardSchemaVersion.V1, verify=verify_v1, update=update_v1),
)


def build_dashboard_registry() -> SchemaRegistry[DashboardSchemaVersion]:
    """Return a fresh registry holding every known dashboard revision in order."""

    return SchemaRegistry(DashboardSchemaVersion, DASHBOARD_SCHEMA_VERSIONS)


__all__ = [
    "DASHBOARD_SCHEMA_VERSIONS",
    "DashboardSchemaVersion",
    "build_dashboard_registry",
    "update_v1",
    "verify_v1",
]
