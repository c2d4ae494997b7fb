"""Error taxonomy for the dashboard schema migration chain."""

from __future__ import annotations


class DashboardMigrationError(RuntimeError):
    """Base class for schema registry and migration errors."""

    def __init__(self, message: str, *, version: str | None = None) -> None:
        super().__init__(message)
        self.version = version


class DuplicateVersionError(DashboardMigrationError):
    """Raised when a version id is registered twice."""


class UnknownVersionError(DashboardMigrationError):
    """Raised when a document declares a version the registry does not know."""


class InvalidDocumentError(DashboardMigrationError):
    """Raised when a migration step's post-condition fails.

    The document has already been partially transformed and must be treated
    as unusable by the caller.
    """


__all__ = [
    "DashboardMigrationError",
    "DuplicateVersionError",
    "InvalidDocumentError",
    "UnknownVersionError",
]
