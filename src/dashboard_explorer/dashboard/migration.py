"""
dashboard-explorer — document migration engine.

File: src/dashboard_explorer/dashboard/migration.py

Purpose
- Walk a loaded dashboard document from its declared schema version to the
  latest registered version, one verify/update pair at a time.

Functional requirements
- Absent ``version`` means the earliest registered version.
- Steps run strictly in chain order; the first failing ``verify`` aborts the
  run with ``InvalidDocumentError`` naming that version.
- Migration is not transactional: a failed run leaves the document partially
  transformed and unusable.
- On success ``version`` is always set to the latest id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic

import structlog

from dashboard_explorer.constants import DOCUMENT_VERSION_FIELD
from dashboard_explorer.dashboard.errors import InvalidDocumentError
from dashboard_explorer.dashboard.registry import Document, SchemaRegistry, VersionT


@dataclass(frozen=True, slots=True)
class MigrationReport(Generic[VersionT]):
    """Outcome of one successful ``migrate`` call."""

    from_version: VersionT
    to_version: VersionT
    applied: tuple[VersionT, ...]

    @property
    def changed(self) -> bool:
        return bool(self.applied)


class MigrationEngine(Generic[VersionT]):
    """Apply a registry's verify/update chain to documents."""

    def __init__(
        self,
        registry: SchemaRegistry[VersionT],
        *,
        logger: Any | None = None,
    ) -> None:
        self._registry = registry
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def registry(self) -> SchemaRegistry[VersionT]:
        return self._registry

    def declared_version(self, document: Document) -> VersionT:
        """Return the version ``document`` claims, defaulting to the earliest."""

        if DOCUMENT_VERSION_FIELD not in document:
            return self._registry.earliest.id
        raw = document[DOCUMENT_VERSION_FIELD]
        version_id = self._registry.resolve(raw)
        # Raises UnknownVersionError for enum members that were never registered.
        self._registry.position(version_id)
        return version_id

    def needs_migration(self, document: Document) -> bool:
        """Whether ``migrate`` would run at least one step. Does not mutate."""

        return bool(self._registry.versions_after(self.declared_version(document)))

    def is_current(self, document: Document) -> bool:
        """Whether ``document`` already declares and satisfies the latest version."""

        latest = self._registry.latest
        return self.declared_version(document) == latest.id and latest.verify(document)

    def migrate(self, document: Document) -> MigrationReport[VersionT]:
        """Migrate ``document`` in place to the latest registered version."""

        from_version = self.declared_version(document)
        latest = self._registry.latest.id
        applied: list[VersionT] = []

        for step in self._registry.versions_after(from_version):
            step.update(document)
            if not step.verify(document):
                self._logger.warning(
                    "dashboard_migration_failed",
                    from_version=from_version.value,
                    failed_version=step.id.value,
                    applied=[item.value for item in applied],
                )
                raise InvalidDocumentError(
                    f"document failed verification for schema version {step.id.value!r}",
                    version=step.id.value,
                )
            applied.append(step.id)
            self._logger.debug("dashboard_migration_step", version=step.id.value)

        document[DOCUMENT_VERSION_FIELD] = latest.value

        if applied:
            self._logger.info(
                "dashboard_migrated",
                from_version=from_version.value,
                to_version=latest.value,
                steps=len(applied),
            )
        return MigrationReport(
            from_version=from_version,
            to_version=latest,
            applied=tuple(applied),
        )


__all__ = ["MigrationEngine", "MigrationReport"]
