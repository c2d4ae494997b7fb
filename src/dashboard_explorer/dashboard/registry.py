"""Ordered schema version chain keyed by a closed version enumeration.

Versions are totally ordered by registration order. The registry is generic
over the ``StrEnum`` that names the versions, so a typo in a version id fails
at registration time instead of silently creating a new chain entry.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, MutableMapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, Generic, TypeAlias, TypeVar

from dashboard_explorer.dashboard.errors import (
    DashboardMigrationError,
    DuplicateVersionError,
    UnknownVersionError,
)

Document: TypeAlias = MutableMapping[str, Any]
VerifyFn: TypeAlias = Callable[[Document], bool]
UpdateFn: TypeAlias = Callable[[Document], None]

VersionT = TypeVar("VersionT", bound=StrEnum)


def _no_update(document: Document) -> None:
    return None


@dataclass(frozen=True, slots=True)
class SchemaVersion(Generic[VersionT]):
    """One revision's contract.

    ``verify`` must not mutate the document. ``update`` transforms a document
    of the previous revision in place so that it satisfies this revision's
    ``verify``.
    """

    id: VersionT
    verify: VerifyFn
    update: UpdateFn = _no_update


class SchemaRegistry(Generic[VersionT]):
    """Sequential chain of ``SchemaVersion`` entries."""

    def __init__(
        self,
        version_type: type[VersionT],
        versions: Iterable[SchemaVersion[VersionT]] = (),
    ) -> None:
        self._version_type = version_type
        self._versions: list[SchemaVersion[VersionT]] = []
        self._positions: dict[VersionT, int] = {}
        for version in versions:
            self.register(version)

    @property
    def version_type(self) -> type[VersionT]:
        return self._version_type

    def register(self, version: SchemaVersion[VersionT]) -> None:
        """Append ``version`` to the end of the chain."""

        version_id = self.resolve(version.id)
        if version_id in self._positions:
            raise DuplicateVersionError(
                f"schema version {version_id.value!r} is already registered",
                version=version_id.value,
            )
        if version.id is not version_id:
            version = replace(version, id=version_id)
        self._positions[version_id] = len(self._versions)
        self._versions.append(version)

    def register_version(
        self,
        version_id: VersionT | str,
        verify: VerifyFn,
        update: UpdateFn | None = None,
    ) -> SchemaVersion[VersionT]:
        """Build a ``SchemaVersion`` from its parts and register it."""

        version = SchemaVersion(
            id=self.resolve(version_id),
            verify=verify,
            update=update if update is not None else _no_update,
        )
        self.register(version)
        return version

    def resolve(self, raw: object) -> VersionT:
        """Coerce a raw version identifier into the registry's enumeration."""

        if isinstance(raw, self._version_type):
            return raw
        if not isinstance(raw, str):
            raise UnknownVersionError(
                f"schema version must be a string, got {type(raw).__name__}",
                version=None if raw is None else repr(raw),
            )
        try:
            return self._version_type(raw)
        except ValueError as exc:
            known = ", ".join(member.value for member in self._version_type)
            raise UnknownVersionError(
                f"unknown schema version {raw!r}; expected one of: {known}",
                version=raw,
            ) from exc

    def get(self, version_id: VersionT | str) -> SchemaVersion[VersionT]:
        return self._versions[self.position(version_id)]

    def position(self, version_id: VersionT | str) -> int:
        resolved = self.resolve(version_id)
        index = self._positions.get(resolved)
        if index is None:
            raise UnknownVersionError(
                f"schema version {resolved.value!r} is not registered",
                version=resolved.value,
            )
        return index

    def versions_after(self, version_id: VersionT | str) -> tuple[SchemaVersion[VersionT], ...]:
        """Return every version after ``version_id`` in chain order."""

        return tuple(self._versions[self.position(version_id) + 1 :])

    def ids(self) -> tuple[VersionT, ...]:
        return tuple(version.id for version in self._versions)

    @property
    def earliest(self) -> SchemaVersion[VersionT]:
        self._require_non_empty()
        return self._versions[0]

    @property
    def latest(self) -> SchemaVersion[VersionT]:
        self._require_non_empty()
        return self._versions[-1]

    def __len__(self) -> int:
        return len(self._versions)

    def __iter__(self) -> Iterator[SchemaVersion[VersionT]]:
        return iter(tuple(self._versions))

    def __contains__(self, version_id: object) -> bool:
        try:
            resolved = self.resolve(version_id)
        except UnknownVersionError:
            return False
        return resolved in self._positions

    def _require_non_empty(self) -> None:
        if not self._versions:
            raise DashboardMigrationError(
                f"no {self._version_type.__name__} versions are registered"
            )


__all__ = [
    "Document",
    "SchemaRegistry",
    "SchemaVersion",
    "UpdateFn",
    "VerifyFn",
    "VersionT",
]
