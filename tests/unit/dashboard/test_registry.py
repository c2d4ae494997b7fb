"""Unit tests for the schema version registry.

File: tests/unit/dashboard/test_registry.py

Tests:
- Chain order follows registration order, not enumeration order
- Duplicate and unknown version ids are configuration errors
- String ids are coerced into the registry's enumeration
- Empty registries have no earliest/latest version
"""

from __future__ import annotations

from enum import StrEnum

import pytest

from dashboard_explorer.dashboard import (
    DashboardMigrationError,
    DashboardSchemaVersion,
    DuplicateVersionError,
    SchemaRegistry,
    SchemaVersion,
    UnknownVersionError,
    build_dashboard_registry,
)
from dashboard_explorer.dashboard.versions import update_v1, verify_v1


class _Rev(StrEnum):
    R1 = "1"
    R2 = "2"
    R3 = "3"


def _always(document: object) -> bool:
    return True


@pytest.mark.unit
class TestRegistration:
    def test_register_appends_in_call_order(self) -> None:
        registry = SchemaRegistry(_Rev)
        registry.register(SchemaVersion(id=_Rev.R2, verify=_always))
        registry.register(SchemaVersion(id=_Rev.R1, verify=_always))

        assert registry.ids() == (_Rev.R2, _Rev.R1)
        assert registry.earliest.id is _Rev.R2
        assert registry.latest.id is _Rev.R1

    def test_duplicate_registration_is_rejected(self) -> None:
        registry = SchemaRegistry(_Rev)
        registry.register_version(_Rev.R1, _always)

        with pytest.raises(DuplicateVersionError) as excinfo:
            registry.register_version("1", _always)

        assert excinfo.value.version == "1"
        assert len(registry) == 1

    def test_string_ids_are_coerced_to_enum_members(self) -> None:
        registry = SchemaRegistry(_Rev)
        version = registry.register_version("2", _always)

        assert version.id is _Rev.R2
        assert registry.get("2") is version
        assert registry.ids() == (_Rev.R2,)

    def test_register_coerces_raw_id_on_version_object(self) -> None:
        registry = SchemaRegistry(_Rev)
        registry.register(SchemaVersion(id="3", verify=_always))  # type: ignore[arg-type]

        assert registry.latest.id is _Rev.R3

    def test_unknown_id_is_rejected_at_registration(self) -> None:
        registry = SchemaRegistry(_Rev)

        with pytest.raises(UnknownVersionError) as excinfo:
            registry.register_version("9", _always)

        assert excinfo.value.version == "9"
        assert "expected one of: 1, 2, 3" in str(excinfo.value)

    def test_register_version_defaults_to_noop_update(self) -> None:
        registry = SchemaRegistry(_Rev)
        version = registry.register_version(_Rev.R1, _always)
        document = {"type": "dashboard"}

        version.update(document)

        assert document == {"type": "dashboard"}


@pytest.mark.unit
class TestQueries:
    def _registry(self) -> SchemaRegistry[_Rev]:
        return SchemaRegistry(
            _Rev,
            [SchemaVersion(id=rev, verify=_always) for rev in (_Rev.R1, _Rev.R2, _Rev.R3)],
        )

    def test_versions_after(self) -> None:
        registry = self._registry()

        assert [v.id for v in registry.versions_after(_Rev.R1)] == [_Rev.R2, _Rev.R3]
        assert [v.id for v in registry.versions_after("2")] == [_Rev.R3]
        assert registry.versions_after(_Rev.R3) == ()

    def test_position_of_unregistered_member(self) -> None:
        registry = SchemaRegistry(_Rev, [SchemaVersion(id=_Rev.R1, verify=_always)])

        with pytest.raises(UnknownVersionError, match="not registered"):
            registry.position(_Rev.R2)

    def test_contains(self) -> None:
        registry = SchemaRegistry(_Rev, [SchemaVersion(id=_Rev.R1, verify=_always)])

        assert _Rev.R1 in registry
        assert "1" in registry
        assert "2" not in registry
        assert "nope" not in registry
        assert 1 not in registry

    def test_iteration_is_a_snapshot(self) -> None:
        registry = self._registry()
        seen = []
        for version in registry:
            seen.append(version.id)

        assert seen == [_Rev.R1, _Rev.R2, _Rev.R3]

    def test_non_string_ids_are_unknown(self) -> None:
        registry = self._registry()

        with pytest.raises(UnknownVersionError, match="must be a string"):
            registry.resolve(2)

    def test_empty_registry_has_no_bounds(self) -> None:
        registry = SchemaRegistry(_Rev)

        with pytest.raises(DashboardMigrationError, match="no _Rev versions"):
            _ = registry.earliest
        with pytest.raises(DashboardMigrationError):
            _ = registry.latest


@pytest.mark.unit
class TestDashboardVersions:
    def test_builtin_registry_holds_v1_only(self) -> None:
        registry = build_dashboard_registry()

        assert registry.ids() == (DashboardSchemaVersion.V1,)
        assert registry.version_type is DashboardSchemaVersion

    def test_builtin_registries_are_independent(self) -> None:
        first = build_dashboard_registry()
        second = build_dashboard_registry()

        assert first is not second
        assert first.latest is second.latest

    def test_v1_verify_requires_type_field(self) -> None:
        assert verify_v1({"type": "dashboard"}) is True
        assert verify_v1({"type": None}) is True
        assert verify_v1({"title": "untitled"}) is False

    def test_v1_verify_does_not_mutate(self) -> None:
        document = {"title": "untitled"}
        verify_v1(document)
        assert document == {"title": "untitled"}

    def test_v1_update_is_noop(self) -> None:
        document = {"title": "untitled"}
        update_v1(document)
        assert document == {"title": "untitled"}
