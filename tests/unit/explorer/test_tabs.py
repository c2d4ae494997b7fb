"""Unit tests for sidebar tab descriptors and catalogs.

File: tests/unit/explorer/test_tabs.py

Tests:
- The built-in catalog order and widget split
- Catalog construction rejects empty and duplicate-id input
- Membership and index lookup are identity based
- YAML catalogs are validated entry by entry
"""

from __future__ import annotations

from pathlib import Path

import pytest

from dashboard_explorer.explorer.sidebar import (
    SIDEBAR_TABS,
    Tab,
    TabCatalog,
    TabCatalogError,
    catalog_from_config,
    default_sidebar_catalog,
    load_tab_catalog,
)
from dashboard_explorer.explorer.sidebar.tabs import parse_tab_mapping


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.unit
class TestBuiltinCatalog:
    def test_order(self) -> None:
        catalog = default_sidebar_catalog()

        assert [tab.id for tab in catalog] == [
            "dashboard",
            "container",
            "widget.config",
            "widget.data.filter",
            "widget.data.result",
            "widget.chart",
            "widget.columns",
        ]

    def test_widget_split(self) -> None:
        catalog = default_sidebar_catalog()

        assert [tab.id for tab in catalog.non_widget_tabs()] == ["dashboard", "container"]
        assert len(catalog.widget_tabs()) == 5
        # Forward wrap needs a plain tab at the head.
        assert catalog[0].require_widget is False

    def test_catalogs_share_tab_objects(self) -> None:
        assert default_sidebar_catalog()[0] is SIDEBAR_TABS[0]

    def test_payload_uses_camel_case(self) -> None:
        payload = default_sidebar_catalog().get("widget.chart").to_payload()

        assert payload == {
            "id": "widget.chart",
            "title": "Chart Config",
            "iconClass": "fa fa-bar-chart",
            "hint": "Chart type and settings",
            "requireWidget": True,
            "tabClass": "bqgviz-tab",
            "panelTitleClass": "bqgviz-panel-title",
            "panelClass": "bqgviz-panel",
            "toolbarClass": "bqgviz-toolbar",
        }

    def test_catalog_payload_preserves_order(self) -> None:
        payload = default_sidebar_catalog().to_payload()
        assert [item["id"] for item in payload] == [tab.id for tab in SIDEBAR_TABS]


@pytest.mark.unit
class TestCatalog:
    def test_empty_catalog_is_rejected(self) -> None:
        with pytest.raises(TabCatalogError, match="at least one tab"):
            TabCatalog([])

    def test_duplicate_ids_are_rejected(self) -> None:
        with pytest.raises(TabCatalogError, match="duplicate tab id 'a'"):
            TabCatalog([Tab(id="a", title="A"), Tab(id="a", title="Again")])

    def test_membership_by_identity_and_id(self) -> None:
        tab = Tab(id="a", title="A")
        catalog = TabCatalog([tab])

        assert tab in catalog
        assert Tab(id="a", title="A") not in catalog
        assert "a" in catalog
        assert "b" not in catalog
        assert 1 not in catalog

    def test_index_of_is_identity_based(self) -> None:
        first = Tab(id="a", title="A")
        second = Tab(id="b", title="B")
        catalog = TabCatalog([first, second])

        assert catalog.index_of(second) == 1
        with pytest.raises(ValueError, match="not a member"):
            catalog.index_of(Tab(id="b", title="B"))

    def test_get_unknown_id(self) -> None:
        catalog = default_sidebar_catalog()

        with pytest.raises(KeyError, match="unknown tab id"):
            catalog.get("nope")

    def test_catalog_accepts_any_iterable(self) -> None:
        catalog = TabCatalog(tab for tab in SIDEBAR_TABS[:2])

        assert len(catalog) == 2
        assert catalog.tabs == SIDEBAR_TABS[:2]
        assert repr(catalog) == "TabCatalog([dashboard, container])"


@pytest.mark.unit
class TestYamlCatalog:
    def test_load_valid_catalog(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "tabs.yaml",
            "- id: overview\n"
            "  title: Overview\n"
            "  iconClass: fa fa-home\n"
            "- id: widget.props\n"
            "  title: Properties\n"
            "  requireWidget: true\n",
        )

        catalog = load_tab_catalog(path)

        assert [tab.id for tab in catalog] == ["overview", "widget.props"]
        assert catalog[0].icon_class == "fa fa-home"
        assert catalog[0].require_widget is False
        assert catalog[1].require_widget is True
        assert catalog[1].hint == ""

    def test_top_level_must_be_sequence(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "tabs.yaml", "id: overview\n")

        with pytest.raises(TabCatalogError, match="expected top-level YAML sequence"):
            load_tab_catalog(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "tabs.yaml", "- id: [unterminated\n")

        with pytest.raises(TabCatalogError, match="invalid YAML"):
            load_tab_catalog(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TabCatalogError, match="unable to read"):
            load_tab_catalog(tmp_path / "absent.yaml")

    def test_empty_sequence_is_rejected(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "tabs.yaml", "[]\n")

        with pytest.raises(TabCatalogError, match="at least one tab"):
            load_tab_catalog(path)

    def test_duplicate_ids_name_the_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "tabs.yaml",
            "- {id: a, title: A}\n- {id: a, title: B}\n",
        )

        with pytest.raises(TabCatalogError) as excinfo:
            load_tab_catalog(path)

        assert "tabs.yaml" in str(excinfo.value)
        assert "duplicate tab id" in str(excinfo.value)

    def test_entry_errors_name_their_position(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "tabs.yaml",
            "- {id: a, title: A}\n- {id: b, title: B, requireWidget: 'yes'}\n",
        )

        with pytest.raises(TabCatalogError, match=r"tabs\.yaml\[1\]\.requireWidget: expected bool"):
            load_tab_catalog(path)


@pytest.mark.unit
class TestParseTabMapping:
    def test_requires_mapping(self) -> None:
        with pytest.raises(TabCatalogError, match="expected mapping, got list"):
            parse_tab_mapping(["a"], location="entry")

    def test_missing_required_fields(self) -> None:
        with pytest.raises(TabCatalogError, match=r"missing required fields: \['title'\]"):
            parse_tab_mapping({"id": "a"}, location="entry")

    def test_unknown_fields(self) -> None:
        with pytest.raises(TabCatalogError, match="unexpected fields: \\['icon'\\]"):
            parse_tab_mapping({"id": "a", "title": "A", "icon": "x"}, location="entry")

    def test_blank_id(self) -> None:
        with pytest.raises(TabCatalogError, match=r"entry\.id: must not be empty"):
            parse_tab_mapping({"id": "  ", "title": "A"}, location="entry")

    def test_non_string_field(self) -> None:
        with pytest.raises(TabCatalogError, match=r"entry\.hint: expected string, got int"):
            parse_tab_mapping({"id": "a", "title": "A", "hint": 3}, location="entry")

    def test_non_string_keys(self) -> None:
        with pytest.raises(TabCatalogError, match="keys must be strings"):
            parse_tab_mapping({"id": "a", "title": "A", 1: "x"}, location="entry")

    def test_payload_round_trip_of_builtin_tab(self) -> None:
        tab = SIDEBAR_TABS[2]
        assert parse_tab_mapping(tab.to_payload(), location="entry") == tab


@pytest.mark.unit
class TestCatalogFromConfig:
    def test_empty_path_uses_builtin(self) -> None:
        catalog = catalog_from_config({"sidebar": {"catalog_path": ""}})
        assert catalog.tabs == SIDEBAR_TABS

    def test_missing_section_uses_builtin(self) -> None:
        assert catalog_from_config({}).tabs == SIDEBAR_TABS

    def test_configured_path_is_loaded(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "tabs.yaml", "- {id: only, title: Only}\n")

        catalog = catalog_from_config({"sidebar": {"catalog_path": str(path)}})

        assert [tab.id for tab in catalog] == ["only"]
