"""Sidebar tab descriptors and the fixed, ordered catalog that holds them.

Only ``id`` and ``require_widget`` mean anything to navigation. The other
fields are presentation metadata handed to the rendering layer untouched,
under the camelCase names it expects (see ``Tab.to_payload``).
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TypeAlias, cast

import yaml

PathLike: TypeAlias = str | os.PathLike[str]


class TabCatalogError(ValueError):
    """Raised when a tab catalog or one of its entries is malformed."""


@dataclass(frozen=True, slots=True)
class Tab:
    """One editor sidebar panel."""

    id: str
    title: str
    icon_class: str = ""
    hint: str = ""
    require_widget: bool = False
    tab_class: str = ""
    panel_title_class: str = ""
    panel_class: str = ""
    toolbar_class: str = ""

    def to_payload(self) -> dict[str, str | bool]:
        """Return the descriptor surface exposed to the rendering layer."""

        return {
            payload_key: getattr(self, attribute)
            for payload_key, attribute in _PAYLOAD_FIELDS.items()
        }


# camelCase payload key -> Tab attribute
_PAYLOAD_FIELDS: Final[dict[str, str]] = {
    "id": "id",
    "title": "title",
    "iconClass": "icon_class",
    "hint": "hint",
    "requireWidget": "require_widget",
    "tabClass": "tab_class",
    "panelTitleClass": "panel_title_class",
    "panelClass": "panel_class",
    "toolbarClass": "toolbar_class",
}
_REQUIRED_PAYLOAD_FIELDS: Final[frozenset[str]] = frozenset({"id", "title"})


class TabCatalog:
    """Immutable ordered sequence of tabs with unique ids.

    The catalog must not be empty: navigation treats ``tabs[0]`` as the
    anchor every forward wrap lands on.
    """

    __slots__ = ("_by_id", "_tabs")

    def __init__(self, tabs: Iterable[Tab]) -> None:
        ordered = tuple(tabs)
        if not ordered:
            raise TabCatalogError("tab catalog must contain at least one tab")

        by_id: dict[str, Tab] = {}
        for tab in ordered:
            if tab.id in by_id:
                raise TabCatalogError(f"duplicate tab id {tab.id!r}")
            by_id[tab.id] = tab

        self._tabs = ordered
        self._by_id = by_id

    @property
    def tabs(self) -> tuple[Tab, ...]:
        return self._tabs

    def __len__(self) -> int:
        return len(self._tabs)

    def __iter__(self) -> Iterator[Tab]:
        return iter(self._tabs)

    def __getitem__(self, index: int) -> Tab:
        return self._tabs[index]

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Tab):
            return any(tab is item for tab in self._tabs)
        if isinstance(item, str):
            return item in self._by_id
        return False

    def get(self, tab_id: str) -> Tab:
        try:
            return self._by_id[tab_id]
        except KeyError:
            raise KeyError(f"unknown tab id {tab_id!r}") from None

    def index_of(self, tab: Tab) -> int:
        """Position of ``tab`` by identity; ``ValueError`` if it is not a member."""

        for index, candidate in enumerate(self._tabs):
            if candidate is tab:
                return index
        raise ValueError(f"tab {tab.id!r} is not a member of this catalog")

    def widget_tabs(self) -> tuple[Tab, ...]:
        return tuple(tab for tab in self._tabs if tab.require_widget)

    def non_widget_tabs(self) -> tuple[Tab, ...]:
        return tuple(tab for tab in self._tabs if not tab.require_widget)

    def to_payload(self) -> list[dict[str, str | bool]]:
        return [tab.to_payload() for tab in self._tabs]

    def __repr__(self) -> str:
        ids = ", ".join(tab.id for tab in self._tabs)
        return f"TabCatalog([{ids}])"


SIDEBAR_TABS: Final[tuple[Tab, ...]] = (
    Tab(
        id="dashboard",
        title="Dashboard",
        icon_class="fa fa-dashcube",
        hint="Dashboard title and properties",
        tab_class="dashboard-tab",
        panel_title_class="dashboard-panel-title",
        panel_class="dashboard-panel",
        toolbar_class="dashboard-toolbar",
    ),
    Tab(
        id="container",
        title="Container",
        icon_class="fa fa-dropbox",
        hint="Container properties and text",
        tab_class="dashboard-tab",
        panel_title_class="dashboard-panel-title",
        panel_class="dashboard-panel",
        toolbar_class="dashboard-toolbar",
    ),
    Tab(
        id="widget.config",
        title="Widget",
        icon_class="fa fa-cube",
        hint="Widget title and appearance",
        require_widget=True,
        tab_class="widget-tab",
        panel_title_class="widget-panel-title",
        panel_class="widget-panel",
        toolbar_class="widget-toolbar",
    ),
    Tab(
        id="widget.data.filter",
        title="Data Filters",
        icon_class="fa fa-filter",
        hint="Query filters and constraints",
        require_widget=True,
        tab_class="bqgviz-tab",
        panel_title_class="bqgviz-panel-title",
        panel_class="bqgviz-panel",
        toolbar_class="bqgviz-toolbar",
    ),
    Tab(
        id="widget.data.result",
        title="Data Results",
        icon_class="fa fa-table",
        hint="Query columns and results",
        require_widget=True,
        tab_class="bqgviz-tab",
        panel_title_class="bqgviz-panel-title",
        panel_class="bqgviz-panel",
        toolbar_class="bqgviz-toolbar",
    ),
    Tab(
        id="widget.chart",
        title="Chart Config",
        icon_class="fa fa-bar-chart",
        hint="Chart type and settings",
        require_widget=True,
        tab_class="bqgviz-tab",
        panel_title_class="bqgviz-panel-title",
        panel_class="bqgviz-panel",
        toolbar_class="bqgviz-toolbar",
    ),
    Tab(
        id="widget.columns",
        title="Columns",
        icon_class="fa fa-columns",
        hint="Column styling and order",
        require_widget=True,
        tab_class="widget-tab",
        panel_title_class="widget-panel-title",
        panel_class="widget-panel",
        toolbar_class="widget-toolbar",
    ),
)


def default_sidebar_catalog() -> TabCatalog:
    return TabCatalog(SIDEBAR_TABS)


def load_tab_catalog(path: PathLike) -> TabCatalog:
    """Load a catalog from a YAML sequence of camelCase tab mappings."""

    resolved = Path(path)
    try:
        with resolved.open("r", encoding="utf-8") as handle:
            loaded = cast("object", yaml.safe_load(handle))
    except yaml.YAMLError as exc:
        raise TabCatalogError(f"{resolved}: invalid YAML ({exc})") from exc
    except OSError as exc:
        raise TabCatalogError(f"{resolved}: unable to read tab catalog ({exc})") from exc

    if not isinstance(loaded, list):
        raise TabCatalogError(
            f"{resolved}: expected top-level YAML sequence, got {type(loaded).__name__}"
        )

    tabs = [
        parse_tab_mapping(item, location=f"{resolved.name}[{index}]")
        for index, item in enumerate(loaded)
    ]
    try:
        return TabCatalog(tabs)
    except TabCatalogError as exc:
        raise TabCatalogError(f"{resolved}: {exc}") from exc


def catalog_from_config(config: Mapping[str, object]) -> TabCatalog:
    """Resolve the catalog named by ``[sidebar] catalog_path``, else the built-in one."""

    sidebar = config.get("sidebar")
    catalog_path = sidebar.get("catalog_path") if isinstance(sidebar, Mapping) else None
    if isinstance(catalog_path, str) and catalog_path.strip():
        return load_tab_catalog(catalog_path)
    return default_sidebar_catalog()


def parse_tab_mapping(value: object, *, location: str) -> Tab:
    if not isinstance(value, Mapping):
        raise TabCatalogError(f"{location}: expected mapping, got {type(value).__name__}")

    keys = {key for key in value if isinstance(key, str)}
    if len(keys) != len(value):
        raise TabCatalogError(f"{location}: tab keys must be strings")

    missing = sorted(_REQUIRED_PAYLOAD_FIELDS - keys)
    if missing:
        raise TabCatalogError(f"{location}: missing required fields: {missing}")

    unknown = sorted(keys - set(_PAYLOAD_FIELDS))
    if unknown:
        raise TabCatalogError(
            f"{location}: unexpected fields: {unknown}; allowed fields: {sorted(_PAYLOAD_FIELDS)}"
        )

    kwargs: dict[str, str | bool] = {}
    for payload_key, attribute in _PAYLOAD_FIELDS.items():
        if payload_key not in value:
            continue
        item = value[payload_key]
        if payload_key == "requireWidget":
            if not isinstance(item, bool):
                raise TabCatalogError(
                    f"{location}.{payload_key}: expected bool, got {type(item).__name__}"
                )
        elif not isinstance(item, str):
            raise TabCatalogError(
                f"{location}.{payload_key}: expected string, got {type(item).__name__}"
            )
        elif payload_key in _REQUIRED_PAYLOAD_FIELDS and not item.strip():
            raise TabCatalogError(f"{location}.{payload_key}: must not be empty")
        kwargs[attribute] = item

    return Tab(**kwargs)  # type: ignore[arg-type]


__all__ = [
    "SIDEBAR_TABS",
    "Tab",
    "TabCatalog",
    "TabCatalogError",
    "catalog_from_config",
    "default_sidebar_catalog",
    "load_tab_catalog",
    "parse_tab_mapping",
]
