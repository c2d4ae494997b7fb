"""
dashboard-explorer — sidebar tab navigation.

File: src/dashboard_explorer/explorer/sidebar/navigator.py

Purpose
- Track the selected sidebar tab and compute the first, last, next and
  previous tab for the editor's navigation commands.

Navigation rules
- While a widget is selected every tab is reachable, in catalog order.
- While no widget is selected only tabs without ``require_widget`` are
  reachable; the scan skips the others.
- Forward wrap always lands on the catalog's absolute first tab. Backward
  wrap lands on ``get_last_tab()``, which is filter-aware. The asymmetry is
  intentional and must be preserved.
- The widget-selection flag is owned elsewhere and may change between any
  two calls, so it is read on every call and never cached.

Error tiers
- Soft: no qualifying tab exists. A diagnostic is logged and a ``NotFound``
  value is returned.
- Hard: the selected tab is not a member of the catalog. ``PreconditionError``
  is raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

import structlog

from dashboard_explorer.explorer.sidebar.tabs import Tab, TabCatalog
from dashboard_explorer.explorer.state import WidgetSelectionState


class PreconditionError(RuntimeError):
    """Raised when the navigator's selected tab is missing from its catalog."""

    def __init__(self, message: str, *, tab_id: str | None = None) -> None:
        super().__init__(message)
        self.tab_id = tab_id


class NotFoundReason(StrEnum):
    NO_WIDGET_TABS = "no_widget_tabs"
    NO_NON_WIDGET_TABS = "no_non_widget_tabs"


@dataclass(frozen=True, slots=True)
class NotFound:
    """Absent navigation result; the catalog has no qualifying tab."""

    reason: NotFoundReason
    message: str


TabResult: TypeAlias = Tab | NotFound


class TabNavigator:
    """Stateful cursor over a fixed ``TabCatalog``."""

    def __init__(
        self,
        catalog: TabCatalog,
        widget_selection: WidgetSelectionState,
        *,
        logger: Any | None = None,
    ) -> None:
        self._catalog = catalog
        self._widget_selection = widget_selection
        self._selected: Tab | None = None
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    @property
    def catalog(self) -> TabCatalog:
        return self._catalog

    @property
    def selected_tab(self) -> Tab | None:
        return self._selected

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_tab(self, tab: Tab | None) -> None:
        """Mark ``tab`` as selected. ``tab`` must belong to the catalog, or be None."""
        self._selected = tab

    def select_tab_by_id(self, tab_id: str) -> Tab:
        tab = self._catalog.get(tab_id)
        self.select_tab(tab)
        return tab

    def toggle_tab(self, tab: Tab | None) -> None:
        """Deselect ``tab`` if it is the selected one, otherwise select it."""
        if self._selected is tab:
            self._selected = None
        else:
            self.select_tab(tab)

    def select_next_tab(self) -> Tab:
        tab = self.get_next_tab()
        self.select_tab(tab)
        return tab

    def select_previous_tab(self) -> TabResult:
        """Move to the previous tab; a ``NotFound`` leaves the selection as is."""
        result = self.get_previous_tab()
        if isinstance(result, Tab):
            self.select_tab(result)
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_first_widget_tab(self) -> TabResult:
        for tab in self._catalog:
            if tab.require_widget:
                return tab

        return self._not_found(
            NotFoundReason.NO_WIDGET_TABS,
            "get_first_widget_tab failed: no widget tabs available",
        )

    def get_first_tab(self) -> Tab:
        return self._catalog[0]

    def get_last_tab(self) -> TabResult:
        if self._widget_is_selected():
            return self._catalog[len(self._catalog) - 1]

        for index in range(len(self._catalog) - 1, -1, -1):
            tab = self._catalog[index]
            if not tab.require_widget:
                return tab

        return self._not_found(
            NotFoundReason.NO_NON_WIDGET_TABS,
            "get_last_tab failed: no non-widget tabs available",
        )

    def get_next_tab(self) -> Tab:
        if self._selected is not None:
            selected_index = self._selected_index(self._selected)

            if self._widget_is_selected():
                if selected_index + 1 < len(self._catalog):
                    return self._catalog[selected_index + 1]
            else:
                for index in range(selected_index + 1, len(self._catalog)):
                    tab = self._catalog[index]
                    if not tab.require_widget:
                        return tab

        return self.get_first_tab()

    def get_previous_tab(self) -> TabResult:
        if self._selected is not None:
            selected_index = self._selected_index(self._selected)

            if self._widget_is_selected():
                if selected_index - 1 >= 0:
                    return self._catalog[selected_index - 1]
            else:
                for index in range(selected_index - 1, -1, -1):
                    tab = self._catalog[index]
                    if not tab.require_widget:
                        return tab

        return self.get_last_tab()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _widget_is_selected(self) -> bool:
        return bool(self._widget_selection.widget_selected)

    def _selected_index(self, selected: Tab) -> int:
        try:
            return self._catalog.index_of(selected)
        except ValueError as exc:
            raise PreconditionError(
                f"cannot find selected tab {selected.id!r} in catalog",
                tab_id=selected.id,
            ) from exc

    def _not_found(self, reason: NotFoundReason, message: str) -> NotFound:
        self._logger.warning("sidebar_tab_not_found", reason=reason.value, detail=message)
        return NotFound(reason=reason, message=message)


__all__ = [
    "NotFound",
    "NotFoundReason",
    "PreconditionError",
    "TabNavigator",
    "TabResult",
]
