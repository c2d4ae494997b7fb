"""Explorer editor state — pure data, owned by the explorer controller.

File: src/dashboard_explorer/explorer/state.py

Components that only need to know whether a widget is selected depend on
the ``WidgetSelectionState`` protocol, never on ``ExplorerState`` itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@runtime_checkable
class WidgetSelectionState(Protocol):
    """Read-only view of the editor's widget selection."""

    @property
    def widget_selected(self) -> bool: ...


@dataclass
class WidgetsState:
    """Widget selection as tracked by the explorer."""

    selected_id: str | None = None


@dataclass
class ExplorerState:
    """Root explorer state — mutated only by its owner."""

    widgets: WidgetsState = field(default_factory=WidgetsState)

    @property
    def widget_selected(self) -> bool:
        return bool(self.widgets.selected_id)


__all__ = ["ExplorerState", "WidgetSelectionState", "WidgetsState"]
