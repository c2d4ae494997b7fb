"""Explorer editor state and sidebar navigation."""

from dashboard_explorer.explorer.state import ExplorerState, WidgetSelectionState, WidgetsState

__all__ = ["ExplorerState", "WidgetSelectionState", "WidgetsState"]
