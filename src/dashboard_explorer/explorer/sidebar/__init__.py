"""Explorer sidebar: the tab catalog and the navigator that walks it."""

from dashboard_explorer.explorer.sidebar.navigator import (
    NotFound,
    NotFoundReason,
    PreconditionError,
    TabNavigator,
    TabResult,
)
from dashboard_explorer.explorer.sidebar.tabs import (
    SIDEBAR_TABS,
    Tab,
    TabCatalog,
    TabCatalogError,
    catalog_from_config,
    default_sidebar_catalog,
    load_tab_catalog,
)

__all__ = [
    "NotFound",
    "NotFoundReason",
    "PreconditionError",
    "SIDEBAR_TABS",
    "Tab",
    "TabCatalog",
    "TabCatalogError",
    "TabNavigator",
    "TabResult",
    "catalog_from_config",
    "default_sidebar_catalog",
    "load_tab_catalog",
]
