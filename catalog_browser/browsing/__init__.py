"""Catalog browsing and pagination controller.

Criteria store, search debouncer, query builder, page controller,
address sync and view preference persistence.
"""

from catalog_browser.browsing.criteria import (
    AdvancedFilters,
    CriteriaStore,
    FilterCriteria,
    PriceRange,
    SortMode,
    current_max_price,
)
from catalog_browser.browsing.debouncer import Debouncer
from catalog_browser.browsing.page_controller import PageController, PageState
from catalog_browser.browsing.preferences import (
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
    PreferencePersistence,
    ViewDensity,
)
from catalog_browser.browsing.query_builder import build_query
from catalog_browser.browsing.session import CatalogBrowser
from catalog_browser.browsing.url_sync import InMemoryAddressBar, UrlSync, parse, serialize

__all__ = [
    # Criteria
    "AdvancedFilters",
    "CriteriaStore",
    "FilterCriteria",
    "PriceRange",
    "SortMode",
    "current_max_price",
    # Debounce
    "Debouncer",
    # Query
    "build_query",
    # Pagination
    "PageController",
    "PageState",
    # Address
    "InMemoryAddressBar",
    "UrlSync",
    "parse",
    "serialize",
    # Preferences
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "PreferencePersistence",
    "ViewDensity",
    # Session
    "CatalogBrowser",
]
