"""Infrastructure layer.

Configuration, logging, persistence and the concrete product stores.
"""

from catalog_browser.infrastructure.config import Settings, settings
from catalog_browser.infrastructure.memory_store import InMemoryProductStore
from catalog_browser.infrastructure.rest_store import RestProductStore
from catalog_browser.infrastructure.sql_store import SqlProductStore
from catalog_browser.infrastructure.stores import create_product_store

__all__ = [
    "InMemoryProductStore",
    "RestProductStore",
    "Settings",
    "SqlProductStore",
    "create_product_store",
    "settings",
]
