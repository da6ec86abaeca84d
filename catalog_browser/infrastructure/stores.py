"""Product store selection.

Builds the configured product store for the HTTP surface.
"""

import structlog

from catalog_browser.domain.store import ProductStore
from catalog_browser.infrastructure.config import Settings
from catalog_browser.infrastructure.database import get_session_factory
from catalog_browser.infrastructure.rest_store import RestProductStore
from catalog_browser.infrastructure.sql_store import SqlProductStore

logger = structlog.get_logger()


def create_product_store(config: Settings) -> ProductStore:
    """Create the product store named by ``config.store_backend``.

    Args:
        config: Application settings.

    Returns:
        Product store instance.

    Raises:
        ValueError: If the backend name is unknown.
    """
    backend = config.store_backend.lower()
    if backend == "sql":
        logger.info("Using SQL product store")
        return SqlProductStore(get_session_factory())
    if backend == "rest":
        logger.info("Using REST product store", url=config.rest_store_url)
        return RestProductStore(
            config.rest_store_url,
            api_key=config.rest_store_api_key,
            table=config.rest_store_table,
            timeout=config.rest_store_timeout,
        )
    raise ValueError(f"Unknown store backend: {config.store_backend}")
