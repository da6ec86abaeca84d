"""HTTP API.

FastAPI routers exposing catalog browsing over the address format.
"""

from catalog_browser.api.catalog import router as catalog_router
from catalog_browser.api.health import router as health_router

__all__ = ["catalog_router", "health_router"]
