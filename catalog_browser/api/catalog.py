"""Catalog browsing endpoints.

Serves one page of results for an address query string, the same
representation the storefront keeps in its address bar.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status

from catalog_browser.api.schemas import CatalogPageResponse, ErrorResponse
from catalog_browser.browsing.page_controller import PageController
from catalog_browser.browsing.url_sync import parse, serialize
from catalog_browser.domain.state_machines import LoadStatus
from catalog_browser.domain.store import ProductStore
from catalog_browser.infrastructure.config import settings
from catalog_browser.infrastructure.stores import create_product_store

logger = structlog.get_logger()

router = APIRouter(prefix="/catalog", tags=["Catalog"])


_product_store: ProductStore | None = None


def get_product_store() -> ProductStore:
    """Get the configured product store singleton.

    Returns:
        ProductStore instance.
    """
    global _product_store
    if _product_store is None:
        _product_store = create_product_store(settings)
    return _product_store


@router.get(
    "/products",
    response_model=CatalogPageResponse,
    responses={502: {"model": ErrorResponse}},
)
async def browse_products(
    request: Request,
    store: ProductStore = Depends(get_product_store),
) -> CatalogPageResponse:
    """Get one page of catalog results.

    Accepts the address keys ``search``, ``category``, ``sort``,
    ``onSale`` and ``page``. Malformed values fall back to defaults.

    Args:
        request: Incoming request; its query string is the address.
        store: Product store.

    Returns:
        Page of products with pagination metadata.

    Raises:
        HTTPException: 502 if the product store query fails.
    """
    criteria, page = parse(str(request.url.query))
    controller = PageController(store, settings.page_size, criteria=criteria)

    if page > 1:
        state = await controller.go_to_page(page)
    else:
        state = await controller.reload()

    if state.status is LoadStatus.FAILED:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error_code": "QUERY_FAILED",
                "message": state.error or "Product query failed",
                "details": [],
            },
        )

    address = serialize(criteria, state.page)
    logger.info(
        "Catalog page served",
        address=address,
        page=state.page,
        total_count=state.total_count,
    )
    return CatalogPageResponse.from_state(state, address=address)
