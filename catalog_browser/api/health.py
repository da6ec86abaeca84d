"""Liveness and readiness endpoints.

``/ready`` runs a one-row, uncounted catalog query so a load balancer
stops routing to an instance whose product store is unreachable.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from catalog_browser.api.catalog import get_product_store
from catalog_browser.api.schemas import ErrorResponse
from catalog_browser.browsing.criteria import FilterCriteria
from catalog_browser.browsing.query_builder import build_query
from catalog_browser.domain.exceptions import QueryExecutionError
from catalog_browser.domain.store import ProductStore
from catalog_browser.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter()


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str
    service: str
    version: str
    store_backend: str


class ReadinessResponse(BaseModel):
    """Readiness response."""

    status: str
    store_backend: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report that the process is up, without touching the store."""
    return HealthResponse(
        status="healthy",
        service="catalog-browser",
        version=settings.api_version,
        store_backend=settings.store_backend,
    )


@router.get("/ready", response_model=ReadinessResponse, responses={503: {"model": ErrorResponse}})
async def readiness_check(store: ProductStore = Depends(get_product_store)) -> ReadinessResponse:
    """Check that the product store answers a catalog query.

    Raises:
        HTTPException: 503 if the store query fails.
    """
    try:
        await store.execute(build_query(FilterCriteria(), 1, 1, with_count=False))
    except QueryExecutionError as e:
        logger.warning("Readiness check failed", error=e.message, store_backend=settings.store_backend)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error_code": "STORE_UNAVAILABLE",
                "message": "Product store is not reachable",
                "details": [e.details],
            },
        ) from e
    return ReadinessResponse(status="ready", store_backend=settings.store_backend)
