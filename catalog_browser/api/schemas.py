"""API request/response schemas.

Pydantic models for the catalog browsing endpoints.
"""

from typing import Any

from pydantic import BaseModel, Field

from catalog_browser.browsing.page_controller import PageState
from catalog_browser.domain.products import ProductSummary


class ErrorResponse(BaseModel):
    """Standard error response."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[Any] = Field(default_factory=list, description="Error details")
    request_id: str | None = Field(None, description="Request correlation ID")


class ProductSummaryResponse(BaseModel):
    """Product as listed in the catalog."""

    id: str
    name: str
    price: float
    compare_at_price: float | None = None
    discount_pct: float | None = None
    stock_qty: int
    rating: float | None = None
    image_url: str | None = None
    category_id: str
    brand: str | None = None

    @classmethod
    def from_summary(cls, product: ProductSummary) -> "ProductSummaryResponse":
        """Create response from a product summary."""
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            compare_at_price=product.compare_at_price,
            discount_pct=product.discount_pct,
            stock_qty=product.stock_qty,
            rating=product.rating,
            image_url=product.image_url,
            category_id=product.category_id,
            brand=product.brand,
        )


class CatalogPageResponse(BaseModel):
    """One page of catalog results plus the canonical address."""

    items: list[ProductSummaryResponse]
    page: int = Field(..., ge=1)
    page_size: int
    total_count: int = Field(..., ge=0)
    total_pages: int
    has_more: bool
    address: str = Field(..., description="Canonical address query for this page")
    max_price: float = Field(..., description="Price filter ceiling for the loaded items")

    @classmethod
    def from_state(cls, state: PageState, address: str) -> "CatalogPageResponse":
        """Create response from a page state."""
        return cls(
            items=[ProductSummaryResponse.from_summary(p) for p in state.items],
            page=state.page,
            page_size=state.page_size,
            total_count=state.total_count,
            total_pages=state.total_pages,
            has_more=state.has_more,
            address=address,
            max_price=state.max_price,
        )
