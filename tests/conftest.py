"""Shared fixtures for catalog browser tests."""

from typing import Any, Callable

import pytest

from catalog_browser.infrastructure.memory_store import InMemoryProductStore

CATEGORIES = ("lighting", "furniture", "kitchen", "garden")


def make_row(index: int, **overrides: Any) -> dict[str, Any]:
    """Build a deterministic product row.

    Every third product is on sale, every tenth is unrated, and all
    products are in stock unless overridden.
    """
    price = float(10 + index * 5)
    on_sale = index % 3 == 0
    row = {
        "id": f"prod-{index:03d}",
        "name": f"Product {index:03d}",
        "description": f"Description for product {index:03d}",
        "brand": "Acme" if index % 2 else "Globex",
        "category_id": CATEGORIES[index % len(CATEGORIES)],
        "price": price,
        "compare_at_price": price * 1.25 if on_sale else None,
        "discount_percentage": 20.0 if on_sale else 0.0,
        "stock_quantity": 1 + index % 7,
        "rating": None if index % 10 == 0 else float(index % 5) + 0.5,
        "image_url": None,
        "created_at": f"2024-01-{1 + index % 28:02d}T00:00:00",
        "is_active": True,
    }
    row.update(overrides)
    return row


@pytest.fixture
def row_factory() -> Callable[..., dict[str, Any]]:
    """Get the product row factory."""
    return make_row


@pytest.fixture
def catalog_rows() -> list[dict[str, Any]]:
    """One hundred active, in-stock products."""
    return [make_row(i) for i in range(100)]


@pytest.fixture
def catalog_store(catalog_rows: list[dict[str, Any]]) -> InMemoryProductStore:
    """In-memory store over the sample catalog."""
    return InMemoryProductStore(catalog_rows)
