"""Shared fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from catalog_browser.api.catalog import get_product_store
from catalog_browser.infrastructure.memory_store import InMemoryProductStore
from catalog_browser.main import app


@pytest.fixture
def client(catalog_store: InMemoryProductStore) -> Iterator[TestClient]:
    """Create test client backed by the sample catalog."""
    app.dependency_overrides[get_product_store] = lambda: catalog_store
    yield TestClient(app)
    app.dependency_overrides.clear()
