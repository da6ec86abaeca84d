"""Tests for catalog browsing endpoints."""

from fastapi.testclient import TestClient

from catalog_browser.infrastructure.memory_store import InMemoryProductStore


class TestBrowseProducts:
    """Tests for GET /catalog/products."""

    def test_first_page(self, client: TestClient) -> None:
        """Default address returns the first page."""
        response = client.get("/catalog/products")

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["page_size"] == 36
        assert len(data["items"]) == 36
        assert data["total_count"] == 100
        assert data["total_pages"] == 3
        assert data["has_more"] is True
        assert data["address"] == ""
        assert data["max_price"] == 1000.0

    def test_filters_from_address(self, client: TestClient) -> None:
        """Address keys filter and sort the results."""
        response = client.get("/catalog/products", params={"category": "lighting", "sort": "price-high"})

        data = response.json()
        assert data["total_count"] == 25
        assert data["items"][0]["id"] == "prod-096"
        assert all(item["category_id"] == "lighting" for item in data["items"])
        assert data["address"] == "category=lighting&sort=price_desc"

    def test_search(self, client: TestClient) -> None:
        """Search matches names and descriptions."""
        response = client.get("/catalog/products?search=Product+01")

        data = response.json()
        assert data["total_count"] == 10
        assert data["address"] == "search=Product+01"

    def test_page_beyond_filtered_results(self, client: TestClient) -> None:
        """A page past a narrowed result set falls back to its last page."""
        response = client.get("/catalog/products?page=2&onSale=true&search=Product")

        data = response.json()
        assert data["total_count"] == 34
        assert data["page"] == 1
        assert len(data["items"]) == 34

    def test_last_page(self, client: TestClient) -> None:
        """The last page holds the remainder."""
        data = client.get("/catalog/products?page=3").json()

        assert data["page"] == 3
        assert len(data["items"]) == 28
        assert data["has_more"] is False
        assert data["address"] == "page=3"

    def test_page_past_end(self, client: TestClient) -> None:
        """Pages past the end land on the last page."""
        data = client.get("/catalog/products?page=40").json()
        assert data["page"] == 3

    def test_malformed_values_fall_back(self, client: TestClient) -> None:
        """Bad values are replaced by defaults."""
        response = client.get("/catalog/products?page=abc&sort=cheapest&onSale=maybe")

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["total_count"] == 100
        assert data["address"] == ""

    def test_store_failure(self, client: TestClient, catalog_store: InMemoryProductStore) -> None:
        """Store failures return the error envelope."""
        catalog_store.available = False

        response = client.get("/catalog/products", headers={"X-Request-ID": "req-1"})

        assert response.status_code == 502
        data = response.json()
        assert data["error_code"] == "QUERY_FAILED"
        assert data["message"] == "Could not load products. Check your connection."
        assert data["details"] == []
        assert data["request_id"] == "req-1"
