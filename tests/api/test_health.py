"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from catalog_browser.infrastructure.config import settings
from catalog_browser.infrastructure.memory_store import InMemoryProductStore


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "catalog-browser"
    assert data["store_backend"] == settings.store_backend
    assert "version" in data


class TestReadiness:
    """Tests for the store readiness check."""

    def test_ready_when_store_answers(self, client: TestClient, catalog_store: InMemoryProductStore) -> None:
        """A one-row query against the store marks the service ready."""
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"
        (descriptor,) = catalog_store.executed
        assert descriptor.window.limit == 1
        assert not descriptor.with_count

    def test_unavailable_when_store_fails(self, client: TestClient, catalog_store: InMemoryProductStore) -> None:
        """A failing store returns 503 with the error envelope."""
        catalog_store.available = False

        response = client.get("/ready", headers={"X-Request-ID": "req-ready"})

        assert response.status_code == 503
        data = response.json()
        assert data["error_code"] == "STORE_UNAVAILABLE"
        assert data["details"] == [{"source": "memory", "status_code": None}]
        assert data["request_id"] == "req-ready"


class TestRequestIdMiddleware:
    """Tests for request ID correlation middleware."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        response = client.get("/health", headers={"X-Request-ID": "custom-request-id-12345"})
        assert response.headers["X-Request-ID"] == "custom-request-id-12345"
