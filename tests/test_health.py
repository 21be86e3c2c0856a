# ==============================================================================
# HEALTH ENDPOINT TESTS
# ==============================================================================
# Tests for root and health check endpoints
# ==============================================================================

import pytest
from httpx import AsyncClient

from healthfit.entities.catalogue import ENTITY_FIELDS


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        """Test root endpoint returns API info."""
        response = await client.get("/")

        assert response.status_code == 200
        data = response.json()

        assert "name" in data
        assert "version" in data
        assert data["health"] == "/api/health"
        assert sorted(data["resources"]) == sorted(ENTITY_FIELDS)

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        """Test health endpoint returns status."""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()

        assert data["status"] == "OK"
        assert data["message"] == "Health & Fitness API is running"
        assert data["database"] == "connected"
        assert "version" in data

    @pytest.mark.asyncio
    async def test_request_headers(self, client: AsyncClient):
        """Test request logger echoes id and timing headers."""
        response = await client.get("/api/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.headers["X-Response-Time"].endswith("ms")
