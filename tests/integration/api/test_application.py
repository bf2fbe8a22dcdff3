"""Integration tests for application wiring: health, middleware and errors."""

import uuid

import pytest
from httpx import AsyncClient

from cityinfo.api.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER


@pytest.mark.integration
class TestHealth:
    async def test_health(self, client_with_db: AsyncClient) -> None:
        response = await client_with_db.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": True}


@pytest.mark.integration
class TestMiddleware:
    async def test_correlation_id_is_generated(
        self, client_with_db: AsyncClient
    ) -> None:
        response = await client_with_db.get("/health")

        assert uuid.UUID(response.headers[CORRELATION_ID_HEADER]).version == 4

    async def test_ids_are_echoed(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.get(
            "/api/cities",
            headers={
                **berlin_headers,
                CORRELATION_ID_HEADER: "corr-123",
                REQUEST_ID_HEADER: "req-abc",
            },
        )

        assert response.headers[CORRELATION_ID_HEADER] == "corr-123"
        assert response.headers[REQUEST_ID_HEADER] == "req-abc"

    async def test_error_body_carries_correlation_id(
        self, client_with_db: AsyncClient
    ) -> None:
        response = await client_with_db.get(
            "/api/cities/1/pointsofinterest",
            headers={CORRELATION_ID_HEADER: "corr-401"},
        )

        assert response.status_code == 401
        assert response.json()["correlation_id"] == "corr-401"

    async def test_security_headers(self, client_with_db: AsyncClient) -> None:
        response = await client_with_db.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" in response.headers


@pytest.mark.integration
class TestErrors:
    async def test_unknown_route(self, client_with_db: AsyncClient) -> None:
        response = await client_with_db.get("/api/nowhere")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

    async def test_wrong_method(
        self, client_with_db: AsyncClient, berlin_headers: dict[str, str]
    ) -> None:
        response = await client_with_db.delete("/api/cities", headers=berlin_headers)

        assert response.status_code == 405

    async def test_openapi_lists_routes(self, client_with_db: AsyncClient) -> None:
        paths = (await client_with_db.get("/openapi.json")).json()["paths"]

        assert {
            "/api/cities",
            "/api/cities/{city_id}",
            "/api/cities/{city_id}/pointsofinterest",
            "/api/cities/{city_id}/pointsofinterest/{point_of_interest_id}",
            "/api/files",
            "/api/authentication/authenticate",
        } <= set(paths)
