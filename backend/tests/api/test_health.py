"""Tests for the health check endpoint."""
from httpx import AsyncClient


async def test_health_endpoint_returns_healthy_status(client: AsyncClient) -> None:
    """Health is unauthenticated and reports the database."""
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "database": "healthy",
        "result_cache": "memory",
    }


async def test_health_endpoint_sets_security_headers(client: AsyncClient) -> None:
    """Every response carries the security headers."""
    response = await client.get("/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "max-age=31536000" in response.headers["Strict-Transport-Security"]
