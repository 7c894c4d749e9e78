"""Tests for the health check endpoint."""
from unittest.mock import AsyncMock, MagicMock

from httpx import AsyncClient

from core.redis import RedisClient, get_redis_client, set_redis_client


async def test_health_endpoint_returns_200(client: AsyncClient) -> None:
    """Test that the health endpoint returns 200 OK without authentication."""
    response = await client.get("/health")
    assert response.status_code == 200


async def test_health_endpoint_response_structure(client: AsyncClient) -> None:
    """Test that the health endpoint returns the expected structure."""
    response = await client.get("/health")
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "healthy"
    assert "redis" in data


async def test_health_endpoint_redis_unavailable(client: AsyncClient) -> None:
    """Test that health endpoint reports Redis unavailable gracefully."""
    disabled_client = RedisClient("redis://localhost:6379", enabled=False)
    await disabled_client.connect()

    original_client = get_redis_client()
    set_redis_client(disabled_client)
    try:
        response = await client.get("/health")
        data = response.json()

        # Rate limiting is off, but the app itself is fine
        assert data["status"] == "healthy"
        assert data["redis"] == "unavailable"
    finally:
        set_redis_client(original_client)


async def test_health_endpoint_redis_connected(client: AsyncClient) -> None:
    """Test that health endpoint reports a reachable Redis as connected."""
    fake_redis = MagicMock(spec=RedisClient)
    fake_redis.ping = AsyncMock(return_value=True)

    original_client = get_redis_client()
    set_redis_client(fake_redis)
    try:
        response = await client.get("/health")
        assert response.json()["redis"] == "connected"
    finally:
        set_redis_client(original_client)


async def test_security_headers_present(client: AsyncClient) -> None:
    """Responses carry the standard security headers."""
    response = await client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
