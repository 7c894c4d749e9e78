"""
Tests for rate limiting through the HTTP layer.

Redis is disabled in tests, so the limiter fails open; denial is exercised by
patching the limiter's check.
"""
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient

from core.rate_limit_config import RATE_LIMITS, OperationType, RateLimitResult
from core.rate_limiter import rate_limiter


async def test_rate_limit_headers_on_read(auth_client: AsyncClient) -> None:
    """Authenticated reads carry the READ limit in headers."""
    response = await auth_client.get("/bookmarks")
    assert response.status_code == 200
    expected = RATE_LIMITS[OperationType.READ].requests_per_minute
    assert int(response.headers["X-RateLimit-Limit"]) == expected
    assert "X-RateLimit-Remaining" in response.headers
    assert "X-RateLimit-Reset" in response.headers


async def test_rate_limit_headers_on_signin(client: AsyncClient) -> None:
    """Credential endpoints use the stricter SENSITIVE limit."""
    response = await client.post(
        "/auth/signin", json={"email": "nobody@gmail.com", "password": "x"},
    )
    expected = RATE_LIMITS[OperationType.SENSITIVE].requests_per_minute
    assert int(response.headers["X-RateLimit-Limit"]) == expected


async def test_limiter_keys_on_user(auth_client: AsyncClient, user) -> None:
    """Authenticated requests are bucketed by user id and operation."""
    mock_check = AsyncMock(
        return_value=RateLimitResult(
            allowed=True, limit=120, remaining=119, reset=0, retry_after=0,
        ),
    )
    with patch.object(rate_limiter, "check", mock_check):
        await auth_client.post(
            "/bookmarks", json={"title": "Task", "link": "facebook.com"},
        )

    mock_check.assert_awaited_once_with(f"user:{user.id}", OperationType.WRITE)


async def test_rate_limit_exceeded_returns_429(auth_client: AsyncClient) -> None:
    """A denied check short-circuits with 429 and retry headers."""
    denied = RateLimitResult(
        allowed=False, limit=120, remaining=0, reset=1_700_000_060, retry_after=42,
    )
    with patch.object(rate_limiter, "check", AsyncMock(return_value=denied)):
        response = await auth_client.post(
            "/bookmarks", json={"title": "Task", "link": "facebook.com"},
        )

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "42"
    assert response.headers["X-RateLimit-Limit"] == "120"
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert response.headers["X-RateLimit-Reset"] == "1700000060"

    # Nothing was created
    listing = await auth_client.get("/bookmarks")
    assert listing.json() == []
