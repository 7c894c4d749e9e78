"""FastAPI dependencies for injection."""
from fastapi import Depends, Request

from core.auth import get_current_user
from core.config import get_settings
from core.rate_limit_config import RateLimitExceededError, RateLimitResult, get_operation_type
from core.rate_limiter import rate_limiter
from db.session import get_async_session
from models.user import User


async def _enforce_rate_limit(request: Request, subject: str) -> RateLimitResult:
    operation_type = get_operation_type(request.method, request.url.path)

    result = await rate_limiter.check(subject, operation_type)
    if not result.allowed:
        raise RateLimitExceededError(result)

    # Picked up by RateLimitHeadersMiddleware
    request.state.rate_limit_info = {
        "limit": result.limit,
        "remaining": result.remaining,
        "reset": result.reset,
    }
    return result


async def check_rate_limit(
    request: Request,
    current_user: User = Depends(get_current_user),
) -> RateLimitResult:
    """
    Dependency that enforces rate limits for authenticated requests.

    Buckets are per user. Raises RateLimitExceededError for 429 responses
    (handled by exception handler).
    """
    return await _enforce_rate_limit(request, f"user:{current_user.id}")


async def check_client_rate_limit(request: Request) -> RateLimitResult:
    """Dependency that enforces rate limits per client address (unauthenticated routes)."""
    host = request.client.host if request.client else "unknown"
    return await _enforce_rate_limit(request, f"ip:{host}")


__all__ = [
    "check_client_rate_limit",
    "check_rate_limit",
    "get_async_session",
    "get_current_user",
    "get_settings",
]
