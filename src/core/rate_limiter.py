"""Redis-based rate limiter with per-minute and daily limits per operation type."""
import logging
import time
import uuid

from core.rate_limit_config import (
    RATE_LIMITS,
    OperationType,
    RateLimitResult,
)
from core.redis import get_redis_client

logger = logging.getLogger(__name__)


def _allow_all(limit: int) -> RateLimitResult:
    """Permissive result used when Redis can't be consulted (fail open)."""
    return RateLimitResult(
        allowed=True, limit=limit, remaining=limit, reset=0, retry_after=0,
    )


class RedisRateLimiter:
    """Sliding window for per-minute limits, fixed window for daily limits."""

    async def check(
        self,
        subject: str,
        operation_type: OperationType,
    ) -> RateLimitResult:
        """
        Check if a request from `subject` is allowed.

        `subject` identifies the bucket owner, e.g. "user:42" or "ip:10.0.0.1".
        Falls back to allowing requests if Redis is unavailable.
        """
        config = RATE_LIMITS[operation_type]

        redis_client = get_redis_client()
        if redis_client is None or not redis_client.is_connected:
            logger.warning("redis_unavailable", extra={"operation": "rate_limit"})
            return _allow_all(config.requests_per_minute)

        now = int(time.time())

        minute_key = f"rate:{subject}:{operation_type.value}:min"
        minute_result = await self._check_sliding_window(
            minute_key, config.requests_per_minute, 60, now,
        )
        if not minute_result.allowed:
            logger.warning(
                "rate_limit_exceeded",
                extra={
                    "subject": subject,
                    "operation": operation_type.value,
                    "limit_type": "per_minute",
                },
            )
            return minute_result

        daily_pool = "sensitive" if operation_type == OperationType.SENSITIVE else "general"
        day_key = f"rate:{subject}:daily:{daily_pool}"
        day_result = await self._check_fixed_window(
            day_key, config.requests_per_day, 86400, now,
        )
        if not day_result.allowed:
            logger.warning(
                "rate_limit_exceeded",
                extra={
                    "subject": subject,
                    "operation": operation_type.value,
                    "limit_type": "daily",
                },
            )
            return day_result

        # Both passed - the per-minute window is the one reported in headers
        return minute_result

    async def _check_sliding_window(
        self, key: str, max_requests: int, window_seconds: int, now: int,
    ) -> RateLimitResult:
        redis_client = get_redis_client()
        if redis_client is None or redis_client.sliding_window_sha is None:
            return _allow_all(max_requests)

        result = await redis_client.evalsha(
            redis_client.sliding_window_sha,
            1,
            key,
            now,
            window_seconds,
            max_requests,
            str(uuid.uuid4()),
        )
        if result is None:
            return _allow_all(max_requests)

        allowed, remaining, retry_after = result
        return RateLimitResult(
            allowed=bool(allowed),
            limit=max_requests,
            remaining=max(0, remaining),
            reset=now + window_seconds,
            retry_after=max(0, retry_after) if not allowed else 0,
        )

    async def _check_fixed_window(
        self, key: str, max_requests: int, window_seconds: int, now: int,
    ) -> RateLimitResult:
        redis_client = get_redis_client()
        if redis_client is None or redis_client.fixed_window_sha is None:
            return _allow_all(max_requests)

        result = await redis_client.evalsha(
            redis_client.fixed_window_sha,
            1,
            key,
            max_requests,
            window_seconds,
        )
        if result is None:
            return _allow_all(max_requests)

        allowed, remaining, ttl, retry_after = result
        return RateLimitResult(
            allowed=bool(allowed),
            limit=max_requests,
            remaining=max(0, remaining),
            reset=now + ttl if ttl > 0 else now + window_seconds,
            retry_after=max(0, retry_after) if not allowed else 0,
        )


# Global rate limiter instance
rate_limiter = RedisRateLimiter()
