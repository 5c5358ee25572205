"""Two-tier request limiter: sliding per-minute window plus fixed daily cap."""
import logging
import time
import uuid

from core.rate_limit_config import RATE_LIMITS, OperationType, RateLimitResult
from core.redis import RedisClient, get_redis_client

logger = logging.getLogger(__name__)

MINUTE = 60
DAY = 86400


def _allow_all(limit: int) -> RateLimitResult:
    return RateLimitResult(allowed=True, limit=limit, remaining=limit, reset=0)


class RedisRateLimiter:
    """
    Charges requests to Redis buckets keyed by identity.

    identity is "user:<id>" for authenticated routes and "ip:<host>" for the
    credential endpoints. When Redis is unavailable every request is allowed.
    """

    async def check(self, identity: str, operation_type: OperationType) -> RateLimitResult:
        """
        Count one request against identity's minute and daily buckets.

        The daily bucket is only charged if the minute bucket had room. The
        returned result describes the minute window unless the daily cap is
        what refused the request.
        """
        config = RATE_LIMITS[operation_type]
        redis_client = get_redis_client()
        if redis_client is None or not redis_client.is_connected:
            logger.warning("rate_limit_skipped", extra={"reason": "redis_unavailable"})
            return _allow_all(config.requests_per_minute)

        now = int(time.time())
        minute = await self._sliding_window(
            redis_client,
            f"rate:{identity}:{operation_type.value}:min",
            config.requests_per_minute,
            now,
        )
        if not minute.allowed:
            self._log_refusal(identity, operation_type, "per_minute")
            return minute

        daily_pool = "sensitive" if operation_type is OperationType.SENSITIVE else "general"
        day = await self._fixed_window(
            redis_client,
            f"rate:{identity}:daily:{daily_pool}",
            config.requests_per_day,
            now,
        )
        if not day.allowed:
            self._log_refusal(identity, operation_type, "daily")
            return day
        return minute

    @staticmethod
    def _log_refusal(identity: str, operation_type: OperationType, window: str) -> None:
        logger.warning(
            "rate_limit_exceeded",
            extra={"identity": identity, "operation": operation_type.value, "window": window},
        )

    @staticmethod
    async def _sliding_window(
        redis_client: RedisClient, key: str, limit: int, now: int,
    ) -> RateLimitResult:
        sha = redis_client.sliding_window_sha
        reply = None
        if sha is not None:
            reply = await redis_client.evalsha(
                sha, 1, key, now, MINUTE, limit, uuid.uuid4().hex,
            )
        if reply is None:
            return _allow_all(limit)

        allowed, remaining, retry_after = reply
        return RateLimitResult(
            allowed=bool(allowed),
            limit=limit,
            remaining=max(0, remaining),
            reset=now + MINUTE,
            retry_after=0 if allowed else max(0, retry_after),
        )

    @staticmethod
    async def _fixed_window(
        redis_client: RedisClient, key: str, limit: int, now: int,
    ) -> RateLimitResult:
        sha = redis_client.fixed_window_sha
        reply = None
        if sha is not None:
            reply = await redis_client.evalsha(sha, 1, key, limit, DAY)
        if reply is None:
            return _allow_all(limit)

        allowed, remaining, ttl, retry_after = reply
        return RateLimitResult(
            allowed=bool(allowed),
            limit=limit,
            remaining=max(0, remaining),
            reset=now + (ttl if ttl > 0 else DAY),
            retry_after=0 if allowed else max(0, retry_after),
        )


rate_limiter = RedisRateLimiter()
