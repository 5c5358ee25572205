"""
Async Redis connection used by the rate limiter.

Redis is optional: when it is disabled or unreachable every call here returns
a neutral value (False / None) so that callers can let requests through.
"""
import logging
from typing import Any

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import NoScriptError, RedisError

logger = logging.getLogger(__name__)

# KEYS[1] = bucket, ARGV = now, window seconds, limit, unique member.
# Sorted set of request timestamps; entries older than the window are pruned
# before counting. Reply: {allowed, remaining, retry_after}.
SLIDING_WINDOW_SCRIPT = """
local bucket = KEYS[1]
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])

redis.call('ZREMRANGEBYSCORE', bucket, 0, now - window)
local used = redis.call('ZCARD', bucket)

if used >= limit then
    local first = redis.call('ZRANGE', bucket, 0, 0, 'WITHSCORES')
    local wait = 0
    if first[2] then
        wait = math.ceil(tonumber(first[2]) + window - now)
    end
    return {0, 0, wait}
end

redis.call('ZADD', bucket, now, now .. ':' .. ARGV[4])
redis.call('EXPIRE', bucket, window)
return {1, limit - used - 1, 0}
"""

# KEYS[1] = bucket, ARGV = limit, window seconds.
# Plain counter that expires one window after its first hit.
# Reply: {allowed, remaining, ttl, retry_after}.
FIXED_WINDOW_SCRIPT = """
local bucket = KEYS[1]
local limit = tonumber(ARGV[1])

local used = redis.call('INCR', bucket)
if used == 1 then
    redis.call('EXPIRE', bucket, tonumber(ARGV[2]))
end
local ttl = redis.call('TTL', bucket)

if used > limit then
    return {0, 0, ttl, ttl}
end
return {1, limit - used, ttl, 0}
"""

_SCRIPTS = {
    "sliding_window": SLIDING_WINDOW_SCRIPT,
    "fixed_window": FIXED_WINDOW_SCRIPT,
}


class RedisClient:
    """Pooled async Redis client that degrades to a no-op when Redis is down."""

    def __init__(self, url: str, enabled: bool = True, pool_size: int = 10) -> None:
        self._url = url
        self._enabled = enabled
        self._pool_size = pool_size
        self._client: Redis | None = None
        self._shas: dict[str, str] = {}

    async def connect(self) -> None:
        """Open the pool, verify it with PING and register the Lua scripts."""
        if not self._enabled:
            logger.info("redis_disabled")
            return

        client = Redis(
            connection_pool=ConnectionPool.from_url(
                self._url, max_connections=self._pool_size,
            ),
        )
        try:
            await client.ping()
        except RedisError as e:
            logger.warning("redis_connect_failed", extra={"error": str(e)})
            return

        self._client = client
        await self._load_scripts()
        logger.info("redis_connected")

    async def _load_scripts(self) -> None:
        if self._client is None:
            return
        try:
            for name, source in _SCRIPTS.items():
                self._shas[name] = await self._client.script_load(source)
        except RedisError as e:
            logger.warning("redis_script_load_failed", extra={"error": str(e)})

    async def close(self) -> None:
        """Release the connection pool."""
        if self._client is None:
            return
        await self._client.aclose()
        self._client = None
        logger.info("redis_closed")

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def sliding_window_sha(self) -> str | None:
        return self._shas.get("sliding_window")

    @property
    def fixed_window_sha(self) -> str | None:
        return self._shas.get("fixed_window")

    async def ping(self) -> bool:
        """True if Redis answers PING."""
        if self._client is None:
            return False
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def evalsha(self, sha: str, numkeys: int, *args: Any) -> Any:
        """
        Run a registered script. Returns None when Redis can't answer.

        A NOSCRIPT reply means the server lost its script cache (restart or
        SCRIPT FLUSH); scripts are re-registered for the next call.
        """
        if self._client is None:
            return None
        try:
            return await self._client.evalsha(sha, numkeys, *args)
        except NoScriptError:
            logger.warning("redis_script_missing")
            await self._load_scripts()
        except RedisError as e:
            logger.warning("redis_evalsha_failed", extra={"error": str(e)})
        return None


class _RedisState:
    """Holds the process-wide client set up by the app lifespan."""

    client: RedisClient | None = None


_state = _RedisState()


def get_redis_client() -> RedisClient | None:
    """Return the process-wide Redis client, if one was installed."""
    return _state.client


def set_redis_client(client: RedisClient | None) -> None:
    """Install (or clear, with None) the process-wide Redis client."""
    _state.client = client
