"""Redis cache for computed read models (admin dashboard metrics).

The cache is optional: when Redis is disabled or unreachable every call
degrades to a miss and callers recompute from the database.
"""

import json
import logging
from typing import Any, Optional

import redis
from redis.connection import ConnectionPool
from redis.exceptions import ConnectionError, RedisError, TimeoutError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.config import Settings

logger = logging.getLogger(__name__)

# Transient network failures are retried briefly; once retries run out the
# error degrades to a miss like any other RedisError
redis_retry = retry(
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=0.1, max=0.5),
    retry=retry_if_exception_type((ConnectionError, TimeoutError)),
    reraise=True,
)

DASHBOARD_METRICS_KEY = "admin:dashboard:metrics"


class CacheManager:
    """Redis client wrapper with pooling, retries and graceful degradation."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.enabled = settings.CACHE_ENABLED
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[redis.Redis] = None
        self._is_connected = False

        logger.info(f"CacheManager initialized. Enabled: {self.enabled}")

    def connect(self) -> None:
        """Open the connection pool and verify Redis answers a PING."""
        if not self.enabled:
            logger.info("Cache is disabled. Skipping Redis connection.")
            return

        try:
            self._pool = ConnectionPool(
                host=self.settings.REDIS_HOST,
                port=self.settings.REDIS_PORT,
                db=self.settings.REDIS_DB,
                password=self.settings.REDIS_PASSWORD or None,
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
                socket_keepalive=self.settings.REDIS_SOCKET_KEEPALIVE,
                socket_timeout=self.settings.REDIS_SOCKET_TIMEOUT,
                retry_on_timeout=self.settings.REDIS_RETRY_ON_TIMEOUT,
                health_check_interval=self.settings.REDIS_HEALTH_CHECK_INTERVAL,
                decode_responses=True,
            )
            self._client = redis.Redis(connection_pool=self._pool)
            self._client.ping()
            self._is_connected = True

            logger.info(
                f"Redis cache connected to {self.settings.REDIS_HOST}:{self.settings.REDIS_PORT}"
            )

        except RedisError as e:
            logger.error(f"Failed to connect to Redis cache: {e}")
            logger.warning("Cache will operate in degraded mode (no caching)")
            self._is_connected = False
            self.enabled = False

    def disconnect(self) -> None:
        """Close the client and its pool."""
        if self._client:
            self._client.close()
        if self._pool:
            self._pool.disconnect()
        self._is_connected = False
        logger.info("Redis cache connection closed")

    def is_healthy(self) -> bool:
        """Check if Redis connection is healthy."""
        if not self.enabled or not self._client:
            return False

        try:
            return bool(self._client.ping())
        except RedisError:
            return False

    @redis_retry
    def _execute(self, command: str, *args) -> Any:
        """Run one Redis command, retrying transient connection failures."""
        return getattr(self._client, command)(*args)

    def get(self, key: str) -> Optional[Any]:
        """Return the JSON-decoded value for ``key`` or None on miss/error."""
        if not self.enabled or not self._client:
            return None

        try:
            value = self._execute("get", key)
        except RedisError as e:
            logger.warning(f"Redis error getting key '{key}': {e}. Continuing without cache.")
            return None

        if value is None:
            logger.debug(f"Cache MISS: {key}")
            return None

        try:
            logger.debug(f"Cache HIT: {key}")
            return json.loads(value)
        except json.JSONDecodeError:
            logger.error(f"Corrupted cache entry for key '{key}', dropping it")
            self.delete(key)
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """Store ``value`` as JSON with a TTL (defaults to CACHE_DEFAULT_TTL)."""
        if not self.enabled or not self._client:
            return False

        ttl = ttl or self.settings.CACHE_DEFAULT_TTL
        try:
            serialized_value = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize value for key '{key}': {e}")
            return False

        try:
            result = self._execute("setex", key, ttl, serialized_value)
        except RedisError as e:
            logger.warning(f"Redis error setting key '{key}': {e}. Continuing without cache.")
            return False

        logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
        return bool(result)

    def delete(self, key: str) -> bool:
        """Delete ``key``; returns True when something was removed."""
        if not self.enabled or not self._client:
            return False

        try:
            return bool(self._execute("delete", key))
        except RedisError as e:
            logger.error(f"Redis error deleting key '{key}': {e}")
            return False

    def get_stats(self) -> dict:
        """Connection state and hit/miss counters for the health endpoints."""
        if not self.enabled or not self._client:
            return {"enabled": False, "connected": False}

        try:
            info = self._client.info("stats")
        except RedisError as e:
            logger.error(f"Error getting cache stats: {e}")
            return {"enabled": True, "connected": False, "error": str(e)}

        hits = info.get("keyspace_hits", 0)
        misses = info.get("keyspace_misses", 0)
        return {
            "enabled": True,
            "connected": self._is_connected,
            "keyspace_hits": hits,
            "keyspace_misses": misses,
            "hit_rate": hits / (hits + misses) if (hits + misses) > 0 else 0,
        }


# Singleton instance (initialized by main.py)
_cache_manager_instance: Optional[CacheManager] = None


def get_cache_manager() -> Optional[CacheManager]:
    """Get the global cache manager instance."""
    return _cache_manager_instance


def set_cache_manager(manager: CacheManager) -> None:
    """Set the global cache manager instance."""
    global _cache_manager_instance
    _cache_manager_instance = manager
