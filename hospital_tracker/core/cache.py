"""
Read-through cache for rarely changing reference data.

Caching is best effort: with no Redis configured, or with Redis unreachable,
every lookup falls through to the loader and the request still succeeds.
"""
import json
import logging
from typing import Any, Callable, Optional

import redis

# Set up logging
logger = logging.getLogger(__name__)

PROVINCES_KEY = "provinces"
ALL_DISTRICTS_KEY = "districts:all"
PROFESSION_GROUPS_KEY = "profession_groups"


def districts_key(province_id: Optional[int]) -> str:
    if province_id is None:
        return ALL_DISTRICTS_KEY
    return f"districts:province:{province_id}"


def build_redis_client(redis_url: Optional[str]) -> Optional[redis.Redis]:
    """
    Create a Redis client from a URL, or None when caching is disabled.

    The client connects lazily, so an unreachable server only shows up as
    errors on individual cache calls.
    """
    if not redis_url:
        logger.info("REDIS_URL not set, reference data caching disabled")
        return None
    return redis.Redis.from_url(redis_url, socket_timeout=1, socket_connect_timeout=1)


class ReferenceCache:
    """
    JSON values in Redis with a fixed TTL.

    Args:
        client: Redis client, or None to always load from the store
        ttl_seconds: Lifetime of every cached entry
    """

    def __init__(self, client: Optional[redis.Redis], ttl_seconds: int):
        self._client = client
        self._ttl = ttl_seconds

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value, or None on a miss or any cache failure."""
        if self._client is None:
            return None
        try:
            raw = self._client.get(key)
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        if self._client is None:
            return
        try:
            self._client.set(key, json.dumps(value), ex=self._ttl)
        except (redis.RedisError, TypeError) as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value for key, loading and caching it on a miss.

        Args:
            key: Cache key
            loader: Zero-argument callable returning a JSON-serializable value

        Returns:
            The cached or freshly loaded value
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = loader()
        self.set(key, value)
        return value
