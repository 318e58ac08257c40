"""Redis-backed cache storage for TradeMind.

Stores pickled (value, stored_at) entries so detached ORM rows and
pandas frames survive a round trip. Redis failures degrade to cache
misses; they never break a read.
"""

import logging
import pickle
from typing import Any, Optional

logger = logging.getLogger(__name__)


class RedisCache:
    """Sync Redis client wrapper with lazy connection."""

    def __init__(self, url: Optional[str] = None, max_age_seconds: int = 3600):
        self._url = url
        self._client = None
        self.max_age_seconds = max_age_seconds

    def get_client(self):
        """Get or create the Redis client."""
        if self._client is None:
            import redis
            from src.settings import get_settings

            try:
                client = redis.from_url(self._url or get_settings().redis_url, decode_responses=False)
                client.ping()
            except redis.RedisError as e:
                logger.warning("Redis connection failed: %s", e)
                raise
            self._client = client
        return self._client

    def get(self, key: str) -> Optional[tuple[Any, float]]:
        """Return (value, stored_at) or None on miss."""
        import redis

        try:
            data = self.get_client().get(key)
        except redis.RedisError as e:
            logger.debug("Redis get miss for %s: %s", key, e)
            return None
        if data is None:
            return None
        return pickle.loads(data)

    def set(self, key: str, value: Any, stored_at: float) -> None:
        import redis

        try:
            self.get_client().setex(
                key,
                self.max_age_seconds,
                pickle.dumps((value, stored_at), protocol=pickle.HIGHEST_PROTOCOL),
            )
        except redis.RedisError as e:
            logger.warning("Redis set failed for %s: %s", key, e)

    def delete_prefix(self, prefix: str) -> int:
        """Delete all keys starting with prefix. Returns count deleted."""
        import redis

        try:
            client = self.get_client()
            count = 0
            for key in client.scan_iter(match=f"{prefix}*"):
                client.delete(key)
                count += 1
            return count
        except redis.RedisError as e:
            logger.warning("Redis invalidation failed for %s: %s", prefix, e)
            return 0

    def clear(self) -> None:
        from src.cache.keys import PREFIX

        self.delete_prefix(f"{PREFIX}:")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
