"""Query caching package for TradeMind."""

from src.cache import keys
from src.cache.query_cache import MemoryCacheBackend, QueryCache, get_query_cache
from src.cache.redis_client import RedisCache

__all__ = ["MemoryCacheBackend", "QueryCache", "RedisCache", "get_query_cache", "keys"]
