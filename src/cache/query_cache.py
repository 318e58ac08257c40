"""Keyed stale-while-revalidate cache for per-user reads.

Entries are keyed by (entity, user_id, params) and hold the last fetched
value plus the time it was stored. Reads inside the dedupe window never
refetch, fresh entries are served directly, and stale entries are served
while a refetch replaces them. Every mutation calls ``invalidate``.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Mapping, Optional, Protocol

from src.cache.keys import DEPENDENTS, make_key, user_entity_prefix

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    def get(self, key: str) -> Optional[tuple[Any, float]]: ...
    def set(self, key: str, value: Any, stored_at: float) -> None: ...
    def delete_prefix(self, prefix: str) -> int: ...
    def clear(self) -> None: ...


class MemoryCacheBackend:
    """In-process backend; the default for Streamlit sessions and tests.

    Expired entries are dropped on read and swept on every write. Once
    ``max_entries`` is reached the oldest entries are evicted first.
    """

    def __init__(
        self,
        max_age_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = 10_000,
    ):
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self.max_age_seconds = max_age_seconds
        self.max_entries = max_entries
        self._clock = clock

    def get(self, key: str) -> Optional[tuple[Any, float]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry[1] > self.max_age_seconds:
                del self._entries[key]
                return None
            return entry

    def set(self, key: str, value: Any, stored_at: float) -> None:
        with self._lock:
            self._sweep()
            self._entries.pop(key, None)
            while self._entries and len(self._entries) >= self.max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k][1])
                del self._entries[oldest]
            self._entries[key] = (value, stored_at)

    def _sweep(self) -> None:
        cutoff = self._clock() - self.max_age_seconds
        for key in [k for k, (_, stored_at) in self._entries.items() if stored_at < cutoff]:
            del self._entries[key]

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class QueryCache:
    """Stale-while-revalidate cache in front of backend reads.

    Args:
        backend: Storage for entries (memory or Redis).
        ttl_seconds: Age after which an entry is stale.
        dedupe_seconds: Window in which repeated reads never refetch.
        background_revalidate: Serve stale entries immediately and refetch
            on a worker thread. When False the refetch happens inline.
        clock: Monotonic time source.
        session_factory: Opens the database session a worker refetch uses.
            Without one, reads that need a session are revalidated inline.
    """

    def __init__(
        self,
        backend: Optional[CacheBackend] = None,
        ttl_seconds: float = 60.0,
        dedupe_seconds: float = 2.0,
        background_revalidate: bool = False,
        clock: Callable[[], float] = time.monotonic,
        session_factory: Optional[Callable[[], Any]] = None,
    ):
        self._clock = clock
        self.session_factory = session_factory
        self.backend = backend or MemoryCacheBackend(clock=clock)
        self.ttl_seconds = ttl_seconds
        self.dedupe_seconds = dedupe_seconds
        self.background_revalidate = background_revalidate
        self._executor: Optional[ThreadPoolExecutor] = None
        self._inflight: dict[str, Future] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(
        self,
        entity: str,
        user_id: str,
        fetcher: Callable[..., Any],
        params: Optional[Mapping[str, Any]] = None,
        uses_session: bool = False,
    ) -> Any:
        """Return the cached value for the key, fetching when needed.

        Fetch errors on a miss propagate to the caller. A failed background
        revalidation keeps the stale value.

        ``uses_session`` marks a fetcher that reads through a database
        session. It is called with no arguments on the caller's thread and
        with a session of its own on a worker thread.
        """
        key = make_key(entity, user_id, params)
        entry = self.backend.get(key)
        now = self._clock()

        if entry is None:
            self.misses += 1
            return self._fetch_and_store(key, fetcher)

        value, stored_at = entry
        age = now - stored_at
        self.hits += 1
        if age <= self.dedupe_seconds or age <= self.ttl_seconds:
            return value

        if self.background_revalidate and (self.session_factory is not None or not uses_session):
            self._schedule_revalidation(key, fetcher, uses_session)
            return value
        logger.debug("Revalidating stale cache entry %s (age %.1fs)", key, age)
        return self._fetch_and_store(key, fetcher)

    def peek(self, entity: str, user_id: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Last-known value without fetching, or None."""
        entry = self.backend.get(make_key(entity, user_id, params))
        return entry[0] if entry else None

    def invalidate(self, entity: str, user_id: str) -> int:
        """Drop every cached read of ``entity`` (and its dependents) for the user."""
        removed = 0
        for name in DEPENDENTS.get(entity, (entity,)):
            removed += self.backend.delete_prefix(user_entity_prefix(name, user_id))
        logger.debug("Invalidated %d cache entries for %s/%s", removed, entity, user_id)
        return removed

    def clear(self) -> None:
        self.backend.clear()

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until pending background revalidations finish."""
        with self._lock:
            pending = list(self._inflight.values())
        for future in pending:
            future.exception(timeout=timeout)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _fetch_and_store(self, key: str, fetcher: Callable[[], Any]) -> Any:
        value = fetcher()
        self.backend.set(key, value, self._clock())
        return value

    def _schedule_revalidation(self, key: str, fetcher: Callable[..., Any], uses_session: bool) -> None:
        with self._lock:
            if key in self._inflight:
                return
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="cache-revalidate")
            future = self._executor.submit(self._revalidate, key, fetcher, uses_session)
            self._inflight[key] = future

    def _revalidate(self, key: str, fetcher: Callable[..., Any], uses_session: bool) -> None:
        session = None
        try:
            if uses_session:
                session = self.session_factory()
                self._fetch_and_store(key, lambda: fetcher(session))
            else:
                self._fetch_and_store(key, fetcher)
        except Exception as e:
            logger.warning("Background revalidation failed for %s: %s", key, e)
        finally:
            if session is not None:
                session.close()
            with self._lock:
                self._inflight.pop(key, None)


_default_cache: Optional[QueryCache] = None


def get_query_cache() -> QueryCache:
    """Process-wide QueryCache built from settings."""
    global _default_cache
    if _default_cache is None:
        from src.db.engine import get_sync_session_factory
        from src.settings import get_settings

        settings = get_settings()
        backend: Optional[CacheBackend] = None
        if settings.use_redis:
            from src.cache.redis_client import RedisCache

            backend = RedisCache(settings.redis_url)
        _default_cache = QueryCache(
            backend=backend,
            ttl_seconds=settings.cache_ttl_seconds,
            dedupe_seconds=settings.cache_dedupe_seconds,
            background_revalidate=settings.cache_background_revalidate,
            # Redis entries are shared across processes, so they need wall-clock stamps
            clock=time.time if backend is not None else time.monotonic,
            session_factory=get_sync_session_factory(),
        )
    return _default_cache
