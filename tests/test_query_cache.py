"""Tests for the stale-while-revalidate query cache and its backends."""

import pickle
from unittest.mock import MagicMock

import pytest
import redis

from src.cache import MemoryCacheBackend, QueryCache, RedisCache, keys


class Counter:
    """Fetcher returning an incrementing value per call."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.calls


# =============================================================================
# Keys
# =============================================================================


class TestKeys:
    def test_make_key_layout(self):
        assert keys.make_key(keys.TRADES, "u1") == "trademind:trades:u1:-"

    def test_params_hash_is_order_independent(self):
        assert keys.params_hash({"a": 1, "b": 2}) == keys.params_hash({"b": 2, "a": 1})

    def test_params_change_key(self):
        assert keys.make_key(keys.TRADES, "u1", {"day": "2024-03-15"}) != keys.make_key(
            keys.TRADES, "u1", {"day": "2024-03-16"}
        )

    def test_user_prefix_matches_keys(self):
        key = keys.make_key(keys.RULES, "u1", {"active": True})
        assert key.startswith(keys.user_entity_prefix(keys.RULES, "u1"))
        assert not key.startswith(keys.user_entity_prefix(keys.RULES, "u10"))


# =============================================================================
# QueryCache
# =============================================================================


class TestQueryCacheReads:
    def test_miss_fetches_and_stores(self, cache, user_id):
        fetch = Counter()
        assert cache.get(keys.TRADES, user_id, fetch) == 1
        assert cache.misses == 1
        assert cache.peek(keys.TRADES, user_id) == 1

    def test_fetch_error_on_miss_propagates(self, cache, user_id):
        def boom():
            raise RuntimeError("db down")

        with pytest.raises(RuntimeError):
            cache.get(keys.TRADES, user_id, boom)
        assert cache.peek(keys.TRADES, user_id) is None

    def test_dedupe_window_never_refetches(self, cache, clock, user_id):
        fetch = Counter()
        cache.get(keys.TRADES, user_id, fetch)
        clock.advance(1)
        assert cache.get(keys.TRADES, user_id, fetch) == 1
        assert fetch.calls == 1

    def test_fresh_entry_served_until_ttl(self, cache, clock, user_id):
        fetch = Counter()
        cache.get(keys.TRADES, user_id, fetch)
        clock.advance(60)
        assert cache.get(keys.TRADES, user_id, fetch) == 1
        assert cache.hits == 1

    def test_stale_entry_revalidated_inline(self, cache, clock, user_id):
        fetch = Counter()
        cache.get(keys.TRADES, user_id, fetch)
        clock.advance(61)
        assert cache.get(keys.TRADES, user_id, fetch) == 2
        assert cache.peek(keys.TRADES, user_id) == 2

    def test_params_are_cached_separately(self, cache, user_id):
        fetch = Counter()
        cache.get(keys.TRADES, user_id, fetch, {"day": 1})
        cache.get(keys.TRADES, user_id, fetch, {"day": 2})
        assert fetch.calls == 2


class TestBackgroundRevalidation:
    @pytest.fixture
    def bg_cache(self, clock):
        cache = QueryCache(
            MemoryCacheBackend(clock=clock),
            ttl_seconds=60,
            dedupe_seconds=2,
            background_revalidate=True,
            clock=clock,
        )
        yield cache
        cache.close()

    def test_serves_stale_then_updates(self, bg_cache, clock, user_id):
        fetch = Counter()
        bg_cache.get(keys.TRADES, user_id, fetch)
        clock.advance(120)
        assert bg_cache.get(keys.TRADES, user_id, fetch) == 1
        bg_cache.wait(timeout=5)
        assert bg_cache.peek(keys.TRADES, user_id) == 2

    def test_failed_revalidation_keeps_stale_value(self, bg_cache, clock, user_id):
        bg_cache.get(keys.TRADES, user_id, lambda: "cached")
        clock.advance(120)

        def boom():
            raise RuntimeError("db down")

        assert bg_cache.get(keys.TRADES, user_id, boom) == "cached"
        bg_cache.wait(timeout=5)
        assert bg_cache.peek(keys.TRADES, user_id) == "cached"

    def test_session_fetcher_gets_worker_session(self, clock, user_id):
        worker_session = MagicMock()
        cache = QueryCache(
            MemoryCacheBackend(clock=clock),
            ttl_seconds=60,
            background_revalidate=True,
            clock=clock,
            session_factory=lambda: worker_session,
        )
        seen = []

        def fetch(session=None):
            seen.append(session)
            return len(seen)

        try:
            cache.get(keys.RULES, user_id, fetch, uses_session=True)
            clock.advance(120)
            assert cache.get(keys.RULES, user_id, fetch, uses_session=True) == 1
            cache.wait(timeout=5)
        finally:
            cache.close()
        assert seen == [None, worker_session]
        worker_session.close.assert_called_once()
        assert cache.peek(keys.RULES, user_id) == 2

    def test_session_fetcher_inline_without_factory(self, bg_cache, clock, user_id):
        seen = []

        def fetch(session=None):
            seen.append(session)
            return len(seen)

        bg_cache.get(keys.RULES, user_id, fetch, uses_session=True)
        clock.advance(120)
        assert bg_cache.get(keys.RULES, user_id, fetch, uses_session=True) == 2
        assert seen == [None, None]


class TestInvalidation:
    def test_invalidate_drops_user_entity(self, cache, user_id):
        cache.get(keys.TRADES, user_id, lambda: "a", {"day": 1})
        cache.get(keys.TRADES, user_id, lambda: "b", {"day": 2})
        assert cache.invalidate(keys.TRADES, user_id) == 2
        assert cache.peek(keys.TRADES, user_id, {"day": 1}) is None

    def test_invalidate_leaves_other_users_and_entities(self, cache, user_id):
        cache.get(keys.TRADES, "other", lambda: "theirs")
        cache.get(keys.RULES, user_id, lambda: "rules")
        cache.invalidate(keys.TRADES, user_id)
        assert cache.peek(keys.TRADES, "other") == "theirs"
        assert cache.peek(keys.RULES, user_id) == "rules"

    def test_next_read_after_invalidate_refetches(self, cache, user_id):
        fetch = Counter()
        cache.get(keys.PROFILE, user_id, fetch)
        cache.invalidate(keys.PROFILE, user_id)
        assert cache.get(keys.PROFILE, user_id, fetch) == 2


class TestMemoryBackend:
    def test_expires_old_entries(self, clock):
        backend = MemoryCacheBackend(max_age_seconds=10, clock=clock)
        backend.set("k", "v", clock())
        clock.advance(11)
        assert backend.get("k") is None
        assert len(backend) == 0

    def test_unread_expired_entries_swept_on_write(self, clock):
        backend = MemoryCacheBackend(max_age_seconds=10, clock=clock)
        for day in range(5):
            backend.set(f"trademind:trades:u1:{day}", [], clock())
        clock.advance(11)
        backend.set("trademind:rules:u1:-", [], clock())
        assert len(backend) == 1

    def test_fresh_entries_survive_sweep(self, clock):
        backend = MemoryCacheBackend(max_age_seconds=10, clock=clock)
        backend.set("old", 1, clock())
        clock.advance(5)
        backend.set("young", 2, clock())
        clock.advance(6)
        backend.set("new", 3, clock())
        assert backend.get("old") is None
        assert backend.get("young") == (2, 1005.0)
        assert len(backend) == 2

    def test_max_entries_evicts_oldest(self, clock):
        backend = MemoryCacheBackend(clock=clock, max_entries=2)
        backend.set("a", 1, clock())
        clock.advance(1)
        backend.set("b", 2, clock())
        clock.advance(1)
        backend.set("c", 3, clock())
        assert backend.get("a") is None
        assert len(backend) == 2

    def test_overwrite_does_not_evict(self, clock):
        backend = MemoryCacheBackend(clock=clock, max_entries=2)
        backend.set("a", 1, clock())
        backend.set("b", 2, clock())
        backend.set("b", 3, clock())
        assert backend.get("a") == (1, 1000.0)
        assert backend.get("b") == (3, 1000.0)

    def test_delete_prefix(self, clock):
        backend = MemoryCacheBackend(clock=clock)
        backend.set("a:1", 1, clock())
        backend.set("a:2", 2, clock())
        backend.set("b:1", 3, clock())
        assert backend.delete_prefix("a:") == 2
        assert len(backend) == 1


# =============================================================================
# RedisCache
# =============================================================================


class TestRedisCache:
    @pytest.fixture
    def client(self):
        return MagicMock()

    @pytest.fixture
    def backend(self, client):
        backend = RedisCache("redis://localhost:6379/0", max_age_seconds=300)
        backend._client = client
        return backend

    def test_get_unpickles_entry(self, backend, client):
        client.get.return_value = pickle.dumps(({"x": 1}, 10.0))
        assert backend.get("k") == ({"x": 1}, 10.0)

    def test_get_miss(self, backend, client):
        client.get.return_value = None
        assert backend.get("k") is None

    def test_get_error_is_a_miss(self, backend, client):
        client.get.side_effect = redis.ConnectionError("down")
        assert backend.get("k") is None

    def test_set_uses_expiry(self, backend, client):
        backend.set("k", "v", 5.0)
        key, ttl, payload = client.setex.call_args[0]
        assert key == "k"
        assert ttl == 300
        assert pickle.loads(payload) == ("v", 5.0)

    def test_set_error_is_swallowed(self, backend, client):
        client.setex.side_effect = redis.ConnectionError("down")
        backend.set("k", "v", 5.0)

    def test_delete_prefix_scans(self, backend, client):
        client.scan_iter.return_value = [b"trademind:trades:u1:a", b"trademind:trades:u1:b"]
        assert backend.delete_prefix("trademind:trades:u1:") == 2
        client.scan_iter.assert_called_once_with(match="trademind:trades:u1:*")
        assert client.delete.call_count == 2

    def test_works_behind_query_cache(self, backend, client, clock, user_id):
        store = {}
        client.get.side_effect = store.get
        client.setex.side_effect = lambda key, ttl, payload: store.__setitem__(key, payload)
        cache = QueryCache(backend, ttl_seconds=60, clock=clock)

        fetch = Counter()
        cache.get(keys.PROFILE, user_id, fetch)
        assert cache.get(keys.PROFILE, user_id, fetch) == 1
        assert fetch.calls == 1

    def test_close_releases_client(self, backend, client):
        backend.close()
        client.close.assert_called_once()
        assert backend._client is None
