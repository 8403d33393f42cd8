"""Unit tests for the TTL response cache."""

from __future__ import annotations

from changefeed.services.changelog.cache import ResponseCache


class TestMakeKey:
    def test_stable_key(self):
        assert ResponseCache.make_key(30, 20, None) == "30|20|"
        assert ResponseCache.make_key(30, 20, "abc") == "30|20|abc"

    def test_empty_cursor_same_as_none(self):
        assert ResponseCache.make_key(7, 5, "") == ResponseCache.make_key(7, 5, None)


class TestResponseCache:
    """Expiry is lazy and driven by the injected clock."""

    def test_hit_within_ttl_returns_same_object(self, fake_clock):
        cache: ResponseCache[dict] = ResponseCache(ttl_seconds=60, clock=fake_clock)
        payload = {"items": [1, 2]}
        cache.set("k", payload)

        fake_clock.advance(59.9)

        assert cache.get("k") is payload

    def test_miss_for_unknown_key(self, fake_clock):
        cache: ResponseCache[dict] = ResponseCache(clock=fake_clock)
        assert cache.get("missing") is None

    def test_expired_read_evicts(self, fake_clock):
        cache: ResponseCache[dict] = ResponseCache(ttl_seconds=60, clock=fake_clock)
        cache.set("k", {"v": 1})

        fake_clock.advance(60)

        assert cache.get("k") is None
        assert len(cache) == 0

    def test_no_sweep_on_other_operations(self, fake_clock):
        cache: ResponseCache[dict] = ResponseCache(ttl_seconds=10, clock=fake_clock)
        cache.set("old", {"v": 1})
        fake_clock.advance(20)

        cache.set("new", {"v": 2})
        assert cache.get("new") == {"v": 2}

        # Stale entry lingers until its own key is read
        assert len(cache) == 2
        assert cache.get("old") is None
        assert len(cache) == 1

    def test_overwrite_resets_expiry(self, fake_clock):
        cache: ResponseCache[dict] = ResponseCache(ttl_seconds=60, clock=fake_clock)
        cache.set("k", {"v": 1})
        fake_clock.advance(50)
        cache.set("k", {"v": 2})
        fake_clock.advance(50)

        assert cache.get("k") == {"v": 2}

    def test_clear(self, fake_clock):
        cache: ResponseCache[dict] = ResponseCache(clock=fake_clock)
        cache.set("a", {})
        cache.clear()
        assert len(cache) == 0
