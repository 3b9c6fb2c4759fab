"""
Tests for the result cache.
"""

import pytest

from design_extraction.optimizer.cache import ResultCache


class TestResultCache:
    """Test TTL expiry, LRU eviction and stale reads."""

    def test_round_trip(self, clock):
        cache = ResultCache(default_ttl=10.0, clock=clock)
        record = {"id": "1", "name": "Header"}

        cache.set("1", record)

        assert cache.get("1") == record
        assert "1" in cache

    def test_miss(self, clock):
        cache = ResultCache(clock=clock)

        assert cache.get("missing") is None
        assert cache.misses == 1

    def test_expiry(self, clock):
        """Test that an entry is a miss once its TTL has elapsed."""
        cache = ResultCache(default_ttl=10.0, clock=clock)
        cache.set("1", "value")

        clock.advance(9.9)
        assert cache.get("1") == "value"

        clock.advance(0.1)
        assert cache.get("1") is None
        assert "1" not in cache

    def test_per_entry_ttl_overrides_default(self, clock):
        cache = ResultCache(default_ttl=100.0, clock=clock)
        cache.set("short", "a", ttl=1.0)
        cache.set("long", "b")

        clock.advance(5.0)

        assert cache.get("short") is None
        assert cache.get("long") == "b"

    def test_no_ttl_never_expires(self, clock):
        cache = ResultCache(clock=clock)
        cache.set("1", "value")

        clock.advance(1e9)

        assert cache.get("1") == "value"

    def test_stale_read_after_expiry(self, clock):
        """Test that the last value stays reachable for fallbacks after expiry."""
        cache = ResultCache(default_ttl=1.0, clock=clock)
        cache.set("1", "old")
        clock.advance(2.0)

        assert cache.get("1") is None
        assert cache.get_stale("1") == "old"

    def test_purge_expired(self, clock):
        cache = ResultCache(default_ttl=1.0, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2, ttl=100.0)
        clock.advance(2.0)

        assert cache.purge_expired() == 1
        assert len(cache) == 1
        assert cache.get_stale("a") is None

    def test_lru_eviction(self, clock):
        """Test that the least recently used entry is evicted first."""
        cache = ResultCache(max_entries=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert len(cache) == 2
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert cache.evictions == 1

    def test_clear(self, clock):
        cache = ResultCache(clock=clock)
        cache.set("a", 1)
        cache.get("a")

        cache.clear()

        assert len(cache) == 0
        assert cache.stats() == {"entries": 0, "hits": 0, "misses": 0, "evictions": 0, "hit_rate": 0.0}

    def test_stats_hit_rate(self, clock):
        cache = ResultCache(clock=clock)
        cache.set("a", 1)
        cache.get("a")
        cache.get("a")
        cache.get("b")
        cache.get("c")

        assert cache.stats()["hit_rate"] == pytest.approx(0.5)

    @pytest.mark.parametrize("kwargs", [{"default_ttl": 0}, {"default_ttl": -1}, {"max_entries": 0}])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            ResultCache(**kwargs)
