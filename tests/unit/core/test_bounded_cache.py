"""Tests for BoundedCache eviction, expiry and statistics."""

import pytest

from launchroute.cache import BoundedCache, CacheStats
from tests.conftest import FakeClock


def make_cache(max_size: int = 3, clock: FakeClock | None = None) -> BoundedCache[str, int]:
    return BoundedCache("test", max_size=max_size, clock=clock or FakeClock())


class TestBasics:
    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            BoundedCache("bad", max_size=0)

    def test_set_get(self) -> None:
        cache = make_cache()
        cache.set("a", 1)
        assert cache.get("a") == 1
        assert "a" in cache
        assert len(cache) == 1

    def test_missing_key(self) -> None:
        assert make_cache().get("nope") is None

    def test_delete(self) -> None:
        cache = make_cache()
        cache.set("a", 1)
        assert cache.delete("a") is True
        assert cache.delete("a") is False
        assert cache.get("a") is None

    def test_clear(self) -> None:
        cache = make_cache()
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0


class TestEviction:
    def test_evicts_oldest_write(self) -> None:
        cache = make_cache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.keys() == ["b", "c"]

    def test_reads_do_not_refresh_position(self) -> None:
        cache = make_cache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)
        assert "a" not in cache
        assert cache.keys() == ["b", "c"]

    def test_rewrite_moves_to_newest(self) -> None:
        cache = make_cache(max_size=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        cache.set("c", 3)
        assert cache.keys() == ["a", "c"]
        assert cache.get("a") == 10

    def test_eviction_counted(self) -> None:
        cache = make_cache(max_size=1)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.stats().evictions == 1


class TestExpiry:
    def test_entry_expires_after_ttl(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock=clock)
        cache.set("a", 1, ttl=10)
        clock.advance(9.9)
        assert cache.get("a") == 1
        clock.advance(0.1)
        assert cache.get("a") is None
        assert cache.stats().expirations == 1

    def test_permanent_entry_never_expires(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock=clock)
        cache.set("a", 1)
        clock.advance(10**9)
        assert cache.get("a") == 1
        assert cache.remaining_ttl("a") is None

    def test_remaining_ttl(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock=clock)
        cache.set("a", 1, ttl=10)
        clock.advance(4)
        assert cache.remaining_ttl("a") == pytest.approx(6)

    def test_cleanup_removes_expired(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock=clock)
        cache.set("a", 1, ttl=1)
        cache.set("b", 2, ttl=100)
        cache.set("c", 3)
        clock.advance(5)
        assert cache.cleanup() == 1
        assert sorted(cache.keys()) == ["b", "c"]

    def test_peek_hides_expired_without_counting(self) -> None:
        clock = FakeClock()
        cache = make_cache(clock=clock)
        cache.set("a", 1, ttl=1)
        clock.advance(2)
        assert cache.peek("a") is None
        stats = cache.stats()
        assert stats.hits == 0
        assert stats.misses == 0


class TestStats:
    def test_hit_rate(self) -> None:
        cache = make_cache()
        cache.set("a", 1)
        cache.get("a")
        cache.get("a")
        cache.get("b")
        stats = cache.stats()
        assert stats.hits == 2
        assert stats.misses == 1
        assert stats.hit_rate == pytest.approx(2 / 3)
        assert stats.utilization == pytest.approx(1 / 3)

    def test_stats_is_a_snapshot(self) -> None:
        cache = make_cache()
        snapshot = cache.stats()
        cache.get("a")
        assert snapshot.misses == 0

    def test_reset_stats(self) -> None:
        cache = make_cache()
        cache.get("a")
        cache.reset_stats()
        assert cache.stats().misses == 0

    def test_as_dict(self) -> None:
        data = CacheStats(name="x", size=1, capacity=4, hits=1, misses=1).as_dict()
        assert data["hitRate"] == 0.5
        assert data["utilization"] == 0.25
        assert data["name"] == "x"

    def test_empty_stats_have_zero_rates(self) -> None:
        stats = CacheStats(name="x", size=0, capacity=0)
        assert stats.hit_rate == 0.0
        assert stats.utilization == 0.0
