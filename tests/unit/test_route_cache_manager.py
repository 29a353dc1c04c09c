"""Tests for the migration-aware route cache."""

import pytest

from launchroute.cache_manager import RouteCacheManager
from launchroute.config import RouteQueryConfig
from launchroute.errors import ErrorKind, RouteError
from launchroute.models.route import (
    MigrationStatus,
    RouteFetchResult,
    TokenPlatform,
    TradingChannel,
)
from tests.conftest import FakeClock
from tests.helpers import FLAP_TOKEN, FOUR_TOKEN, PLAIN_TOKEN

MIGRATED = RouteFetchResult(
    platform=TokenPlatform.FOUR,
    preferred_channel=TradingChannel.PANCAKE,
    ready_for_pancake=True,
    progress=1.0,
)
ON_CURVE = RouteFetchResult(
    platform=TokenPlatform.FOUR,
    preferred_channel=TradingChannel.FOUR,
    ready_for_pancake=False,
    progress=0.4,
)
ASSUMED = RouteFetchResult(
    platform=TokenPlatform.UNKNOWN,
    preferred_channel=TradingChannel.PANCAKE,
    ready_for_pancake=True,
    progress=1.0,
    metadata={"assumed": True},
)


@pytest.fixture
def manager(config: RouteQueryConfig, clock: FakeClock) -> RouteCacheManager:
    return RouteCacheManager(config, clock=clock)


class TestFreshness:
    def test_migrated_route_never_expires(
        self, manager: RouteCacheManager, clock: FakeClock
    ) -> None:
        manager.set_route(FOUR_TOKEN, MIGRATED)
        clock.advance(365 * 24 * 3600)
        entry = manager.get_route(FOUR_TOKEN)
        assert entry is not None
        assert entry.route == MIGRATED
        assert manager.should_use_cache(entry)

    def test_not_migrated_route_fresh_within_ttl(
        self, manager: RouteCacheManager, clock: FakeClock
    ) -> None:
        manager.set_route(FOUR_TOKEN, ON_CURVE)
        clock.advance(59)
        entry = manager.get_route(FOUR_TOKEN)
        assert entry is not None
        assert entry.migration_status == MigrationStatus.NOT_MIGRATED
        assert manager.should_use_cache(entry)

    def test_not_migrated_route_expires(
        self, manager: RouteCacheManager, clock: FakeClock
    ) -> None:
        manager.set_route(FOUR_TOKEN, ON_CURVE)
        entry = manager.get_route(FOUR_TOKEN)
        clock.advance(60)
        assert entry is not None
        assert not manager.should_use_cache(entry)
        assert manager.get_route(FOUR_TOKEN) is None

    def test_custom_ttl(self, clock: FakeClock) -> None:
        manager = RouteCacheManager(RouteQueryConfig(not_migrated_ttl=5.0), clock=clock)
        manager.set_route(FOUR_TOKEN, ON_CURVE)
        clock.advance(5)
        assert manager.get_route(FOUR_TOKEN) is None

    def test_assumed_route_treated_as_not_migrated(
        self, manager: RouteCacheManager, clock: FakeClock
    ) -> None:
        entry = manager.set_route(PLAIN_TOKEN, ASSUMED)
        assert entry.migration_status == MigrationStatus.NOT_MIGRATED
        clock.advance(60)
        assert manager.get_route(PLAIN_TOKEN) is None

    def test_keys_are_case_insensitive(self, manager: RouteCacheManager) -> None:
        manager.set_route(PLAIN_TOKEN.upper().replace("0X", "0x"), MIGRATED)
        assert manager.get_route(PLAIN_TOKEN) is not None


class TestShouldUpdate:
    def test_miss(self, manager: RouteCacheManager) -> None:
        assert manager.should_update_cache(FOUR_TOKEN, ON_CURVE)

    def test_same_status(self, manager: RouteCacheManager) -> None:
        manager.set_route(FOUR_TOKEN, ON_CURVE)
        progressed = ON_CURVE.model_copy(update={"progress": 0.8})
        assert not manager.should_update_cache(FOUR_TOKEN, progressed)

    def test_status_flip(self, manager: RouteCacheManager) -> None:
        manager.set_route(FOUR_TOKEN, ON_CURVE)
        assert manager.should_update_cache(FOUR_TOKEN, MIGRATED)

    def test_expired_entry_is_a_miss(self, manager: RouteCacheManager, clock: FakeClock) -> None:
        manager.set_route(FOUR_TOKEN, ON_CURVE)
        clock.advance(61)
        assert manager.should_update_cache(FOUR_TOKEN, ON_CURVE)

    def test_does_not_count_as_lookup(self, manager: RouteCacheManager) -> None:
        manager.set_route(FOUR_TOKEN, ON_CURVE)
        manager.should_update_cache(FOUR_TOKEN, ON_CURVE)
        stats = manager.get_stats()
        assert stats["hits"] == 0
        assert stats["misses"] == 0


class TestBookkeeping:
    def test_tokens_by_status(self, manager: RouteCacheManager) -> None:
        manager.set_route(FOUR_TOKEN, MIGRATED)
        manager.set_route(FLAP_TOKEN, ON_CURVE)
        manager.set_route(PLAIN_TOKEN, ASSUMED)
        assert manager.migrated_tokens() == [FOUR_TOKEN]
        assert manager.not_migrated_tokens() == [FLAP_TOKEN, PLAIN_TOKEN]
        assert manager.keys() == [FOUR_TOKEN, FLAP_TOKEN, PLAIN_TOKEN]

    def test_stats(self, manager: RouteCacheManager) -> None:
        manager.set_route(FOUR_TOKEN, MIGRATED)
        manager.set_route(FLAP_TOKEN, ON_CURVE)
        manager.get_route(FOUR_TOKEN)
        manager.get_route(PLAIN_TOKEN)

        stats = manager.get_stats()
        assert stats["size"] == 2
        assert stats["capacity"] == 50
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["migrated"] == 1
        assert stats["notMigrated"] == 1

    def test_delete_and_clear(self, manager: RouteCacheManager) -> None:
        manager.set_route(FOUR_TOKEN, MIGRATED)
        manager.set_route(FLAP_TOKEN, ON_CURVE)
        assert manager.delete_route(FOUR_TOKEN)
        assert not manager.delete_route(FOUR_TOKEN)
        manager.clear_all()
        assert manager.keys() == []

    def test_capacity_evicts_oldest_write(self, clock: FakeClock) -> None:
        manager = RouteCacheManager(RouteQueryConfig(route_cache_max_size=2), clock=clock)
        manager.set_route(FOUR_TOKEN, MIGRATED)
        manager.set_route(FLAP_TOKEN, MIGRATED)
        manager.get_route(FOUR_TOKEN)
        manager.set_route(PLAIN_TOKEN, MIGRATED)
        assert manager.keys() == [FLAP_TOKEN, PLAIN_TOKEN]


class TestWarmup:
    async def test_counts_and_caches(self, manager: RouteCacheManager) -> None:
        async def resolve(token: str) -> RouteFetchResult:
            if token == FLAP_TOKEN:
                raise RouteError("execution reverted", ErrorKind.CONTRACT_REVERT)
            return MIGRATED

        succeeded, failed = await manager.warmup([FOUR_TOKEN, FLAP_TOKEN, PLAIN_TOKEN], resolve)
        assert (succeeded, failed) == (2, 1)
        assert manager.keys() == [FOUR_TOKEN, PLAIN_TOKEN]

    async def test_empty(self, manager: RouteCacheManager) -> None:
        async def resolve(token: str) -> RouteFetchResult:
            raise AssertionError("not called")

        assert await manager.warmup([], resolve) == (0, 0)
