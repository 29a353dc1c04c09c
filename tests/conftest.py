"""Pytest configuration and fixtures."""

import pytest

from launchroute.cache import BoundedCache
from launchroute.config import RouteQueryConfig
from launchroute.pancake.liquidity import LiquidityChecker
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.rpc.client import MockRpcClient
from launchroute.service import RouteQueryService, build_route_query_service
from tests.helpers.factories import make_test_config, zero_pancake


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> RouteQueryConfig:
    """Default config with retry backoff disabled."""
    return make_test_config()


@pytest.fixture
def client() -> MockRpcClient:
    """Mock client where every factory lookup misses unless configured."""
    return zero_pancake(MockRpcClient())


@pytest.fixture
def pair_finder(config: RouteQueryConfig) -> PancakePairFinder:
    return PancakePairFinder(
        liquidity_checker=LiquidityChecker(),
        cache=BoundedCache("pancake_pairs", max_size=config.pair_cache_max_size),
        config=config,
    )


@pytest.fixture
def service(client: MockRpcClient, config: RouteQueryConfig) -> RouteQueryService:
    return build_route_query_service(client, config)
