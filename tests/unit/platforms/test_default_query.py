"""Tests for the plain PancakeSwap query used for unknown platforms."""

import pytest

from launchroute.constants import PANCAKE_FACTORY
from launchroute.models.route import MigrationStatus, TokenPlatform, TradingChannel
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.platforms.default import DefaultPlatformQuery
from launchroute.rpc.client import MockRpcClient
from tests.helpers import ONE, PAIR_A, PLAIN_TOKEN, USDT, add_v2_pair


@pytest.fixture
def query(client: MockRpcClient, pair_finder: PancakePairFinder) -> DefaultPlatformQuery:
    return DefaultPlatformQuery(client, pair_finder)


async def test_pool_found(client: MockRpcClient, query: DefaultPlatformQuery) -> None:
    add_v2_pair(client, PLAIN_TOKEN, USDT, PAIR_A, quote_reserve=1000 * ONE)
    route = await query.query_route(PLAIN_TOKEN)

    assert route.platform == TokenPlatform.UNKNOWN
    assert route.preferred_channel == TradingChannel.PANCAKE
    assert route.ready_for_pancake
    assert route.progress == 1.0
    assert route.quote_token == USDT
    assert route.metadata["pancakePairAddress"] == PAIR_A
    assert route.migration_status == MigrationStatus.MIGRATED


async def test_no_pool(query: DefaultPlatformQuery) -> None:
    route = await query.query_route(PLAIN_TOKEN)
    assert not route.ready_for_pancake
    assert route.progress == 0.0
    assert route.needs_fallback
    assert route.metadata == {}


async def test_sandbox_assumes_pancake(client: MockRpcClient, query: DefaultPlatformQuery) -> None:
    client.set_response(
        PANCAKE_FACTORY,
        "getPair",
        RuntimeError("import() is disallowed on ServiceWorkerGlobalScope"),
    )
    route = await query.query_route(PLAIN_TOKEN)

    assert route.ready_for_pancake
    assert route.is_assumed
    assert route.metadata == {"assumed": True}
    assert route.migration_status == MigrationStatus.NOT_MIGRATED
