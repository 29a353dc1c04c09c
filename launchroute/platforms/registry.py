"""Closed mapping from TokenPlatform to its query implementation."""

from __future__ import annotations

from collections.abc import Mapping

from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.models.route import TokenPlatform
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.platforms.base import PlatformQuery
from launchroute.platforms.default import DefaultPlatformQuery
from launchroute.platforms.flap import FlapPlatformQuery
from launchroute.platforms.four import FourPlatformQuery
from launchroute.platforms.luna import LunaPlatformQuery
from launchroute.rpc.client import RpcReadClient


class PlatformRegistry:
    """Dispatches a TokenPlatform to its PlatformQuery.

    The registry must cover every TokenPlatform member; construction fails
    otherwise, so adding an enum member without a query is caught at
    startup rather than on the first token of that platform.

    Usage:
        registry = build_platform_registry(client, pair_finder)
        route = await registry.get(TokenPlatform.FLAP).query_route(token)
    """

    def __init__(self, queries: Mapping[TokenPlatform, PlatformQuery]):
        missing = [p.value for p in TokenPlatform if p not in queries]
        if missing:
            raise ValueError(f"No platform query registered for: {', '.join(missing)}")
        self._queries = dict(queries)

    def get(self, platform: TokenPlatform) -> PlatformQuery:
        return self._queries[platform]

    def __contains__(self, platform: object) -> bool:
        return platform in self._queries

    @property
    def platforms(self) -> list[TokenPlatform]:
        return list(self._queries)


def build_platform_registry(
    client: RpcReadClient,
    pair_finder: PancakePairFinder,
    config: RouteQueryConfig = DEFAULT_CONFIG,
) -> PlatformRegistry:
    """Create the query for every platform, sharing one client and finder."""
    return PlatformRegistry(
        {
            TokenPlatform.FOUR: FourPlatformQuery(client, pair_finder, TokenPlatform.FOUR, config),
            TokenPlatform.XMODE: FourPlatformQuery(
                client, pair_finder, TokenPlatform.XMODE, config
            ),
            TokenPlatform.FLAP: FlapPlatformQuery(client, pair_finder, config),
            TokenPlatform.LUNA: LunaPlatformQuery(client, pair_finder, config),
            TokenPlatform.UNKNOWN: DefaultPlatformQuery(client, pair_finder, config),
        }
    )


__all__ = ["PlatformRegistry", "build_platform_registry"]
