"""Route query facade: cache lookup, platform probing, write-through."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Iterable
from typing import Any

import structlog

from launchroute.cache import BoundedCache
from launchroute.cache_manager import RouteCacheManager
from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.errors import ErrorKind, RouteError
from launchroute.executor import QueryExecutor
from launchroute.models.route import RouteFetchResult, TokenPlatform
from launchroute.models.types import is_valid_address, normalize_address
from launchroute.pancake.liquidity import LiquidityChecker
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.platforms.detector import PlatformDetector
from launchroute.platforms.registry import build_platform_registry
from launchroute.rpc.client import RpcReadClient, Web3RpcClient
from launchroute.tracer import RouteTracer

logger = structlog.get_logger()


class RouteQueryService:
    """Entry point for route resolution.

    A fresh cache entry is returned without any chain reads. Otherwise the
    executor probes platforms and the result is written back when it is new
    or its migration status changed.
    """

    def __init__(
        self,
        executor: QueryExecutor,
        cache_manager: RouteCacheManager,
        pair_finder: PancakePairFinder,
        detector: PlatformDetector | None = None,
    ):
        self.executor = executor
        self.cache_manager = cache_manager
        self.pair_finder = pair_finder
        self.detector = detector or PlatformDetector()

    @property
    def tracer(self) -> RouteTracer:
        return self.executor.tracer

    async def query_route(
        self, token_address: str, platform: TokenPlatform | None = None
    ) -> RouteFetchResult:
        """Resolve the trading route for a token.

        Args:
            token_address: Token to resolve
            platform: Launch platform override; detected from the address if None

        Raises:
            RouteError: VALIDATION for malformed addresses, or the last platform
                error when no route could be produced
        """
        if not isinstance(token_address, str) or not is_valid_address(token_address.strip()):
            raise RouteError(
                f"Invalid token address: {token_address!r}",
                ErrorKind.VALIDATION,
                {"token": token_address},
            )
        token = normalize_address(token_address)

        cached = self.cache_manager.get_route(token)
        if cached is not None and self.cache_manager.should_use_cache(cached):
            return cached.route

        initial = platform if platform is not None else self.detector.detect(token)
        route = await self.executor.execute_with_fallback(token, initial)

        if self.cache_manager.should_update_cache(token, route):
            self.cache_manager.set_route(token, route)
        return route

    async def query_routes(
        self, token_addresses: Iterable[str]
    ) -> dict[str, RouteFetchResult]:
        """Resolve several tokens concurrently; failed tokens are omitted."""
        tokens = list(dict.fromkeys(a.strip().lower() for a in token_addresses))
        results = await asyncio.gather(
            *(self.query_route(t) for t in tokens), return_exceptions=True
        )
        routes: dict[str, RouteFetchResult] = {}
        for token, result in zip(tokens, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning("route_query_failed", token=token, error=str(result))
                continue
            routes[token] = result
        return routes

    def clear_route(self, token_address: str | None = None) -> None:
        """Forget a token's cached route and pool, or everything when None."""
        if token_address is None:
            self.clear_all()
            return
        self.cache_manager.delete_route(token_address)
        self.pair_finder.clear_cache(token_address)

    def clear_all(self) -> None:
        self.cache_manager.clear_all()
        self.pair_finder.clear_cache()

    def get_stats(self) -> dict[str, Any]:
        return {
            "routeCache": self.cache_manager.get_stats(),
            "pairCache": self.pair_finder.cache_stats().as_dict(),
        }

    async def warmup_cache(self, token_addresses: Iterable[str]) -> tuple[int, int]:
        """Pre-resolve routes for tokens expected to be traded soon."""
        tokens = [a for a in token_addresses if is_valid_address(a)]

        async def _resolve(token: str) -> RouteFetchResult:
            return await self.executor.execute_with_fallback(
                normalize_address(token), self.detector.detect(token)
            )

        return await self.cache_manager.warmup(tokens, _resolve)


def build_route_query_service(
    client: RpcReadClient,
    config: RouteQueryConfig = DEFAULT_CONFIG,
) -> RouteQueryService:
    """Wire up a RouteQueryService with fresh caches around one RPC client."""
    pair_finder = PancakePairFinder(
        liquidity_checker=LiquidityChecker(),
        cache=BoundedCache("pancake_pairs", max_size=config.pair_cache_max_size),
        config=config,
    )
    registry = build_platform_registry(client, pair_finder, config)
    executor = QueryExecutor(registry, config, RouteTracer(enabled=config.tracing_enabled))
    cache_manager = RouteCacheManager(config)
    return RouteQueryService(executor, cache_manager, pair_finder)


# Public BSC dataseed used when LAUNCHROUTE_RPC_URL is unset
DEFAULT_RPC_URL = "https://bsc-dataseed.bnbchain.org"


def create_service_from_env() -> RouteQueryService:
    """Build a service for a real node.

    The RPC endpoint comes from LAUNCHROUTE_RPC_URL and tuning from the
    other LAUNCHROUTE_* variables (see RouteQueryConfig.from_env).
    """
    rpc_url = os.environ.get("LAUNCHROUTE_RPC_URL", DEFAULT_RPC_URL)
    logger.info("route_service_created", rpc_url=rpc_url[:50])
    return build_route_query_service(Web3RpcClient(rpc_url), RouteQueryConfig.from_env())


__all__ = ["RouteQueryService", "build_route_query_service", "create_service_from_env"]
