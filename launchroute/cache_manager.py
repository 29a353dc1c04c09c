"""Route cache with a migration-aware freshness policy.

Migration is irreversible on-chain, so a migrated route is cached for the
life of the process. A not-migrated route changes every block (progress
moves, migration can happen) and is re-verified after a short TTL.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

import structlog

from launchroute.cache import BoundedCache
from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.models.route import MigrationStatus, RouteFetchResult
from launchroute.models.types import normalize_address

logger = structlog.get_logger()


@dataclass
class RouteCacheEntry:
    route: RouteFetchResult
    timestamp: float
    migration_status: MigrationStatus


class RouteCacheManager:
    """Stores resolved routes keyed by lowercased token address."""

    def __init__(
        self,
        config: RouteQueryConfig = DEFAULT_CONFIG,
        cache: BoundedCache[str, RouteCacheEntry] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._clock = clock
        self.cache = cache if cache is not None else BoundedCache(
            "route_cache", max_size=config.route_cache_max_size, clock=clock
        )

    def get_route(self, token_address: str) -> RouteCacheEntry | None:
        key = normalize_address(token_address)
        entry = self.cache.get(key)
        if entry is not None:
            logger.debug(
                "route_cache_hit",
                token=key,
                migration_status=entry.migration_status.value,
                age=self._clock() - entry.timestamp,
            )
        return entry

    def set_route(self, token_address: str, route: RouteFetchResult) -> RouteCacheEntry:
        key = normalize_address(token_address)
        status = route.migration_status
        entry = RouteCacheEntry(route=route, timestamp=self._clock(), migration_status=status)
        ttl = None if status == MigrationStatus.MIGRATED else self.config.not_migrated_ttl
        self.cache.set(key, entry, ttl=ttl)
        logger.debug(
            "route_cache_updated",
            token=key,
            platform=route.platform.value,
            migration_status=status.value,
            ttl=ttl,
        )
        return entry

    def should_use_cache(self, entry: RouteCacheEntry) -> bool:
        """Migrated entries are always fresh; others only within the TTL."""
        if entry.migration_status == MigrationStatus.MIGRATED:
            return True
        age = self._clock() - entry.timestamp
        if age >= self.config.not_migrated_ttl:
            logger.debug("route_cache_stale", age=age, ttl=self.config.not_migrated_ttl)
            return False
        return True

    def should_update_cache(self, token_address: str, route: RouteFetchResult) -> bool:
        """True on a miss or when the migration status flipped."""
        key = normalize_address(token_address)
        entry = self.cache.peek(key)
        if entry is None:
            return True
        if entry.migration_status != route.migration_status:
            logger.info(
                "route_migration_status_changed",
                token=key,
                previous=entry.migration_status.value,
                current=route.migration_status.value,
            )
            return True
        return False

    def delete_route(self, token_address: str) -> bool:
        key = normalize_address(token_address)
        deleted = self.cache.delete(key)
        if deleted:
            logger.info("route_cache_deleted", token=key)
        return deleted

    def clear_all(self) -> None:
        self.cache.clear()
        logger.info("route_cache_cleared")

    def keys(self) -> list[str]:
        return self.cache.keys()

    def _tokens_with_status(self, status: MigrationStatus) -> list[str]:
        return [key for key, entry in self.cache.items() if entry.migration_status == status]

    def migrated_tokens(self) -> list[str]:
        return self._tokens_with_status(MigrationStatus.MIGRATED)

    def not_migrated_tokens(self) -> list[str]:
        return self._tokens_with_status(MigrationStatus.NOT_MIGRATED)

    def get_stats(self) -> dict[str, Any]:
        stats = self.cache.stats().as_dict()
        stats["migrated"] = len(self.migrated_tokens())
        stats["notMigrated"] = len(self.not_migrated_tokens())
        return stats

    async def warmup(
        self,
        token_addresses: Iterable[str],
        query_fn: Callable[[str], Awaitable[RouteFetchResult]],
    ) -> tuple[int, int]:
        """Resolve and cache routes concurrently.

        Returns:
            (succeeded, failed) counts; failures are logged, not raised
        """
        tokens = list(token_addresses)
        logger.info("route_cache_warmup_started", count=len(tokens))

        async def _warm(token: str) -> RouteFetchResult:
            route = await query_fn(token)
            self.set_route(token, route)
            return route

        results = await asyncio.gather(*(_warm(t) for t in tokens), return_exceptions=True)
        failed = 0
        for token, result in zip(tokens, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                failed += 1
                logger.warning("route_cache_warmup_failed", token=token, error=str(result))
        succeeded = len(tokens) - failed
        logger.info(
            "route_cache_warmup_finished",
            total=len(tokens),
            succeeded=succeeded,
            failed=failed,
        )
        return succeeded, failed


__all__ = ["RouteCacheManager", "RouteCacheEntry"]
