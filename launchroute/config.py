"""Configuration for the route engine."""

from __future__ import annotations

import os
from dataclasses import dataclass

from launchroute.constants import (
    MIGRATING_PROGRESS_THRESHOLD,
    NOT_MIGRATED_TTL,
    PAIR_CACHE_MAX_SIZE,
    ROUTE_CACHE_MAX_SIZE,
)

_TRUE_VALUES = ("true", "1", "yes")


@dataclass(frozen=True)
class RouteQueryConfig:
    """Centralized configuration for route resolution and caching.

    Attributes:
        route_cache_max_size: Maximum number of cached routes (default: 50)
        not_migrated_ttl: Seconds a not-migrated route stays fresh (default: 60)
        pair_cache_max_size: Maximum number of cached Pancake pairs (default: 100)
        retry_max_attempts: Attempts per platform query, first try included (default: 2)
        retry_base_delay: First backoff delay in seconds (default: 1.5)
        retry_max_delay: Upper bound on a single backoff delay (default: 10)
        migrating_threshold: Progress from which a token counts as migrating
        tracing_enabled: Record step-by-step resolution traces
    """

    route_cache_max_size: int = ROUTE_CACHE_MAX_SIZE
    not_migrated_ttl: float = NOT_MIGRATED_TTL
    pair_cache_max_size: int = PAIR_CACHE_MAX_SIZE

    retry_max_attempts: int = 2
    retry_base_delay: float = 1.5
    retry_max_delay: float = 10.0

    migrating_threshold: float = MIGRATING_PROGRESS_THRESHOLD
    tracing_enabled: bool = False

    def __post_init__(self) -> None:
        if self.route_cache_max_size <= 0 or self.pair_cache_max_size <= 0:
            raise ValueError("cache sizes must be greater than 0")
        if self.retry_max_attempts < 1:
            raise ValueError("retry_max_attempts must be at least 1")
        if self.not_migrated_ttl < 0:
            raise ValueError("not_migrated_ttl cannot be negative")

    @classmethod
    def from_env(cls) -> RouteQueryConfig:
        """Build a config from LAUNCHROUTE_* environment variables.

        Unset variables keep their defaults.
        """
        defaults = cls()
        env = os.environ
        return cls(
            route_cache_max_size=int(
                env.get("LAUNCHROUTE_ROUTE_CACHE_SIZE", defaults.route_cache_max_size)
            ),
            not_migrated_ttl=float(
                env.get("LAUNCHROUTE_NOT_MIGRATED_TTL", defaults.not_migrated_ttl)
            ),
            pair_cache_max_size=int(
                env.get("LAUNCHROUTE_PAIR_CACHE_SIZE", defaults.pair_cache_max_size)
            ),
            retry_max_attempts=int(
                env.get("LAUNCHROUTE_RETRY_ATTEMPTS", defaults.retry_max_attempts)
            ),
            retry_base_delay=float(
                env.get("LAUNCHROUTE_RETRY_DELAY", defaults.retry_base_delay)
            ),
            retry_max_delay=float(
                env.get("LAUNCHROUTE_RETRY_MAX_DELAY", defaults.retry_max_delay)
            ),
            tracing_enabled=env.get("LAUNCHROUTE_TRACING", "false").lower() in _TRUE_VALUES,
        )


# Default configuration instance
DEFAULT_CONFIG = RouteQueryConfig()

__all__ = ["RouteQueryConfig", "DEFAULT_CONFIG"]
