"""Data models for route resolution."""

from launchroute.models.route import (
    MigrationStatus,
    PancakeVersion,
    RouteFetchResult,
    TokenPlatform,
    TradingChannel,
    default_pancake_route,
)
from launchroute.models.types import (
    ZERO_ADDRESS,
    Address,
    is_nonzero_address,
    is_valid_address,
    is_zero_address,
    is_zero_like,
    normalize_address,
)

__all__ = [
    # Types
    "Address",
    "ZERO_ADDRESS",
    "normalize_address",
    "is_valid_address",
    "is_zero_address",
    "is_nonzero_address",
    "is_zero_like",
    # Route models
    "TokenPlatform",
    "TradingChannel",
    "PancakeVersion",
    "MigrationStatus",
    "RouteFetchResult",
    "default_pancake_route",
]
