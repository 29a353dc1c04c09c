"""Launch platform detection and per-platform route queries."""

from launchroute.platforms.base import (
    BasePlatformQuery,
    PlatformQuery,
    calculate_ratio,
    resolve_pancake_preferred_mode,
)
from launchroute.platforms.default import DefaultPlatformQuery
from launchroute.platforms.detector import PlatformDetector
from launchroute.platforms.flap import FlapPlatformQuery
from launchroute.platforms.four import FourPlatformQuery, FourTokenInfo, parse_token_info
from launchroute.platforms.luna import LunaPlatformQuery, is_invalid_luna_info
from launchroute.platforms.registry import PlatformRegistry, build_platform_registry

__all__ = [
    "PlatformDetector",
    "PlatformQuery",
    "BasePlatformQuery",
    "calculate_ratio",
    "resolve_pancake_preferred_mode",
    "FourPlatformQuery",
    "FourTokenInfo",
    "parse_token_info",
    "FlapPlatformQuery",
    "LunaPlatformQuery",
    "is_invalid_luna_info",
    "DefaultPlatformQuery",
    "PlatformRegistry",
    "build_platform_registry",
]
