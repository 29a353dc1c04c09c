"""Trading-channel resolution and caching for BSC launchpad tokens."""

from launchroute.errors import ErrorKind, RouteError
from launchroute.models.route import RouteFetchResult, TokenPlatform, TradingChannel
from launchroute.service import RouteQueryService, build_route_query_service

__version__ = "0.1.0"
__all__ = [
    "RouteQueryService",
    "build_route_query_service",
    "RouteFetchResult",
    "TokenPlatform",
    "TradingChannel",
    "RouteError",
    "ErrorKind",
    "__version__",
]
