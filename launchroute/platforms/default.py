"""Route resolution for tokens with no known launch platform."""

from __future__ import annotations

import structlog

from launchroute.errors import RouteError, is_sandbox_error
from launchroute.models.route import RouteFetchResult, TokenPlatform, TradingChannel
from launchroute.models.types import normalize_address
from launchroute.platforms.base import BasePlatformQuery

logger = structlog.get_logger()


class DefaultPlatformQuery(BasePlatformQuery):
    """Looks the token up on PancakeSwap directly.

    When the execution context cannot perform reads at all, a Pancake route
    is assumed and flagged with `metadata.assumed`.
    """

    platform = TokenPlatform.UNKNOWN

    async def query_route(self, token_address: str) -> RouteFetchResult:
        token = normalize_address(token_address)
        self.log_query_start(token)
        try:
            pair = await self.find_pancake_pair(token)
        except RouteError as e:
            if not is_sandbox_error(e):
                self.log_query_error(token, e)
                raise
            logger.warning("pancake_route_assumed", token=token, error=str(e))
            return RouteFetchResult(
                platform=TokenPlatform.UNKNOWN,
                preferred_channel=TradingChannel.PANCAKE,
                ready_for_pancake=True,
                progress=1.0,
                migrating=False,
                metadata={"assumed": True},
                notes="Contract reads are unavailable here; assuming a Pancake pool exists",
            )

        result = RouteFetchResult(
            platform=TokenPlatform.UNKNOWN,
            preferred_channel=TradingChannel.PANCAKE,
            ready_for_pancake=pair.has_liquidity,
            progress=1.0 if pair.has_liquidity else 0.0,
            migrating=False,
            quote_token=pair.quote_token,
            metadata=self.merge_pancake_metadata(None, pair),
        )
        self.log_query_success(token, result)
        return result


__all__ = ["DefaultPlatformQuery"]
