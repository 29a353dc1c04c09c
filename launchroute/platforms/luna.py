"""Luna.fun route resolution.

Luna tokens always trade through Pancake; the launchpad only tells us
whether the pair is live yet.
"""

from __future__ import annotations

from typing import Any

import structlog

from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.constants import LUNA_FUN_LAUNCHPAD
from launchroute.errors import ErrorKind, RouteError
from launchroute.models.route import PancakeVersion, RouteFetchResult, TokenPlatform, TradingChannel
from launchroute.models.types import (
    is_nonzero_address,
    is_valid_address,
    is_zero_like,
    normalize_address,
)
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.pancake.types import PairCheckResult
from launchroute.platforms.base import BasePlatformQuery
from launchroute.rpc.abis import LUNA_LAUNCHPAD_ABI
from launchroute.rpc.client import RpcReadClient, struct_field

logger = structlog.get_logger()


def _lower_or_empty(value: Any) -> str:
    return value.lower() if isinstance(value, str) else ""


def is_invalid_luna_info(info: Any, token_address: str) -> bool:
    """True for empty records and records describing another token.

    Unused launchpad slots can hold stale data for a different token.
    """
    if is_zero_like(info):
        return True
    token = token_address.lower()
    reported = _lower_or_empty(struct_field(info, "token", 1))
    meta = _lower_or_empty(struct_field(struct_field(info, "data", 3), "token", 0))
    return bool((reported and reported != token) or (meta and meta != token))


class LunaPlatformQuery(BasePlatformQuery):
    """Route query for Luna.fun launchpad tokens."""

    platform = TokenPlatform.LUNA

    def __init__(
        self,
        client: RpcReadClient,
        pair_finder: PancakePairFinder,
        config: RouteQueryConfig = DEFAULT_CONFIG,
        launchpad_address: str = LUNA_FUN_LAUNCHPAD,
    ):
        super().__init__(client, pair_finder, config)
        self.launchpad_address = launchpad_address

    async def query_route(self, token_address: str) -> RouteFetchResult:
        token = normalize_address(token_address)
        self.log_query_start(token)
        try:
            info = await self.read(
                self.launchpad_address, LUNA_LAUNCHPAD_ABI, "tokenInfo", (token,)
            )
            if is_invalid_luna_info(info, token):
                result = await self._handle_invalid(token)
            else:
                result = self._parse_info(info)
        except RouteError as e:
            self.log_query_error(token, e)
            raise

        self.log_query_success(token, result)
        return result

    async def _handle_invalid(self, token: str) -> RouteFetchResult:
        logger.warning("luna_launchpad_invalid_record", token=token)
        pair = await self.find_pancake_pair(token)
        if pair.has_liquidity:
            return self.pancake_route(
                pair, notes="Luna launchpad has no record for the token, switched to Pancake"
            )
        raise RouteError(
            "Luna launchpad returned no usable record",
            ErrorKind.INVALID_PLATFORM_DATA,
            {"platform": self.platform.value, "token": token},
        )

    def _parse_info(self, info: Any) -> RouteFetchResult:
        pair_address = struct_field(info, "pair", 2)
        trading_on_uniswap = bool(struct_field(info, "tradingOnUniswap", 8, False))
        ready = is_nonzero_address(pair_address) and trading_on_uniswap

        data = struct_field(info, "data", 3)
        quote = struct_field(info, "quote") or struct_field(data, "quote")
        quote_token = normalize_address(quote) if is_valid_address(quote) else None

        pair: PairCheckResult | None = None
        if ready:
            pair = PairCheckResult(
                has_liquidity=True,
                quote_token=quote_token,
                pair_address=normalize_address(pair_address),
                version=PancakeVersion.V2,
            )

        name = struct_field(data, "name", 1)
        ticker = struct_field(data, "ticker", 3)
        return RouteFetchResult(
            platform=TokenPlatform.LUNA,
            preferred_channel=TradingChannel.PANCAKE,
            ready_for_pancake=ready,
            progress=1.0 if ready else 0.0,
            migrating=False,
            quote_token=quote_token,
            metadata=self.merge_pancake_metadata(
                {
                    "name": name if isinstance(name, str) and name else None,
                    "symbol": ticker if isinstance(ticker, str) and ticker else None,
                },
                pair,
            ),
        )


__all__ = ["LunaPlatformQuery", "is_invalid_luna_info"]
