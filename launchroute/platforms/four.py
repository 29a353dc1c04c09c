"""four.meme and XMode route resolution.

Both platforms share the TokenManagerHelper3 contract, whose
`getTokenInfo` exposes bonding-curve progress and the `liquidityAdded`
migration flag.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.constants import FOUR_HELPER_V3, WBNB
from launchroute.errors import ErrorKind, RouteError, is_sandbox_error
from launchroute.models.route import PancakeVersion, RouteFetchResult, TokenPlatform, TradingChannel
from launchroute.models.types import (
    is_nonzero_address,
    is_valid_address,
    is_zero_address,
    is_zero_like,
    normalize_address,
)
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.pancake.types import PairCheckResult
from launchroute.platforms.base import BasePlatformQuery, calculate_ratio
from launchroute.rpc.abis import FOUR_HELPER_ABI
from launchroute.rpc.client import RpcReadClient, struct_field

logger = structlog.get_logger()


@dataclass
class FourTokenInfo:
    """Parsed `getTokenInfo` payload."""

    is_empty: bool
    liquidity_added: bool
    quote_token: str | None
    offers: int
    max_offers: int
    funds: int
    max_funds: int
    symbol: str | None = None
    name: str | None = None

    @property
    def progress(self) -> float:
        """Funds ratio when a funds cap exists, else offers ratio, else 0."""
        if self.max_funds > 0:
            return calculate_ratio(self.funds, self.max_funds)
        if self.max_offers > 0:
            return calculate_ratio(self.offers, self.max_offers)
        return 0.0


def _int_field(info: Any, name: str, index: int) -> int:
    value = struct_field(info, name, index, 0)
    return int(value or 0)


_LIQUIDITY_ADDED_INDEX = 11


def _record_fields_empty(info: Any) -> bool:
    """Zero-like on every field except the `liquidityAdded` flag."""
    if isinstance(info, Mapping):
        return is_zero_like({k: v for k, v in info.items() if k != "liquidityAdded"})
    if isinstance(info, Sequence) and not isinstance(info, str | bytes):
        return is_zero_like([v for i, v in enumerate(info) if i != _LIQUIDITY_ADDED_INDEX])
    return is_zero_like(info)


def parse_token_info(info: Any) -> FourTokenInfo:
    """Parse a helper struct given as a mapping or a positional sequence."""
    quote = struct_field(info, "quote", 2) or struct_field(info, "quoteToken")
    if not isinstance(quote, str) or not is_valid_address(quote):
        quote_token = None
    elif is_zero_address(quote):
        # Zero quote means the curve is priced in native BNB
        quote_token = WBNB
    else:
        quote_token = normalize_address(quote)

    launch_time = _int_field(info, "launchTime", 6)
    struct_empty = _record_fields_empty(info)
    is_empty = (launch_time == 0 and struct_empty) or (quote_token is None and struct_empty)

    symbol = struct_field(info, "symbol")
    name = struct_field(info, "name")
    return FourTokenInfo(
        is_empty=is_empty,
        liquidity_added=bool(struct_field(info, "liquidityAdded", _LIQUIDITY_ADDED_INDEX, False)),
        quote_token=quote_token,
        offers=_int_field(info, "offers", 7),
        max_offers=_int_field(info, "maxOffers", 8),
        funds=_int_field(info, "funds", 9),
        max_funds=_int_field(info, "maxFunds", 10),
        symbol=symbol if isinstance(symbol, str) and symbol else None,
        name=name if isinstance(name, str) and name else None,
    )


class FourPlatformQuery(BasePlatformQuery):
    """Route query for four.meme tokens (also used for XMode)."""

    def __init__(
        self,
        client: RpcReadClient,
        pair_finder: PancakePairFinder,
        platform: TokenPlatform = TokenPlatform.FOUR,
        config: RouteQueryConfig = DEFAULT_CONFIG,
        helper_address: str = FOUR_HELPER_V3,
    ):
        if platform not in (TokenPlatform.FOUR, TokenPlatform.XMODE):
            raise ValueError(f"FourPlatformQuery does not serve platform {platform.value}")
        super().__init__(client, pair_finder, config)
        self.platform = platform
        self.helper_address = helper_address

    async def query_route(self, token_address: str) -> RouteFetchResult:
        token = normalize_address(token_address)
        self.log_query_start(token)
        try:
            raw = await self.read(self.helper_address, FOUR_HELPER_ABI, "getTokenInfo", (token,))
            info = parse_token_info(raw)
            if info.is_empty:
                result = await self._handle_empty(token, info)
            else:
                result = await self._handle_info(token, info)
        except RouteError as e:
            self.log_query_error(token, e)
            raise

        self.log_query_success(token, result)
        return result

    async def _handle_empty(self, token: str, info: FourTokenInfo) -> RouteFetchResult:
        logger.warning(
            "four_helper_empty_state",
            platform=self.platform.value,
            token=token,
            liquidity_added=info.liquidity_added,
        )
        if info.liquidity_added:
            pair = await self.find_pancake_pair(token, info.quote_token)
            if pair.has_liquidity:
                return self.pancake_route(
                    pair,
                    quote_token=info.quote_token,
                    notes="Helper returned an empty record but the token has migrated",
                )

        raise RouteError(
            "four.meme helper has no usable state for token",
            ErrorKind.PLATFORM_STATE_MISSING,
            {"platform": self.platform.value, "token": token},
        )

    async def _handle_info(self, token: str, info: FourTokenInfo) -> RouteFetchResult:
        pair: PairCheckResult | None = None
        if info.liquidity_added:
            pair = await self._fetch_pancake_pair(token, info.quote_token)
            progress = 1.0
        else:
            progress = info.progress

        return RouteFetchResult(
            platform=self.platform,
            preferred_channel=TradingChannel.PANCAKE
            if info.liquidity_added
            else self.default_channel(),
            ready_for_pancake=info.liquidity_added,
            progress=progress,
            migrating=self.is_migrating(info.liquidity_added, progress),
            quote_token=info.quote_token,
            metadata=self.merge_pancake_metadata({"symbol": info.symbol, "name": info.name}, pair),
        )

    async def _fetch_pancake_pair(
        self, token: str, quote_token: str | None
    ) -> PairCheckResult | None:
        """Ask the helper for the migration pair, then fall back to discovery."""
        try:
            pair_address = await self.read(
                self.helper_address, FOUR_HELPER_ABI, "getPancakePair", (token,)
            )
        except RouteError as e:
            if is_sandbox_error(e):
                raise
            logger.debug("four_pancake_pair_lookup_failed", token=token, error=str(e))
            if quote_token is None:
                return None
            return await self.find_pancake_pair(token, quote_token)

        if is_nonzero_address(pair_address):
            # The helper only ever reports the V2 migration pair
            return PairCheckResult(
                has_liquidity=True,
                quote_token=quote_token,
                pair_address=normalize_address(pair_address),
                version=PancakeVersion.V2,
            )

        logger.debug("four_pancake_pair_zero", token=token)
        return await self.find_pancake_pair(token, quote_token)


__all__ = ["FourPlatformQuery", "FourTokenInfo", "parse_token_info"]
