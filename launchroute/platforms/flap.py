"""Flap route resolution.

The Flap portal's state reader has been re-deployed under new selectors as
its layout grew (getTokenV2 .. getTokenV7). We probe newest first and take
the first reader that answers with a non-empty state.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.constants import FLAP_PORTAL, FLAP_STATE_READERS
from launchroute.errors import ErrorKind, RouteError, is_retryable, is_sandbox_error
from launchroute.models.route import PancakeVersion, RouteFetchResult, TokenPlatform, TradingChannel
from launchroute.models.types import is_nonzero_address, is_zero_like, normalize_address
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.pancake.types import PairCheckResult
from launchroute.platforms.base import BasePlatformQuery, calculate_ratio
from launchroute.rpc.abis import FLAP_PORTAL_ABI
from launchroute.rpc.client import RpcReadClient, struct_field

logger = structlog.get_logger()


class FlapPlatformQuery(BasePlatformQuery):
    """Route query for Flap tokens."""

    platform = TokenPlatform.FLAP

    def __init__(
        self,
        client: RpcReadClient,
        pair_finder: PancakePairFinder,
        config: RouteQueryConfig = DEFAULT_CONFIG,
        portal_address: str = FLAP_PORTAL,
        state_readers: Sequence[str] = FLAP_STATE_READERS,
    ):
        super().__init__(client, pair_finder, config)
        self.portal_address = portal_address
        self.state_readers = tuple(state_readers)

    async def query_route(self, token_address: str) -> RouteFetchResult:
        token = normalize_address(token_address)
        self.log_query_start(token)
        try:
            state, reader = await self._fetch_state(token)
            if state is None:
                result = await self._handle_empty_state(token)
            else:
                result = self._parse_state(state, reader)
        except RouteError as e:
            self.log_query_error(token, e)
            raise

        self.log_query_success(token, result)
        return result

    async def _fetch_state(self, token: str) -> tuple[Any, str | None]:
        """Return (state, reader name) from the newest reader that has data."""
        for reader in self.state_readers:
            try:
                result = await self.read(self.portal_address, FLAP_PORTAL_ABI, reader, (token,))
            except RouteError as e:
                if is_sandbox_error(e) or is_retryable(e.kind):
                    raise
                if e.kind == ErrorKind.ABI_MISMATCH:
                    logger.debug("flap_reader_unsupported", reader=reader)
                else:
                    logger.debug("flap_reader_failed", reader=reader, error=str(e))
                continue

            state = struct_field(result, "state", default=result)
            if not is_zero_like(state):
                logger.debug("flap_reader_used", reader=reader, token=token)
                return state, reader
        return None, None

    async def _handle_empty_state(self, token: str) -> RouteFetchResult:
        logger.warning("flap_portal_empty_state", token=token)
        pair = await self.find_pancake_pair(token)
        if pair.has_liquidity:
            return self.pancake_route(
                pair,
                platform=TokenPlatform.UNKNOWN,
                notes="Flap portal has no record for the token, switched to Pancake",
            )
        raise RouteError(
            "Flap portal returned no usable state",
            ErrorKind.INVALID_PLATFORM_DATA,
            {"platform": self.platform.value, "token": token},
        )

    def _parse_state(self, state: Any, reader: str | None) -> RouteFetchResult:
        reserve = int(struct_field(state, "reserve", 1, 0) or 0)
        threshold = int(struct_field(state, "dexSupplyThresh", 6, 0) or 0)
        progress = calculate_ratio(reserve, threshold)

        quote = struct_field(state, "quoteTokenAddress", 7) or struct_field(state, "quoteToken")
        quote_token = normalize_address(quote) if is_nonzero_address(quote) else None

        pool = struct_field(state, "pool", 10)
        ready = is_nonzero_address(pool)
        pair: PairCheckResult | None = None
        if ready:
            pair = PairCheckResult(
                has_liquidity=True,
                quote_token=quote_token,
                pair_address=normalize_address(pool),
                version=PancakeVersion.V2,
            )

        metadata = self.merge_pancake_metadata(
            {
                "nativeToQuoteSwapEnabled": bool(
                    struct_field(state, "nativeToQuoteSwapEnabled", 8, False)
                ),
                "flapStateReader": reader,
            },
            pair,
        )
        return RouteFetchResult(
            platform=TokenPlatform.FLAP,
            preferred_channel=TradingChannel.PANCAKE if ready else TradingChannel.FLAP,
            ready_for_pancake=ready,
            progress=progress,
            migrating=self.is_migrating(ready, progress),
            quote_token=quote_token,
            metadata=metadata,
        )


__all__ = ["FlapPlatformQuery"]
