"""Liquidity gating for PancakeSwap pools.

A pool only counts as tradeable once it holds enough of the quote token;
freshly created pools with dust reserves would give terrible execution.
"""

from __future__ import annotations

import asyncio

import structlog

from launchroute.constants import (
    DEFAULT_MIN_LIQUIDITY,
    MIN_LIQUIDITY_THRESHOLDS,
    MIN_V3_LIQUIDITY,
)
from launchroute.errors import ErrorKind, RouteError
from launchroute.models.route import PancakeVersion
from launchroute.models.types import normalize_address
from launchroute.rpc.abis import PAIR_ABI, V3_POOL_ABI
from launchroute.rpc.client import RpcReadClient, struct_field

logger = structlog.get_logger()


class LiquidityChecker:
    """Checks V2 reserves and V3 liquidity against minimum thresholds."""

    def __init__(
        self,
        thresholds: dict[str, int] | None = None,
        default_threshold: int = DEFAULT_MIN_LIQUIDITY,
        min_v3_liquidity: int = MIN_V3_LIQUIDITY,
    ):
        source = MIN_LIQUIDITY_THRESHOLDS if thresholds is None else thresholds
        self.thresholds = {normalize_address(k): v for k, v in source.items()}
        self.default_threshold = default_threshold
        self.min_v3_liquidity = min_v3_liquidity

    def min_liquidity_threshold(self, quote_token: str) -> int:
        """Minimum quote-token reserve for a V2 pair against this quote."""
        return self.thresholds.get(normalize_address(quote_token), self.default_threshold)

    async def get_quote_reserve(
        self, client: RpcReadClient, pair_address: str, quote_token: str
    ) -> int | None:
        """Read the quote-token side of a V2 pair's reserves.

        Returns:
            The reserve, or None if the quote token is not in the pair

        Raises:
            RouteError: If any of the reads fail
        """
        reserves, token0, token1 = await asyncio.gather(
            client.read_contract(pair_address, PAIR_ABI, "getReserves"),
            client.read_contract(pair_address, PAIR_ABI, "token0"),
            client.read_contract(pair_address, PAIR_ABI, "token1"),
        )
        quote = normalize_address(quote_token)
        if normalize_address(str(token0)) == quote:
            return int(struct_field(reserves, "reserve0", 0))
        if normalize_address(str(token1)) == quote:
            return int(struct_field(reserves, "reserve1", 1))
        return None

    async def get_v3_liquidity(self, client: RpcReadClient, pool_address: str) -> int:
        """Raises RouteError if the read fails."""
        return int(await client.read_contract(pool_address, V3_POOL_ABI, "liquidity"))

    async def check_v2_pair_liquidity(
        self, client: RpcReadClient, pair_address: str, quote_token: str
    ) -> bool:
        """True when the pair's quote reserve meets the threshold. Never raises."""
        try:
            reserve = await self.get_quote_reserve(client, pair_address, quote_token)
        except Exception as e:
            logger.debug("v2_liquidity_check_failed", pair=pair_address, error=str(e))
            return False

        if reserve is None:
            logger.debug("quote_token_not_in_pair", pair=pair_address, quote=quote_token)
            return False
        threshold = self.min_liquidity_threshold(quote_token)
        return reserve >= threshold

    async def check_v3_pool_liquidity(self, client: RpcReadClient, pool_address: str) -> bool:
        """True when the pool's active liquidity meets the V3 minimum. Never raises."""
        try:
            liquidity = await self.get_v3_liquidity(client, pool_address)
        except Exception as e:
            logger.debug("v3_liquidity_check_failed", pool=pool_address, error=str(e))
            return False
        return liquidity >= self.min_v3_liquidity

    async def validate_liquidity(
        self,
        client: RpcReadClient,
        pool_address: str,
        quote_token: str | None = None,
        version: PancakeVersion = PancakeVersion.V2,
    ) -> None:
        """Like the check_* methods but raises on insufficient liquidity.

        Raises:
            RouteError: INSUFFICIENT_LIQUIDITY when the pool is below threshold
        """
        if version == PancakeVersion.V3:
            ok = await self.check_v3_pool_liquidity(client, pool_address)
        else:
            if quote_token is None:
                raise RouteError(
                    "quote_token is required for V2 liquidity checks",
                    ErrorKind.VALIDATION,
                    {"pool": pool_address},
                )
            ok = await self.check_v2_pair_liquidity(client, pool_address, quote_token)

        if not ok:
            raise RouteError(
                f"Insufficient liquidity in {pool_address}",
                ErrorKind.INSUFFICIENT_LIQUIDITY,
                {"pool": pool_address, "quote_token": quote_token, "version": version.value},
            )


__all__ = ["LiquidityChecker"]
