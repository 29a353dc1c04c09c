"""PancakeSwap pool discovery.

Finds the pool a migrated token should be traded against. Lookups go:
1. Static special-pair table (pairs created outside the factories we probe)
2. Permanent cache: a pool never disappears once created
3. With a known quote token: V2 pair and every V3 fee tier, concurrently
4. Without one: V2 pairs against every candidate quote token, concurrently,
   picking the deepest reserve
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence

import structlog

from launchroute.cache import BoundedCache, CacheStats
from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.constants import (
    FOUR_QUOTE_TOKENS,
    GLOBAL_QUOTE_TOKENS,
    PANCAKE_FACTORY,
    PANCAKE_V3_FACTORY,
    PANCAKE_V3_FEE_TIERS,
    SPECIAL_PAIR_MAPPINGS,
    WBNB,
)
from launchroute.errors import ErrorKind, RouteError, is_sandbox_error, to_route_error
from launchroute.models.route import PancakeVersion
from launchroute.models.types import is_nonzero_address, is_zero_like, normalize_address
from launchroute.pancake.liquidity import LiquidityChecker
from launchroute.pancake.types import PairCheckResult, PancakePairInfo
from launchroute.rpc.abis import PANCAKE_FACTORY_ABI, PANCAKE_V3_FACTORY_ABI
from launchroute.rpc.client import RpcReadClient

logger = structlog.get_logger()


def candidate_quote_tokens() -> list[str]:
    """Quote tokens probed when none is known, platform bridges first."""
    seen: set[str] = set()
    candidates = []
    for token in (*FOUR_QUOTE_TOKENS, *GLOBAL_QUOTE_TOKENS):
        if token not in seen:
            seen.add(token)
            candidates.append(token)
    return candidates


class PancakePairFinder:
    """Discovers and caches the best PancakeSwap pool for a token."""

    def __init__(
        self,
        liquidity_checker: LiquidityChecker | None = None,
        cache: BoundedCache[str, PancakePairInfo] | None = None,
        config: RouteQueryConfig = DEFAULT_CONFIG,
        fee_tiers: Sequence[int] = PANCAKE_V3_FEE_TIERS,
        clock: Callable[[], float] = time.time,
    ):
        self.liquidity_checker = liquidity_checker or LiquidityChecker()
        self.cache = cache if cache is not None else BoundedCache(
            "pancake_pairs", max_size=config.pair_cache_max_size
        )
        self.fee_tiers = tuple(fee_tiers)
        self._clock = clock

    async def find_best_pair(
        self,
        client: RpcReadClient,
        token_address: str,
        quote_token: str | None = None,
    ) -> PairCheckResult:
        """Find a tradeable pool for a token.

        Args:
            client: Contract read client
            token_address: Token to find a pool for
            quote_token: Known quote token; the zero address means BNB

        Returns:
            PairCheckResult; `has_liquidity=False` when nothing qualifies

        Raises:
            RouteError: SANDBOX when the client cannot perform reads at all
        """
        token = normalize_address(token_address)

        special = SPECIAL_PAIR_MAPPINGS.get(token)
        if special is not None:
            pair, quote, version = special
            logger.debug("special_pair_mapping_used", token=token, pair=pair)
            return PairCheckResult(
                has_liquidity=True,
                quote_token=quote,
                pair_address=pair,
                version=PancakeVersion(version),
            )

        cached = self.cache.get(token)
        if cached is not None:
            logger.debug("pancake_pair_cache_hit", token=token, pair=cached.pair_address)
            return cached.to_check_result()

        if quote_token is not None:
            quote = WBNB if is_zero_like(quote_token) else normalize_address(quote_token)
            result = await self._find_with_quote(client, token, quote)
        else:
            result = await self._discover(client, token)

        if result.has_liquidity and result.pair_address and result.quote_token and result.version:
            self.cache.set(
                token,
                PancakePairInfo(
                    pair_address=result.pair_address,
                    quote_token=result.quote_token,
                    version=result.version,
                    timestamp=self._clock(),
                    fee=result.fee,
                    liquidity_amount=result.liquidity_amount,
                ),
            )
            logger.info(
                "pancake_pair_found",
                token=token,
                pair=result.pair_address,
                quote=result.quote_token,
                version=result.version.value,
            )
        else:
            logger.debug("pancake_pair_not_found", token=token, quote=quote_token)
        return result

    async def _find_with_quote(
        self, client: RpcReadClient, token: str, quote: str
    ) -> PairCheckResult:
        probes = [self._probe_v2(client, token, quote)]
        probes.extend(self._probe_v3(client, token, quote, fee) for fee in self.fee_tiers)
        found = self._collect(await asyncio.gather(*probes, return_exceptions=True), token)

        v3 = [r for r in found if r.version == PancakeVersion.V3]
        if v3:
            return max(v3, key=lambda r: r.liquidity_amount or 0)
        if found:
            return found[0]
        return PairCheckResult(has_liquidity=False, quote_token=quote)

    async def _discover(self, client: RpcReadClient, token: str) -> PairCheckResult:
        candidates = [q for q in candidate_quote_tokens() if q != token]
        probes = [self._probe_v2(client, token, quote) for quote in candidates]
        found = self._collect(await asyncio.gather(*probes, return_exceptions=True), token)
        if not found:
            return PairCheckResult(has_liquidity=False)
        # max() keeps the first of equal reserves, so candidate order breaks ties
        return max(found, key=lambda r: r.liquidity_amount or 0)

    def _collect(
        self, outcomes: Sequence[PairCheckResult | BaseException | None], token: str
    ) -> list[PairCheckResult]:
        """Keep qualifying probes; surface sandbox failures, drop the rest."""
        found = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                if is_sandbox_error(outcome):
                    raise to_route_error(outcome, {"token": token})
                logger.debug("pancake_probe_failed", token=token, error=str(outcome))
                continue
            if outcome is not None:
                found.append(outcome)
        return found

    async def _probe_v2(
        self, client: RpcReadClient, token: str, quote: str
    ) -> PairCheckResult | None:
        pair = await client.read_contract(
            PANCAKE_FACTORY, PANCAKE_FACTORY_ABI, "getPair", (token, quote)
        )
        if not is_nonzero_address(pair):
            return None
        pair = normalize_address(pair)

        reserve = await self.liquidity_checker.get_quote_reserve(client, pair, quote)
        threshold = self.liquidity_checker.min_liquidity_threshold(quote)
        if reserve is None or reserve < threshold:
            logger.debug(
                "pancake_pair_low_liquidity",
                token=token,
                pair=pair,
                reserve=reserve,
                threshold=threshold,
            )
            return None
        return PairCheckResult(
            has_liquidity=True,
            quote_token=quote,
            pair_address=pair,
            version=PancakeVersion.V2,
            liquidity_amount=reserve,
        )

    async def _probe_v3(
        self, client: RpcReadClient, token: str, quote: str, fee: int
    ) -> PairCheckResult | None:
        pool = await client.read_contract(
            PANCAKE_V3_FACTORY, PANCAKE_V3_FACTORY_ABI, "getPool", (token, quote, fee)
        )
        if not is_nonzero_address(pool):
            return None
        pool = normalize_address(pool)

        liquidity = await self.liquidity_checker.get_v3_liquidity(client, pool)
        if liquidity < self.liquidity_checker.min_v3_liquidity:
            logger.debug("pancake_pool_low_liquidity", token=token, pool=pool, fee=fee)
            return None
        return PairCheckResult(
            has_liquidity=True,
            quote_token=quote,
            pair_address=pool,
            version=PancakeVersion.V3,
            liquidity_amount=liquidity,
            fee=fee,
        )

    def clear_cache(self, token_address: str | None = None) -> None:
        """Forget one token's pool, or every cached pool."""
        if token_address is None:
            self.cache.clear()
        else:
            self.cache.delete(normalize_address(token_address))

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()


__all__ = ["PancakePairFinder", "candidate_quote_tokens"]
