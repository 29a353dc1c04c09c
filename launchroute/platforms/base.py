"""Base class and protocol for launch platform queries."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from fractions import Fraction
from typing import Any, Protocol

import structlog

from launchroute.config import DEFAULT_CONFIG, RouteQueryConfig
from launchroute.constants import WBNB
from launchroute.errors import RouteError, to_route_error
from launchroute.models.route import RouteFetchResult, TokenPlatform, TradingChannel
from launchroute.models.types import normalize_address
from launchroute.pancake.pair_finder import PancakePairFinder
from launchroute.pancake.types import PairCheckResult
from launchroute.rpc.client import RpcReadClient

logger = structlog.get_logger()

_DEFAULT_CHANNELS = {
    TokenPlatform.FOUR: TradingChannel.FOUR,
    TokenPlatform.XMODE: TradingChannel.XMODE,
    TokenPlatform.FLAP: TradingChannel.FLAP,
    TokenPlatform.LUNA: TradingChannel.PANCAKE,
    TokenPlatform.UNKNOWN: TradingChannel.PANCAKE,
}


class PlatformQuery(Protocol):
    """Protocol for per-platform route resolution.

    Each implementation knows how to read one launch platform's on-chain
    state and turn it into a RouteFetchResult.
    """

    platform: TokenPlatform

    async def query_route(self, token_address: str) -> RouteFetchResult:
        """Resolve the route for a token on this platform.

        Args:
            token_address: Token to resolve

        Returns:
            RouteFetchResult for the token

        Raises:
            RouteError: When the platform state cannot be read or is unusable
        """
        ...


def calculate_ratio(current: int, target: int) -> float:
    """current/target clamped to [0, 1]; 0 when target is not positive.

    Computed on exact fractions so equal operands give exactly 1.0.
    """
    if target <= 0:
        return 0.0
    ratio = Fraction(max(int(current), 0), int(target))
    return float(min(ratio, Fraction(1)))


def resolve_pancake_preferred_mode(quote_token: str | None) -> str | None:
    """Pools quoted in anything but WBNB are traded through the V3 router."""
    if not quote_token:
        return None
    return None if normalize_address(quote_token) == WBNB else "v3"


class BasePlatformQuery:
    """Shared plumbing for platform queries.

    Provides contract reads with error conversion, Pancake pool lookup and
    the helpers used to build a RouteFetchResult.
    """

    platform: TokenPlatform = TokenPlatform.UNKNOWN

    def __init__(
        self,
        client: RpcReadClient,
        pair_finder: PancakePairFinder,
        config: RouteQueryConfig = DEFAULT_CONFIG,
    ):
        self.client = client
        self.pair_finder = pair_finder
        self.config = config

    async def read(
        self,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """Contract read whose failures always surface as RouteError."""
        context = {"platform": self.platform.value, "function": function_name}
        try:
            return await self.client.read_contract(address, abi, function_name, args)
        except RouteError as e:
            for key, value in context.items():
                e.context.setdefault(key, value)
            raise
        except Exception as e:
            raise to_route_error(e, context) from e

    async def find_pancake_pair(
        self, token_address: str, quote_token: str | None = None
    ) -> PairCheckResult:
        return await self.pair_finder.find_best_pair(self.client, token_address, quote_token)

    def default_channel(self) -> TradingChannel:
        """Channel used while the token trades on its launch platform."""
        return _DEFAULT_CHANNELS[self.platform]

    def is_migrating(self, liquidity_added: bool, progress: float) -> bool:
        return not liquidity_added and progress >= self.config.migrating_threshold

    @staticmethod
    def merge_pancake_metadata(
        base: Mapping[str, Any] | None, pair_info: PairCheckResult | None
    ) -> dict[str, Any]:
        """Add the Pancake pool fields to route metadata.

        None values in `base` are dropped so optional fields stay absent.
        """
        metadata = {k: v for k, v in (base or {}).items() if v is not None}
        if pair_info is None or not pair_info.has_liquidity:
            return metadata

        if pair_info.quote_token:
            metadata["pancakeQuoteToken"] = pair_info.quote_token
            mode = resolve_pancake_preferred_mode(pair_info.quote_token)
            if mode:
                metadata["pancakePreferredMode"] = mode
        if pair_info.pair_address:
            metadata["pancakePairAddress"] = pair_info.pair_address
        if pair_info.version:
            metadata["pancakeVersion"] = pair_info.version.value
        if pair_info.fee is not None:
            metadata["pancakeFee"] = pair_info.fee
        return metadata

    def pancake_route(
        self,
        pair_info: PairCheckResult,
        *,
        platform: TokenPlatform | None = None,
        quote_token: str | None = None,
        notes: str | None = None,
    ) -> RouteFetchResult:
        """Route for a token confirmed to trade on a Pancake pool."""
        return RouteFetchResult(
            platform=platform or self.platform,
            preferred_channel=TradingChannel.PANCAKE,
            ready_for_pancake=True,
            progress=1.0,
            migrating=False,
            quote_token=quote_token or pair_info.quote_token,
            metadata=self.merge_pancake_metadata(None, pair_info),
            notes=notes,
        )

    def log_query_start(self, token_address: str) -> None:
        logger.debug("platform_query_started", platform=self.platform.value, token=token_address)

    def log_query_success(self, token_address: str, result: RouteFetchResult) -> None:
        logger.info(
            "platform_query_succeeded",
            platform=self.platform.value,
            token=token_address,
            channel=result.preferred_channel.value,
            ready_for_pancake=result.ready_for_pancake,
            progress=result.progress,
        )

    def log_query_error(self, token_address: str, error: BaseException) -> None:
        kind = error.kind.value if isinstance(error, RouteError) else "unknown"
        logger.warning(
            "platform_query_failed",
            platform=self.platform.value,
            token=token_address,
            kind=kind,
            error=str(error),
        )


__all__ = [
    "PlatformQuery",
    "BasePlatformQuery",
    "calculate_ratio",
    "resolve_pancake_preferred_mode",
]
