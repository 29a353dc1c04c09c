"""PancakeSwap V2/V3 pool discovery and liquidity gating."""

from launchroute.pancake.liquidity import LiquidityChecker
from launchroute.pancake.pair_finder import PancakePairFinder, candidate_quote_tokens
from launchroute.pancake.types import PairCheckResult, PancakePairInfo

__all__ = [
    "LiquidityChecker",
    "PancakePairFinder",
    "candidate_quote_tokens",
    "PairCheckResult",
    "PancakePairInfo",
]
