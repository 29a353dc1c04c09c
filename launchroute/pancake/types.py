"""PancakeSwap pool discovery result types."""

from __future__ import annotations

from dataclasses import dataclass

from launchroute.models.route import PancakeVersion


@dataclass
class PairCheckResult:
    """Outcome of a pool lookup for one token.

    `liquidity_amount` is the quote-token reserve for V2 pairs and the raw
    `liquidity()` value for V3 pools.
    """

    has_liquidity: bool
    quote_token: str | None = None
    pair_address: str | None = None
    version: PancakeVersion | None = None
    liquidity_amount: int | None = None
    # V3 fee tier, hundredths of a basis point
    fee: int | None = None


@dataclass
class PancakePairInfo:
    """A discovered pool, cached permanently once found."""

    pair_address: str
    quote_token: str
    version: PancakeVersion
    timestamp: float
    fee: int | None = None
    liquidity_amount: int | None = None

    def to_check_result(self) -> PairCheckResult:
        return PairCheckResult(
            has_liquidity=True,
            quote_token=self.quote_token,
            pair_address=self.pair_address,
            version=self.version,
            liquidity_amount=self.liquidity_amount,
            fee=self.fee,
        )


__all__ = ["PairCheckResult", "PancakePairInfo"]
