"""Pydantic models for route resolution results.

`RouteFetchResult` is the produced interface of the route engine: trade
execution code reads it to pick the channel, the quote token and the
Pancake pool parameters.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TokenPlatform(str, Enum):
    """Launch platform whose contract governs a token before migration."""

    FOUR = "four"
    XMODE = "xmode"
    FLAP = "flap"
    LUNA = "luna"
    UNKNOWN = "unknown"


class TradingChannel(str, Enum):
    """Venue that should be used to trade a token right now."""

    PANCAKE = "pancake"
    FOUR = "four"
    XMODE = "xmode"
    FLAP = "flap"


class PancakeVersion(str, Enum):
    """PancakeSwap protocol version of a pool."""

    V2 = "v2"
    V3 = "v3"


class MigrationStatus(str, Enum):
    """Semantic migration state used to pick the cache policy."""

    MIGRATED = "migrated"
    NOT_MIGRATED = "not_migrated"


class RouteFetchResult(BaseModel):
    """Normalized routing decision for a single token.

    `preferred_channel == PANCAKE` with `ready_for_pancake == False` is only
    produced as a best-effort default when every launch-platform probe
    failed; callers must not treat it as a confirmed migration.
    """

    platform: TokenPlatform
    preferred_channel: TradingChannel = Field(alias="preferredChannel")
    ready_for_pancake: bool = Field(alias="readyForPancake")
    progress: float = Field(ge=0.0, le=1.0, description="Bonding curve fill ratio")
    migrating: bool = False
    quote_token: str | None = Field(default=None, alias="quoteToken")
    metadata: dict[str, Any] = Field(default_factory=dict)
    notes: str | None = None

    model_config = {"populate_by_name": True}

    @property
    def needs_fallback(self) -> bool:
        """True when the route points at Pancake without a confirmed pool."""
        return self.preferred_channel == TradingChannel.PANCAKE and not self.ready_for_pancake

    @property
    def is_assumed(self) -> bool:
        """True when the route was guessed because reads were impossible."""
        return bool(self.metadata.get("assumed"))

    @property
    def migration_status(self) -> MigrationStatus:
        if self.ready_for_pancake and not self.is_assumed:
            return MigrationStatus.MIGRATED
        return MigrationStatus.NOT_MIGRATED


def default_pancake_route(notes: str | None = None) -> RouteFetchResult:
    """Last-resort route used when nothing could be resolved."""
    return RouteFetchResult(
        platform=TokenPlatform.UNKNOWN,
        preferred_channel=TradingChannel.PANCAKE,
        ready_for_pancake=True,
        progress=1.0,
        migrating=False,
        notes=notes,
    )


__all__ = [
    "TokenPlatform",
    "TradingChannel",
    "PancakeVersion",
    "MigrationStatus",
    "RouteFetchResult",
    "default_pancake_route",
]
