"""Launch platform detection from vanity address patterns.

Launch platforms deploy tokens at vanity addresses, so the address alone is
a strong hint of where the token was created. Detection is a pure function
of the address; it never touches the chain.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from launchroute.models.route import TokenPlatform
from launchroute.models.types import is_valid_address

logger = structlog.get_logger()

_DISPLAY_NAMES = {
    TokenPlatform.FOUR: "Four.meme",
    TokenPlatform.XMODE: "XMode",
    TokenPlatform.FLAP: "Flap",
    TokenPlatform.LUNA: "Luna.fun",
    TokenPlatform.UNKNOWN: "Unknown/PancakeSwap",
}


class PlatformDetector:
    """Maps a token address to its likely launch platform.

    Rules, first match wins:
    - ends with `ffff` or `4444`: four
    - starts with `0x4444`: xmode
    - ends with `7777` or `8888`: flap
    - anything else: unknown

    Luna tokens have no vanity pattern and are only found by probing.
    """

    def detect(self, token_address: str | None) -> TokenPlatform:
        """Detect the platform for an address.

        Malformed or empty input yields `unknown` rather than an error.

        Raises:
            TypeError: If the argument is neither a string nor None
        """
        if token_address is None:
            address = ""
        elif isinstance(token_address, str):
            address = token_address.strip().lower()
        else:
            raise TypeError(f"token address must be a string, got {type(token_address).__name__}")

        if not is_valid_address(address):
            logger.warning("invalid_token_address", token=token_address)
            return TokenPlatform.UNKNOWN

        platform = self._detect_by_pattern(address)
        logger.debug("platform_detected", token=address, platform=platform.value)
        return platform

    @staticmethod
    def _detect_by_pattern(address: str) -> TokenPlatform:
        if address.endswith(("ffff", "4444")):
            return TokenPlatform.FOUR
        if address.startswith("0x4444"):
            return TokenPlatform.XMODE
        if address.endswith(("7777", "8888")):
            return TokenPlatform.FLAP
        return TokenPlatform.UNKNOWN

    def detect_batch(self, token_addresses: Iterable[str]) -> dict[str, TokenPlatform]:
        """Detect platforms for many addresses, keyed by lowercased address."""
        return {address.lower(): self.detect(address) for address in token_addresses}

    def is_launchpad_token(self, token_address: str) -> bool:
        return self.detect(token_address) != TokenPlatform.UNKNOWN

    @staticmethod
    def platform_display_name(platform: TokenPlatform) -> str:
        return _DISPLAY_NAMES.get(platform, "Unknown")


__all__ = ["PlatformDetector"]
