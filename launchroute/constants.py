"""Protocol constants for BSC route resolution.

Centralizes well-known addresses, liquidity thresholds and cache sizing.
"""

from launchroute.models.types import ZERO_ADDRESS, is_valid_address


def _validate_token_address(name: str, address: str) -> str:
    """Validate and return a lowercased address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address.lower()


# PancakeSwap (BSC mainnet)
PANCAKE_FACTORY = _validate_token_address(
    "PANCAKE_FACTORY", "0xCa143Ce32Fe78f1f7019d7d551a6402fC5350c73"
)
PANCAKE_V3_FACTORY = _validate_token_address(
    "PANCAKE_V3_FACTORY", "0x0BFbCF9fa4f9C56B0F40a671Ad40E0805A091865"
)

# Launch platforms
FOUR_HELPER_V3 = _validate_token_address(
    "FOUR_HELPER_V3", "0xF251F83e40a78868FcfA3FA4599Dad6494E46034"
)
FLAP_PORTAL = _validate_token_address("FLAP_PORTAL", "0xe2cE6ab80874Fa9Fa2aAE65D277Dd6B8e65C9De0")
LUNA_FUN_LAUNCHPAD = _validate_token_address(
    "LUNA_FUN_LAUNCHPAD", "0x7fdC3c5c4eC798150462D040526B6A89190b459c"
)

# Well-known quote tokens (lowercase for consistency)
# All addresses are validated at import time to catch typos early
WBNB = _validate_token_address("WBNB", "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c")
CAKE = _validate_token_address("CAKE", "0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82")
ASTER = _validate_token_address("ASTER", "0x000Ae314E2A2172a039B26378814C252734f556A")
USDT = _validate_token_address("USDT", "0x55d398326f99059fF775485246999027B3197955")
USDC = _validate_token_address("USDC", "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d")
BUSD = _validate_token_address("BUSD", "0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56")
USD1 = _validate_token_address("USD1", "0x8d0D000Ee44948FC98c9B98A4FA4921476f08B0d")
UNITED_STABLES_U = _validate_token_address(
    "UNITED_STABLES_U", "0xcE24439F2D9C6a2289F741120FE202248B666666"
)
KGST = _validate_token_address("KGST", "0x94be0bbA8E1E303fE998c9360B57b826F1A4f828")
LISUSD = _validate_token_address("LISUSD", "0x0782b6d8c4551b9760e74c0545a9bcd90bdc41e5")

# Four.meme quote tokens, probed first when no quote token is known
FOUR_QUOTE_TOKENS: tuple[str, ...] = (CAKE, USDT, USDC, USD1, ASTER, UNITED_STABLES_U, KGST, LISUSD)

# Global quote candidates, in probe order after the platform bridge tokens
GLOBAL_QUOTE_TOKENS: tuple[str, ...] = (WBNB, BUSD, USDT, ASTER, USD1, UNITED_STABLES_U)

# Minimum quote-token reserve for a V2 pair to count as tradeable.
# Stablecoins: $100, WBNB: 0.2 BNB (~$100), anything else: 100 units.
DEFAULT_MIN_LIQUIDITY = 100 * 10**18
MIN_LIQUIDITY_THRESHOLDS: dict[str, int] = {
    USDT: 100 * 10**18,
    BUSD: 100 * 10**18,
    USDC: 100 * 10**18,
    USD1: 100 * 10**18,
    WBNB: 2 * 10**17,
}

# V3 liquidity is sqrt(x * y); 1e10 is the analogue of two ~$100 reserves
MIN_V3_LIQUIDITY = 10**10

# PancakeSwap V3 fee tiers (hundredths of a basis point)
PANCAKE_V3_FEE_TIERS: tuple[int, ...] = (100, 250, 500, 2500, 10000)

# Flap portal state readers, newest first
FLAP_STATE_READERS: tuple[str, ...] = (
    "getTokenV7",
    "getTokenV6",
    "getTokenV5",
    "getTokenV4",
    "getTokenV3",
    "getTokenV2",
)

# Pairs that are known up front and bypass discovery
# token -> (pair address, quote token, version)
SPECIAL_PAIR_MAPPINGS: dict[str, tuple[str, str, str]] = {
    # KDOG/KGST
    "0x3753dd32cbc376ce6efd85f334b7289ae6d004af": (
        "0x14c90904dd8868c8e748e42d092250ec17f748d1",
        KGST,
        "v2",
    ),
}

# Bonding curve fill ratio from which a token is reported as migrating
MIGRATING_PROGRESS_THRESHOLD = 0.99

# Route cache sizing (seconds)
ROUTE_CACHE_MAX_SIZE = 50
NOT_MIGRATED_TTL = 60.0

# Pair cache sizing; pairs never expire once created
PAIR_CACHE_MAX_SIZE = 100

__all__ = [
    "ZERO_ADDRESS",
    "PANCAKE_FACTORY",
    "PANCAKE_V3_FACTORY",
    "FOUR_HELPER_V3",
    "FLAP_PORTAL",
    "LUNA_FUN_LAUNCHPAD",
    "WBNB",
    "CAKE",
    "ASTER",
    "USDT",
    "USDC",
    "BUSD",
    "USD1",
    "UNITED_STABLES_U",
    "KGST",
    "LISUSD",
    "FOUR_QUOTE_TOKENS",
    "GLOBAL_QUOTE_TOKENS",
    "DEFAULT_MIN_LIQUIDITY",
    "MIN_LIQUIDITY_THRESHOLDS",
    "MIN_V3_LIQUIDITY",
    "PANCAKE_V3_FEE_TIERS",
    "FLAP_STATE_READERS",
    "SPECIAL_PAIR_MAPPINGS",
    "MIGRATING_PROGRESS_THRESHOLD",
    "ROUTE_CACHE_MAX_SIZE",
    "NOT_MIGRATED_TTL",
    "PAIR_CACHE_MAX_SIZE",
]
