"""Test helpers module for shared test utilities.

- constants: Token, pair and pool addresses following the vanity patterns
- factories: Mock RPC scripting and contract payload builders
"""

from tests.helpers.constants import (
    BUSD,
    CAKE,
    FLAP_8888_TOKEN,
    FLAP_TOKEN,
    FOUR_FFFF_TOKEN,
    FOUR_TOKEN,
    KGST,
    ONE,
    PAIR_A,
    PAIR_B,
    PAIR_C,
    PLAIN_TOKEN,
    POOL_V3,
    POOL_V3_B,
    USD1,
    USDC,
    USDT,
    WBNB,
    XMODE_TOKEN,
    ZERO_ADDRESS,
)
from tests.helpers.factories import (
    add_v2_pair,
    add_v3_pool,
    empty_four_token_info,
    flap_state,
    four_token_info,
    luna_info,
    make_service,
    make_test_config,
    zero_pancake,
)

__all__ = [
    # Constants
    "ZERO_ADDRESS",
    "WBNB",
    "CAKE",
    "USDT",
    "USDC",
    "BUSD",
    "USD1",
    "KGST",
    "FOUR_TOKEN",
    "FOUR_FFFF_TOKEN",
    "XMODE_TOKEN",
    "FLAP_TOKEN",
    "FLAP_8888_TOKEN",
    "PLAIN_TOKEN",
    "PAIR_A",
    "PAIR_B",
    "PAIR_C",
    "POOL_V3",
    "POOL_V3_B",
    "ONE",
    # Factories
    "make_test_config",
    "make_service",
    "zero_pancake",
    "add_v2_pair",
    "add_v3_pool",
    "four_token_info",
    "empty_four_token_info",
    "flap_state",
    "luna_info",
]
