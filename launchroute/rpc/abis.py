"""Minimal ABIs for the contract reads the route engine performs.

Only the view functions actually called are declared.
"""

from typing import Any

ABI = list[dict[str, Any]]


def _view(name: str, inputs: list[dict[str, Any]], outputs: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": outputs,
    }


def _param(name: str, type_: str, components: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    param: dict[str, Any] = {"name": name, "type": type_}
    if components is not None:
        param["components"] = components
    return param


_TOKEN_ARG = [_param("token", "address")]

# PancakeSwap V2 factory / pair
PANCAKE_FACTORY_ABI: ABI = [
    _view(
        "getPair",
        [_param("tokenA", "address"), _param("tokenB", "address")],
        [_param("pair", "address")],
    ),
]

PAIR_ABI: ABI = [
    _view(
        "getReserves",
        [],
        [
            _param("reserve0", "uint112"),
            _param("reserve1", "uint112"),
            _param("blockTimestampLast", "uint32"),
        ],
    ),
    _view("token0", [], [_param("", "address")]),
    _view("token1", [], [_param("", "address")]),
]

# PancakeSwap V3 factory / pool
PANCAKE_V3_FACTORY_ABI: ABI = [
    _view(
        "getPool",
        [_param("tokenA", "address"), _param("tokenB", "address"), _param("fee", "uint24")],
        [_param("pool", "address")],
    ),
]

V3_POOL_ABI: ABI = [
    _view("liquidity", [], [_param("", "uint128")]),
    _view("token0", [], [_param("", "address")]),
    _view("token1", [], [_param("", "address")]),
]

# four.meme TokenManagerHelper3
FOUR_HELPER_ABI: ABI = [
    _view(
        "getTokenInfo",
        _TOKEN_ARG,
        [
            _param("version", "uint256"),
            _param("tokenManager", "address"),
            _param("quote", "address"),
            _param("lastPrice", "uint256"),
            _param("tradingFeeRate", "uint256"),
            _param("minTradingFee", "uint256"),
            _param("launchTime", "uint256"),
            _param("offers", "uint256"),
            _param("maxOffers", "uint256"),
            _param("funds", "uint256"),
            _param("maxFunds", "uint256"),
            _param("liquidityAdded", "bool"),
        ],
    ),
    _view("getPancakePair", _TOKEN_ARG, [_param("pair", "address")]),
]

# Flap portal token state. Older readers return a prefix of the newest layout.
_FLAP_STATE_V2 = [
    _param("status", "uint8"),
    _param("reserve", "uint256"),
    _param("circulatingSupply", "uint256"),
    _param("price", "uint256"),
    _param("tokenVersion", "uint8"),
    _param("r", "uint256"),
    _param("dexSupplyThresh", "uint256"),
]
_FLAP_STATE_V5 = [
    *_FLAP_STATE_V2,
    _param("quoteTokenAddress", "address"),
    _param("nativeToQuoteSwapEnabled", "bool"),
]
_FLAP_STATE_V7 = [
    *_FLAP_STATE_V5,
    _param("extensionID", "bytes32"),
    _param("pool", "address"),
]

_FLAP_LAYOUTS = {
    "getTokenV2": _FLAP_STATE_V2,
    "getTokenV3": _FLAP_STATE_V2,
    "getTokenV4": _FLAP_STATE_V2,
    "getTokenV5": _FLAP_STATE_V5,
    "getTokenV6": _FLAP_STATE_V5,
    "getTokenV7": _FLAP_STATE_V7,
}

FLAP_PORTAL_ABI: ABI = [
    _view(name, _TOKEN_ARG, [_param("state", "tuple", components)])
    for name, components in _FLAP_LAYOUTS.items()
]

# Luna.fun launchpad public `tokenInfo` mapping getter
LUNA_LAUNCHPAD_ABI: ABI = [
    _view(
        "tokenInfo",
        _TOKEN_ARG,
        [
            _param("creator", "address"),
            _param("token", "address"),
            _param("pair", "address"),
            _param(
                "data",
                "tuple",
                [
                    _param("token", "address"),
                    _param("name", "string"),
                    _param("_name", "string"),
                    _param("ticker", "string"),
                    _param("supply", "uint256"),
                    _param("price", "uint256"),
                    _param("marketCap", "uint256"),
                    _param("liquidity", "uint256"),
                    _param("volume", "uint256"),
                    _param("volume24H", "uint256"),
                    _param("prevPrice", "uint256"),
                    _param("lastUpdated", "uint256"),
                ],
            ),
            _param("description", "string"),
            _param("image", "string"),
            _param("twitter", "string"),
            _param("telegram", "string"),
            _param("tradingOnUniswap", "bool"),
        ],
    ),
]

__all__ = [
    "ABI",
    "PANCAKE_FACTORY_ABI",
    "PAIR_ABI",
    "PANCAKE_V3_FACTORY_ABI",
    "V3_POOL_ABI",
    "FOUR_HELPER_ABI",
    "FLAP_PORTAL_ABI",
    "LUNA_LAUNCHPAD_ABI",
]
