"""Shared type definitions and address helpers.

These helpers are used by every layer that touches a contract address:
platform detection, contract reads, pool discovery and caching.
"""

import re
from typing import Annotated, Any

from pydantic import Field

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_ADDRESS_RE = re.compile(r"^0x[a-f0-9]{40}$")
_ZERO_HEX_RE = re.compile(r"^0x0+$", re.IGNORECASE)

# Ethereum/BSC address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with a 0x prefix.

    Args:
        address: An address (with or without 0x prefix)
        validate: If True, raises ValueError for invalid addresses.

    Returns:
        Lowercase address with 0x prefix

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.strip().lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: Any) -> bool:
    """Check if a value is a well-formed address (case-insensitive)."""
    if not isinstance(address, str):
        return False
    return _ADDRESS_RE.match(address.lower()) is not None


def is_zero_address(value: Any) -> bool:
    """True only for the literal zero address string."""
    if not isinstance(value, str):
        return False
    return value.lower() == ZERO_ADDRESS


def is_nonzero_address(value: Any) -> bool:
    """True for a well-formed address that is not the zero address."""
    return is_valid_address(value) and not is_zero_address(value)


def is_zero_like(value: Any) -> bool:
    """Check whether a decoded contract value carries no information.

    Contract reads for unknown tokens return default-initialized structs:
    zero integers, False, the zero address, empty strings. A struct (tuple,
    list or mapping) is zero-like when every member is.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, int | float):
        return value == 0
    if isinstance(value, bytes | bytearray):
        return all(b == 0 for b in value)
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed or trimmed in ("0", "0x"):
            return True
        if trimmed.startswith("0x"):
            return _ZERO_HEX_RE.match(trimmed) is not None
        return False
    if isinstance(value, dict):
        return len(value) == 0 or all(is_zero_like(v) for v in value.values())
    if isinstance(value, list | tuple):
        return len(value) == 0 or all(is_zero_like(v) for v in value)
    return False
