"""Error type for route resolution.

A single `RouteError` carries an `ErrorKind` tag plus a context mapping.
Callers branch on `error.kind` instead of on exception subclasses.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of a route resolution failure."""

    PLATFORM = "platform"  # A platform read failed for a non-specific reason
    SANDBOX = "sandbox"  # Execution context forbids what the RPC client needs
    INVALID_PLATFORM_DATA = "invalid_platform_data"
    PLATFORM_STATE_MISSING = "platform_state_missing"  # Launch contract has no record
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    PAIR_NOT_FOUND = "pair_not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    CONTRACT_REVERT = "contract_revert"
    ABI_MISMATCH = "abi_mismatch"  # Function selector not implemented by the contract
    VALIDATION = "validation"
    UNKNOWN = "unknown"


_RETRYABLE_KINDS = frozenset({ErrorKind.NETWORK, ErrorKind.TIMEOUT, ErrorKind.RATE_LIMIT})

# Kinds after which probing further launch platforms is pointless
SKIP_TO_UNKNOWN_KINDS = frozenset({ErrorKind.SANDBOX, ErrorKind.PLATFORM_STATE_MISSING})


class RouteError(Exception):
    """Route resolution failure tagged with an ErrorKind."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.context: dict[str, Any] = dict(context or {})

    @property
    def retryable(self) -> bool:
        return is_retryable(self.kind)

    def __repr__(self) -> str:
        return f"RouteError(kind={self.kind.value!r}, message={self.message!r})"


def is_retryable(kind: ErrorKind) -> bool:
    """Only transport-shaped failures are worth another attempt."""
    return kind in _RETRYABLE_KINDS


# Substring markers, checked in order. This is a compatibility shim for RPC
# clients that only expose error text; the first match wins.
_MESSAGE_MARKERS: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (
        ErrorKind.SANDBOX,
        (
            "import() is disallowed",
            "dynamic import",
            "serviceworkerglobalscope",
        ),
    ),
    (ErrorKind.ABI_MISMATCH, ("function selector", "could not decode", "could not transact")),
    (ErrorKind.CONTRACT_REVERT, ("execution reverted", "revert")),
    (ErrorKind.RATE_LIMIT, ("rate limit", "too many requests", "429")),
    (ErrorKind.TIMEOUT, ("timeout", "timed out")),
    (ErrorKind.NETWORK, ("network", "connection", "cannot connect", "fetch", "econnreset")),
)


def classify_message(message: str) -> ErrorKind:
    """Map an error message to an ErrorKind using substring heuristics."""
    lowered = message.lower()
    for kind, markers in _MESSAGE_MARKERS:
        if any(marker in lowered for marker in markers):
            return kind
    return ErrorKind.UNKNOWN


def classify_error(error: BaseException) -> ErrorKind:
    """Classify any exception raised while talking to the chain."""
    if isinstance(error, RouteError):
        return error.kind
    if isinstance(error, TimeoutError):
        return ErrorKind.TIMEOUT
    if isinstance(error, ConnectionError):
        return ErrorKind.NETWORK
    return classify_message(str(error))


def to_route_error(
    error: BaseException,
    context: dict[str, Any] | None = None,
) -> RouteError:
    """Wrap a foreign exception as a RouteError, keeping RouteErrors as-is."""
    if isinstance(error, RouteError):
        if context:
            for key, value in context.items():
                error.context.setdefault(key, value)
        return error
    kind = classify_error(error)
    ctx = dict(context or {})
    ctx.setdefault("original_error", type(error).__name__)
    return RouteError(str(error) or type(error).__name__, kind, ctx)


def is_sandbox_error(error: BaseException) -> bool:
    return classify_error(error) == ErrorKind.SANDBOX


__all__ = [
    "ErrorKind",
    "RouteError",
    "SKIP_TO_UNKNOWN_KINDS",
    "is_retryable",
    "classify_message",
    "classify_error",
    "to_route_error",
    "is_sandbox_error",
]
