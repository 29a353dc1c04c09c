"""Read-only contract call clients.

The route engine never signs or sends transactions; it only needs
`eth_call`. `RpcReadClient` is the seam: `Web3RpcClient` talks to a node,
`MockRpcClient` replays scripted responses in tests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import aiohttp
import structlog
from web3 import AsyncWeb3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, ProviderConnectionError

from launchroute.errors import ErrorKind, RouteError, to_route_error
from launchroute.models.types import normalize_address

logger = structlog.get_logger()


class RpcReadClient(Protocol):
    """Protocol for read-only contract calls.

    Implementations return decoded values: a single output is returned
    as-is, several named outputs as a dict, tuple (struct) outputs as dicts
    keyed by component name. Failures raise `RouteError`.
    """

    async def read_contract(
        self,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        """Call a view function.

        Args:
            address: Contract address
            abi: ABI containing the function
            function_name: Function to call
            args: Positional call arguments

        Returns:
            The decoded return value
        """
        ...


def struct_field(struct: Any, name: str, index: int | None = None, default: Any = None) -> Any:
    """Read a field from a decoded struct by name, falling back to position.

    Handles dicts, objects with attributes (named tuples) and plain
    sequences, which is what different clients hand back for the same call.
    """
    if struct is None:
        return default
    if isinstance(struct, Mapping):
        if name in struct:
            return struct[name]
    elif hasattr(struct, name):
        return getattr(struct, name)
    if index is not None and isinstance(struct, Sequence) and not isinstance(struct, str | bytes):
        if 0 <= index < len(struct):
            return struct[index]
    return default


def _find_function_abi(
    abi: Sequence[Mapping[str, Any]], function_name: str, arg_count: int
) -> Mapping[str, Any] | None:
    for entry in abi:
        if (
            entry.get("type") == "function"
            and entry.get("name") == function_name
            and len(entry.get("inputs", [])) == arg_count
        ):
            return entry
    return None


def _decode_value(param: Mapping[str, Any], value: Any) -> Any:
    """Turn a raw decoded value into plain Python, naming struct members."""
    components = param.get("components")
    type_ = param.get("type", "")
    if components and type_ == "tuple" and isinstance(value, Sequence):
        return {
            comp.get("name") or str(i): _decode_value(comp, value[i])
            for i, comp in enumerate(components)
            if i < len(value)
        }
    if components and type_.startswith("tuple[") and isinstance(value, Sequence):
        element = {**param, "type": "tuple"}
        return [_decode_value(element, item) for item in value]
    return value


def decode_outputs(outputs: Sequence[Mapping[str, Any]], value: Any) -> Any:
    """Shape a web3 call result according to the function's outputs."""
    if len(outputs) == 1:
        return _decode_value(outputs[0], value)
    if not isinstance(value, Sequence) or isinstance(value, str | bytes):
        return value
    if all(out.get("name") for out in outputs):
        return {out["name"]: _decode_value(out, v) for out, v in zip(outputs, value, strict=False)}
    return [_decode_value(out, v) for out, v in zip(outputs, value, strict=False)]


class Web3RpcClient:
    """RpcReadClient backed by web3's async HTTP provider.

    Web3 and transport exceptions are converted to `RouteError` here, so the
    rest of the engine only ever branches on `ErrorKind`.
    """

    def __init__(self, rpc_url: str | None = None, w3: AsyncWeb3 | None = None):
        if w3 is None:
            if not rpc_url:
                raise ValueError("rpc_url is required when no AsyncWeb3 instance is given")
            w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        self.w3 = w3

    async def read_contract(
        self,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        context = {"address": address, "function": function_name}
        fn_abi = _find_function_abi(abi, function_name, len(args))
        if fn_abi is None:
            raise RouteError(
                f"Function {function_name} with {len(args)} args not in ABI",
                ErrorKind.ABI_MISMATCH,
                context,
            )

        call_args = [
            AsyncWeb3.to_checksum_address(arg) if inp.get("type") == "address" else arg
            for inp, arg in zip(fn_abi.get("inputs", []), args, strict=True)
        ]
        try:
            contract = self.w3.eth.contract(
                address=AsyncWeb3.to_checksum_address(address), abi=list(abi)
            )
            raw = await contract.get_function_by_name(function_name)(*call_args).call()
        except ContractLogicError as e:
            raise RouteError(
                str(e) or "execution reverted", ErrorKind.CONTRACT_REVERT, context
            ) from e
        except BadFunctionCallOutput as e:
            raise RouteError(str(e), ErrorKind.ABI_MISMATCH, context) from e
        except asyncio.TimeoutError as e:
            raise RouteError(str(e) or "rpc request timed out", ErrorKind.TIMEOUT, context) from e
        except (aiohttp.ClientError, ProviderConnectionError) as e:
            logger.debug("rpc_connection_failed", address=address, error=str(e))
            raise RouteError(str(e) or type(e).__name__, ErrorKind.NETWORK, context) from e
        except Exception as e:
            error = to_route_error(e, context)
            logger.debug(
                "rpc_read_failed",
                address=address,
                function=function_name,
                kind=error.kind.value,
                error=str(e),
            )
            raise error from e

        return decode_outputs(fn_abi.get("outputs", []), raw)


def _normalize_arg(arg: Any) -> Any:
    if isinstance(arg, str):
        return arg.lower()
    return arg


ResponseKey = tuple[str, str, tuple[Any, ...] | None]


class MockRpcClient:
    """Mock client for testing without a node.

    Configure responses per (address, function, args) or per
    (address, function) for any args, and track calls for assertions.
    A configured value may be:
      - a plain value, returned as-is
      - an exception instance, raised on every call
      - a callable taking the call args, whose result is returned
        (or raised, if it is an exception)
    Unconfigured calls raise a CONTRACT_REVERT `RouteError`, like a call
    to an address without code.
    """

    def __init__(self, responses: dict[ResponseKey, Any] | None = None):
        self.responses: dict[ResponseKey, Any] = {}
        self.calls: list[tuple[str, str, tuple[Any, ...]]] = []  # (address, function, args)
        for (address, function_name, args), value in (responses or {}).items():
            self.set_response(address, function_name, value, args=args)

    def set_response(
        self,
        address: str,
        function_name: str,
        value: Any,
        args: Sequence[Any] | None = None,
    ) -> None:
        key_args = tuple(_normalize_arg(a) for a in args) if args is not None else None
        self.responses[(normalize_address(address), function_name, key_args)] = value

    def calls_to(self, function_name: str) -> list[tuple[str, str, tuple[Any, ...]]]:
        return [call for call in self.calls if call[1] == function_name]

    async def read_contract(
        self,
        address: str,
        abi: Sequence[Mapping[str, Any]],
        function_name: str,
        args: Sequence[Any] = (),
    ) -> Any:
        addr = normalize_address(address)
        norm_args = tuple(_normalize_arg(a) for a in args)
        self.calls.append((addr, function_name, norm_args))

        exact = (addr, function_name, norm_args)
        wildcard = (addr, function_name, None)
        if exact in self.responses:
            value = self.responses[exact]
        elif wildcard in self.responses:
            value = self.responses[wildcard]
        else:
            raise RouteError(
                f"execution reverted: no mock response for {function_name} at {addr}",
                ErrorKind.CONTRACT_REVERT,
                {"address": addr, "function": function_name},
            )

        if isinstance(value, BaseException):
            raise value
        if callable(value):
            value = value(norm_args)
            if isinstance(value, BaseException):
                raise value
        return value


__all__ = [
    "RpcReadClient",
    "Web3RpcClient",
    "MockRpcClient",
    "struct_field",
    "decode_outputs",
]
