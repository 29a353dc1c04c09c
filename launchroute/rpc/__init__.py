"""Contract read clients and ABIs."""

from launchroute.rpc.client import (
    MockRpcClient,
    RpcReadClient,
    Web3RpcClient,
    decode_outputs,
    struct_field,
)

__all__ = [
    "RpcReadClient",
    "Web3RpcClient",
    "MockRpcClient",
    "struct_field",
    "decode_outputs",
]
