# fhevm_sdk/transport/__init__.py
"""
FHEVM SDK Transport Layer

    EthereumProvider - injected wallet handle (EIP-1193)
    RpcSession       - throwaway URL connection; Web3RpcSession by default
"""

from .rpc import (
    JSONRPC_VERSION,
    RPCError,
    RPCResponse,
    EthereumProvider,
    RpcSession,
    RpcSessionFactory,
    Web3RpcSession,
)

__all__ = [
    "JSONRPC_VERSION",
    "RPCError",
    "RPCResponse",
    "EthereumProvider",
    "RpcSession",
    "RpcSessionFactory",
    "Web3RpcSession",
]
