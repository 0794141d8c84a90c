# fhevm_sdk/transport/rpc.py
"""
FHEVM SDK Transport: JSON-RPC Access

Two ways of reaching a chain:
    EthereumProvider  - injected wallet handle (EIP-1193 ``request``)
    RpcSession        - throwaway connection opened from a URL

The default RpcSession is backed by web3.py's AsyncHTTPProvider; custom
methods (``web3_clientVersion``, ``fhevm_relayer_metadata``) go through
the provider's raw ``make_request``.

Usage:
    session = Web3RpcSession("http://localhost:8545")
    try:
        chain_id = await session.chain_id()
        version = await session.send("web3_clientVersion")
    finally:
        await session.close()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from web3 import AsyncHTTPProvider, AsyncWeb3


JSONRPC_VERSION = "2.0"


# =============================================================================
# Exceptions
# =============================================================================

class RPCError(Exception):
    """JSON-RPC error response."""
    def __init__(self, message: str, code: int = -32000, data: Any = None):
        super().__init__(message)
        self.code = code
        self.data = data


# =============================================================================
# Response Type
# =============================================================================

@dataclass
class RPCResponse:
    """JSON-RPC response."""
    id: Union[int, str, None]
    result: Any = None
    error: Optional[Dict[str, Any]] = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RPCResponse:
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=data.get("error"),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )

    def unwrap(self) -> Any:
        """Return the result or raise the carried error."""
        if self.is_error:
            error = self.error or {}
            raise RPCError(
                error.get("message", "Unknown RPC error"),
                code=error.get("code", -32000),
                data=error.get("data"),
            )
        return self.result


# =============================================================================
# Injected Provider
# =============================================================================

class EthereumProvider(ABC):
    """
    EIP-1193 style provider.

    Represents an injected wallet (window.ethereum) or a mock for testing.
    """

    @abstractmethod
    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Send JSON-RPC request."""
        pass


# =============================================================================
# URL Sessions
# =============================================================================

class RpcSession(ABC):
    """Short-lived JSON-RPC connection to one endpoint."""

    def __init__(self, url: str):
        self.url = url

    @abstractmethod
    async def chain_id(self) -> int:
        pass

    @abstractmethod
    async def send(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Call a (possibly non-standard) method and return its result."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection."""
        pass


RpcSessionFactory = Callable[[str], RpcSession]


class Web3RpcSession(RpcSession):
    """RpcSession over web3.py's async HTTP provider."""

    def __init__(self, url: str, request_timeout: float = 30.0):
        super().__init__(url)
        self._provider = AsyncHTTPProvider(url, request_kwargs={"timeout": request_timeout})
        self._w3 = AsyncWeb3(self._provider)

    async def chain_id(self) -> int:
        return int(await self._w3.eth.chain_id)

    async def send(self, method: str, params: Optional[List[Any]] = None) -> Any:
        raw = await self._provider.make_request(method, params or [])
        return RPCResponse.from_dict(dict(raw)).unwrap()

    async def close(self) -> None:
        await self._provider.disconnect()
