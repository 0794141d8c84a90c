# fhevm_sdk/instance/network.py
"""
FHEVM SDK Instance: Network Resolver

Determines which chain a provider talks to and whether that chain is a
local mock node.

Classification:
    chain id in {31337: HARDHAT_RPC_URL, **mock_chains}  -> mock
    anything else                                         -> real

A mock classification is confirmed later by ``fetch_mock_metadata``,
which probes ``web3_clientVersion`` and ``fhevm_relayer_metadata`` and
raises a distinguishable error when the endpoint is not running the
expected local stack.

Usage:
    resolution = await resolve_network("http://localhost:8545", {})
    if resolution.is_mock:
        metadata = await fetch_mock_metadata(resolution.rpc_url)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..config import MockMetadata
from ..constants import (
    DEFAULT_MOCK_CHAINS,
    ETH_CHAIN_ID,
    FHEVM_RELAYER_METADATA,
    MOCK_CLIENT_VERSION_MARKER,
    WEB3_CLIENT_VERSION,
)
from ..errors import (
    ChainIdRequestError,
    ClientVersionError,
    MockChainMissingRpcError,
    MockMetadataUnavailableError,
    RelayerMetadataError,
)
from ..transport import EthereumProvider, RpcSession, RpcSessionFactory, Web3RpcSession
from ..utils import is_hex_address


ProviderOrUrl = Union[str, EthereumProvider, Any]


@dataclass(frozen=True)
class NetworkResolution:
    """
    Outcome of network resolution for one provisioning attempt.

    ``rpc_url`` is always set for mock networks; for real networks it is
    set only when the caller passed a literal URL.
    """
    is_mock: bool
    chain_id: int
    rpc_url: Optional[str] = None


# =============================================================================
# Chain id
# =============================================================================

def _parse_chain_id(value: Any) -> int:
    if isinstance(value, int):
        return value
    text = str(value)
    return int(text, 16) if text.lower().startswith("0x") else int(text)


async def get_chain_id(
    provider_or_url: ProviderOrUrl,
    session_factory: RpcSessionFactory = Web3RpcSession,
) -> int:
    """
    Query the chain id.

    A URL is served through a throwaway RPC session that is closed
    afterwards; anything else is treated as an EIP-1193 provider.

    Raises:
        ChainIdRequestError: If the endpoint or provider cannot answer
            with a chain id (endpoint is set for URLs only)
    """
    if isinstance(provider_or_url, str):
        session = session_factory(provider_or_url)
        try:
            return await session.chain_id()
        except Exception as e:
            raise ChainIdRequestError(
                f"Unable to read chain id from {provider_or_url}: {e}",
                endpoint=provider_or_url,
            ) from e
        finally:
            await session.close()

    try:
        return _parse_chain_id(await provider_or_url.request(ETH_CHAIN_ID))
    except Exception as e:
        raise ChainIdRequestError(f"Unable to read chain id from provider: {e}") from e


async def resolve_network(
    provider_or_url: ProviderOrUrl,
    mock_chains: Optional[Mapping[int, str]] = None,
    session_factory: RpcSessionFactory = Web3RpcSession,
) -> NetworkResolution:
    """
    Classify the provider's chain as mock or real.

    Args:
        provider_or_url: RPC URL or EIP-1193 provider
        mock_chains: Caller mock table (overrides the built-in 31337 entry)
        session_factory: Opens RPC sessions for URLs

    Raises:
        ChainIdRequestError: If the chain id cannot be read
        MockChainMissingRpcError: If a mock chain has no usable RPC URL
    """
    chain_id = await get_chain_id(provider_or_url, session_factory)

    rpc_url = provider_or_url if isinstance(provider_or_url, str) else None

    combined = dict(DEFAULT_MOCK_CHAINS)
    combined.update(mock_chains or {})

    if chain_id in combined:
        rpc_url = rpc_url or combined[chain_id]
        if not rpc_url:
            raise MockChainMissingRpcError(chain_id)
        return NetworkResolution(is_mock=True, chain_id=chain_id, rpc_url=rpc_url)

    return NetworkResolution(is_mock=False, chain_id=chain_id, rpc_url=rpc_url)


# =============================================================================
# Mock node probe
# =============================================================================

async def _send(session_factory: RpcSessionFactory, rpc_url: str, method: str) -> Any:
    session: RpcSession = session_factory(rpc_url)
    try:
        return await session.send(method, [])
    finally:
        await session.close()


async def fetch_mock_metadata(
    rpc_url: str,
    session_factory: RpcSessionFactory = Web3RpcSession,
) -> MockMetadata:
    """
    Probe a local node for FHEVM contract addresses.

    Raises:
        ClientVersionError: If web3_clientVersion fails
        MockMetadataUnavailableError: If the node is not a compatible
            mock node or reports an invalid metadata shape
        RelayerMetadataError: If fhevm_relayer_metadata fails
    """
    try:
        version = await _send(session_factory, rpc_url, WEB3_CLIENT_VERSION)
    except Exception as e:
        raise ClientVersionError(
            f"The URL {rpc_url} is not a Web3 node or is not reachable. "
            f"Please check the endpoint.",
            endpoint=rpc_url,
        ) from e

    if not isinstance(version, str) or MOCK_CLIENT_VERSION_MARKER not in version.lower():
        raise MockMetadataUnavailableError(
            f"The node at {rpc_url} is not a {MOCK_CLIENT_VERSION_MARKER} node "
            f"(client version: {version!r}).",
            endpoint=rpc_url,
        )

    try:
        metadata = await _send(session_factory, rpc_url, FHEVM_RELAYER_METADATA)
    except Exception as e:
        raise RelayerMetadataError(
            f"The URL {rpc_url} is not a FHEVM Hardhat node or is not reachable. "
            f"Please check the endpoint.",
            endpoint=rpc_url,
        ) from e

    if not isinstance(metadata, Mapping):
        raise MockMetadataUnavailableError(
            f"Unable to fetch FHEVM relayer metadata from {rpc_url}.",
            endpoint=rpc_url,
        )

    acl = metadata.get("ACLAddress")
    input_verifier = metadata.get("InputVerifierAddress")
    kms_verifier = metadata.get("KMSVerifierAddress")
    if not all(is_hex_address(v) for v in (acl, input_verifier, kms_verifier)):
        raise MockMetadataUnavailableError(
            f"Invalid FHEVM relayer metadata from {rpc_url}: {dict(metadata)!r}",
            endpoint=rpc_url,
        )

    return MockMetadata(
        acl_address=acl,
        input_verifier_address=input_verifier,
        kms_verifier_address=kms_verifier,
    )
