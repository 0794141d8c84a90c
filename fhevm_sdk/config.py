# fhevm_sdk/config.py
"""
FHEVM SDK: Configuration

``create_fhevm_config`` normalizes caller input once into an immutable
FhevmConfig. Consumers that need different settings derive a new value
with ``with_overrides``; unchanged fields are shared, never copied or
mutated.

Usage:
    config = create_fhevm_config(
        chains=[{"id": 11155111, "name": "Sepolia"}],
        relayer_client=ProcessRelayerClient(...),
        public_key_store=FilePublicKeyStore(".fhevm-cache"),
    )
    local = config.with_overrides(mock_chains={31337: "http://localhost:8545"})
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional, Union

from .adapters.relayer import RelayerClientAdapter
from .adapters.storage import GenericStringStorage, PublicKeyStore
from .registry import ChainDefinition, ChainLike, register_chains
from .transport import RpcSessionFactory, Web3RpcSession


# =============================================================================
# Policies and factories
# =============================================================================

class CacheWritePolicy(Enum):
    """What a failed public-key cache write does to provisioning."""
    ADVISORY = "advisory"   # log and return the instance anyway
    STRICT = "strict"       # fail the provisioning call


@dataclass(frozen=True)
class MockMetadata:
    """FHEVM contract addresses reported by a local mock node."""
    acl_address: str
    input_verifier_address: str
    kms_verifier_address: str


@dataclass(frozen=True)
class MockInstanceParams:
    """Arguments handed to the mock-mode instance factory."""
    rpc_url: str
    chain_id: int
    metadata: MockMetadata


MockInstanceFactory = Callable[[MockInstanceParams], Union[Any, Awaitable[Any]]]


# =============================================================================
# Config
# =============================================================================

@dataclass(frozen=True)
class FhevmConfig:
    """Fully resolved configuration shared across the SDK."""
    chains: Mapping[int, ChainDefinition]
    relayer_client: RelayerClientAdapter
    public_key_store: PublicKeyStore
    default_chain_id: Optional[int] = None
    signature_storage: Optional[GenericStringStorage] = None
    mock_chains: Mapping[int, str] = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("fhevm_sdk"))
    mock_instance_factory: Optional[MockInstanceFactory] = None
    rpc_session_factory: RpcSessionFactory = Web3RpcSession
    cache_write_policy: CacheWritePolicy = CacheWritePolicy.ADVISORY
    injected_provider: Any = None

    def with_overrides(self, **changes: Any) -> FhevmConfig:
        """Derive a new config; unchanged fields are shared."""
        if "chains" in changes:
            changes["chains"] = MappingProxyType(register_chains(changes["chains"]))
        if "mock_chains" in changes:
            changes["mock_chains"] = _normalize_mock_chains(changes["mock_chains"])
        return dataclasses.replace(self, **changes)

    def resolve_injected_provider(self) -> Any:
        """Current injected provider, calling it when it is a factory."""
        provider = self.injected_provider
        if callable(provider):
            return provider()
        return provider


def _normalize_mock_chains(mock_chains: Optional[Mapping[Any, str]]) -> Mapping[int, str]:
    return MappingProxyType({int(k): v for k, v in (mock_chains or {}).items()})


def create_fhevm_config(
    chains: Iterable[ChainLike],
    relayer_client: RelayerClientAdapter,
    public_key_store: PublicKeyStore,
    default_chain_id: Optional[int] = None,
    signature_storage: Optional[GenericStringStorage] = None,
    mock_chains: Optional[Mapping[Any, str]] = None,
    logger: Optional[logging.Logger] = None,
    mock_instance_factory: Optional[MockInstanceFactory] = None,
    rpc_session_factory: Optional[RpcSessionFactory] = None,
    cache_write_policy: CacheWritePolicy = CacheWritePolicy.ADVISORY,
    injected_provider: Any = None,
) -> FhevmConfig:
    """
    Normalize options into an FhevmConfig.

    Args:
        chains: Chain definitions (or dicts); later duplicates overwrite earlier ids
        relayer_client: Relayer backend adapter
        public_key_store: Public-key cache
        default_chain_id: Explicit default; else the first registered chain
        signature_storage: Storage for decryption signatures
        mock_chains: chain id -> RPC URL of local mock nodes
        logger: Logger (defaults to "fhevm_sdk")
        mock_instance_factory: Builds instances for mock chains
        rpc_session_factory: Opens throwaway RPC connections from URLs
        cache_write_policy: Effect of a failed public-key cache write
        injected_provider: Fallback provider (value or zero-arg callable)

    Returns:
        Immutable FhevmConfig
    """
    chain_map = register_chains(chains)

    resolved_default = default_chain_id
    if resolved_default is None and chain_map:
        resolved_default = next(iter(chain_map))

    return FhevmConfig(
        chains=MappingProxyType(chain_map),
        relayer_client=relayer_client,
        public_key_store=public_key_store,
        default_chain_id=resolved_default,
        signature_storage=signature_storage,
        mock_chains=_normalize_mock_chains(mock_chains),
        logger=logger or logging.getLogger("fhevm_sdk"),
        mock_instance_factory=mock_instance_factory,
        rpc_session_factory=rpc_session_factory or Web3RpcSession,
        cache_write_policy=cache_write_policy,
        injected_provider=injected_provider,
    )
