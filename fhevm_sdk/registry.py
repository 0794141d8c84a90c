# fhevm_sdk/registry.py
"""
FHEVM SDK: Chain Registry

Normalizes chain descriptors into a lookup table keyed by chain id and
resolves the default chain.

Default chain precedence:
    1. explicit chain id argument
    2. first configured mock chain (mock-resolution context only)
    3. config.default_chain_id
    4. first registered chain
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional, Union

from .errors import NoDefaultChainError, UnregisteredChainError

if TYPE_CHECKING:
    from .config import FhevmConfig


# =============================================================================
# Chain Definitions
# =============================================================================

@dataclass(frozen=True)
class RelayerAddresses:
    """Relayer contract addresses of a chain."""
    acl: Optional[str] = None
    kms: Optional[str] = None
    input_verifier: Optional[str] = None


@dataclass(frozen=True)
class ChainDefinition:
    """
    Registered chain.

    Attributes:
        id: Chain id (registry key)
        name: Display name
        rpc_url: Default RPC endpoint
        relayer: Relayer contract addresses
        metadata: Free-form metadata; ``kms_public_key_url`` and
            ``relayer_config`` (partial instance config) are read by the
            provisioning pipeline
        allow_mock: Chain may be served by a local mock node
    """
    id: int
    name: str
    rpc_url: Optional[str] = None
    relayer: Optional[RelayerAddresses] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    allow_mock: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChainDefinition:
        """Build from a dict, accepting snake_case or camelCase keys."""
        relayer = data.get("relayer")
        if isinstance(relayer, Mapping):
            relayer = RelayerAddresses(
                acl=relayer.get("acl"),
                kms=relayer.get("kms"),
                input_verifier=relayer.get("input_verifier", relayer.get("inputVerifier")),
            )

        metadata = dict(data.get("metadata") or {})
        if "kmsPublicKeyUrl" in metadata:
            metadata.setdefault("kms_public_key_url", metadata.pop("kmsPublicKeyUrl"))
        if "relayerConfig" in metadata:
            metadata.setdefault("relayer_config", metadata.pop("relayerConfig"))

        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            rpc_url=data.get("rpc_url", data.get("rpcUrl")),
            relayer=relayer,
            metadata=metadata,
            allow_mock=bool(data.get("allow_mock", data.get("allowMock", False))),
        )


ChainLike = Union[ChainDefinition, Mapping[str, Any]]


# =============================================================================
# Registry Operations
# =============================================================================

def register_chains(chains: Iterable[ChainLike]) -> Dict[int, ChainDefinition]:
    """
    Build the chain lookup table.

    Later entries with the same id overwrite earlier ones; iteration order
    follows first registration.
    """
    table: Dict[int, ChainDefinition] = {}
    for chain in chains:
        if not isinstance(chain, ChainDefinition):
            chain = ChainDefinition.from_dict(chain)
        table[chain.id] = chain
    return table


def get_chain(config: FhevmConfig, chain_id: int) -> ChainDefinition:
    """
    Look up a registered chain.

    Raises:
        UnregisteredChainError: If the id is not registered
    """
    chain = config.chains.get(chain_id)
    if chain is None:
        raise UnregisteredChainError(chain_id)
    return chain


def find_chain(config: FhevmConfig, chain_id: Optional[int]) -> Optional[ChainDefinition]:
    """Like get_chain, but None for unknown or missing ids."""
    if chain_id is None:
        return None
    return config.chains.get(chain_id)


def resolve_default_chain_id(
    config: FhevmConfig,
    chain_id: Optional[int] = None,
    is_mock: bool = False,
) -> int:
    """
    Resolve the chain id to use.

    Args:
        config: SDK config
        chain_id: Explicit chain id (always wins)
        is_mock: Resolving for a mock environment

    Raises:
        NoDefaultChainError: If nothing resolves
    """
    if chain_id is not None:
        return chain_id

    if is_mock and config.mock_chains:
        return next(iter(config.mock_chains))

    if config.default_chain_id is not None:
        return config.default_chain_id

    for registered_id in config.chains:
        return registered_id

    raise NoDefaultChainError()
