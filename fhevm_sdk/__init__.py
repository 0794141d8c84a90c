# fhevm_sdk/__init__.py
"""
FHEVM SDK: FHE Instance Provisioning

Provisions and manages FHE crypto instances for FHEVM chains, and builds
encrypted inputs / decryption requests on top of them.

Architecture:
    fhevm_sdk
    ├── registry.py        # Chain registry, default chain resolution
    ├── config.py          # Immutable FhevmConfig
    ├── platform.py        # Process / browser presets
    ├── adapters/
    │   ├── relayer/       # Browser, in-process and no-op relayer clients
    │   └── storage/       # Public-key caches, signature storage
    ├── transport/         # JSON-RPC providers and sessions (web3.py)
    ├── instance/
    │   ├── network.py     # Mock vs. real network resolution
    │   ├── provision.py   # Provisioning pipeline
    │   ├── handle.py      # idle/loading/ready/error state machine
    │   └── client.py      # FhevmClient facade
    └── crypto/
        ├── encryption.py  # Encrypted inputs, ABI mapping
        ├── decryption.py  # user_decrypt / public_decrypt
        └── signature.py   # EIP-712 decryption signatures

Quick Start:
    from fhevm_sdk import create_process_client

    client = create_process_client(
        chains=[{"id": 11155111, "name": "Sepolia"}],
        directory=".fhevm-cache",
        relayer_client=ProcessRelayerClient(...),
        default_provider="https://sepolia.example",
    )
    await client.handle.refresh()
"""

__version__ = "0.1.0"

# =============================================================================
# Errors
# =============================================================================

from .errors import (
    FhevmError,
    FhevmAbortError,
    ConfigurationError,
    UnregisteredChainError,
    NoDefaultChainError,
    ProviderRequiredError,
    ChainIdUnresolvedError,
    MockChainMissingRpcError,
    IncompleteRelayerConfigError,
    MockFactoryUnavailableError,
    TransportError,
    ChainIdRequestError,
    ClientVersionError,
    RelayerMetadataError,
    MockMetadataUnavailableError,
    ScriptLoadError,
    BackendUnavailableError,
    RelayerClientUnavailableError,
    CapabilityMissingError,
    AbiMappingError,
    AbiFunctionNotFoundError,
    MissingInputProofError,
    InsufficientHandlesError,
    DecryptionError,
    SignatureUnavailableError,
    EmptyRequestListError,
    PublicDecryptFailedError,
    PublicKeyCacheError,
)

# =============================================================================
# Registry / Config
# =============================================================================

from .constants import ProvisionStatus, InstanceStatus

from .registry import (
    ChainDefinition,
    RelayerAddresses,
    register_chains,
    get_chain,
    resolve_default_chain_id,
)

from .config import (
    CacheWritePolicy,
    FhevmConfig,
    MockMetadata,
    MockInstanceParams,
    create_fhevm_config,
)

# =============================================================================
# Adapters / Transport
# =============================================================================

from .adapters import (
    RelayerClientAdapter,
    BrowserRelayerClient,
    ScriptHost,
    ProcessRelayerClient,
    NoopRelayerClient,
    PublicKeyStore,
    PublicKeyRecord,
    MemoryPublicKeyStore,
    FilePublicKeyStore,
    SqlitePublicKeyStore,
    GenericStringStorage,
    InMemoryStringStorage,
)

from .transport import EthereumProvider, RpcSession, Web3RpcSession

# =============================================================================
# Instance
# =============================================================================

from .instance import (
    NetworkResolution,
    resolve_network,
    CancelToken,
    ProvisionResult,
    provision,
    InstanceHandle,
    FhevmClient,
    create_client,
)

# =============================================================================
# Crypto
# =============================================================================

from .crypto import (
    EncryptResult,
    build_input,
    map_external_type_to_builder_method,
    map_to_contract_params,
    to_hex,
    DecryptRequest,
    UserDecryptResult,
    PublicDecryptResult,
    user_decrypt,
    public_decrypt,
    DecryptionSigner,
    AccountSigner,
    ProviderSigner,
    DecryptionSignature,
)

from .platform import create_process_config, create_process_client, create_browser_config


__all__ = [
    "__version__",
    # Errors
    "FhevmError",
    "FhevmAbortError",
    "ConfigurationError",
    "UnregisteredChainError",
    "NoDefaultChainError",
    "ProviderRequiredError",
    "ChainIdUnresolvedError",
    "MockChainMissingRpcError",
    "IncompleteRelayerConfigError",
    "MockFactoryUnavailableError",
    "TransportError",
    "ChainIdRequestError",
    "ClientVersionError",
    "RelayerMetadataError",
    "MockMetadataUnavailableError",
    "ScriptLoadError",
    "BackendUnavailableError",
    "RelayerClientUnavailableError",
    "CapabilityMissingError",
    "AbiMappingError",
    "AbiFunctionNotFoundError",
    "MissingInputProofError",
    "InsufficientHandlesError",
    "DecryptionError",
    "SignatureUnavailableError",
    "EmptyRequestListError",
    "PublicDecryptFailedError",
    "PublicKeyCacheError",
    # Registry / Config
    "ProvisionStatus",
    "InstanceStatus",
    "ChainDefinition",
    "RelayerAddresses",
    "register_chains",
    "get_chain",
    "resolve_default_chain_id",
    "CacheWritePolicy",
    "FhevmConfig",
    "MockMetadata",
    "MockInstanceParams",
    "create_fhevm_config",
    # Adapters / Transport
    "RelayerClientAdapter",
    "BrowserRelayerClient",
    "ScriptHost",
    "ProcessRelayerClient",
    "NoopRelayerClient",
    "PublicKeyStore",
    "PublicKeyRecord",
    "MemoryPublicKeyStore",
    "FilePublicKeyStore",
    "SqlitePublicKeyStore",
    "GenericStringStorage",
    "InMemoryStringStorage",
    "EthereumProvider",
    "RpcSession",
    "Web3RpcSession",
    # Instance
    "NetworkResolution",
    "resolve_network",
    "CancelToken",
    "ProvisionResult",
    "provision",
    "InstanceHandle",
    "FhevmClient",
    "create_client",
    # Crypto
    "EncryptResult",
    "build_input",
    "map_external_type_to_builder_method",
    "map_to_contract_params",
    "to_hex",
    "DecryptRequest",
    "UserDecryptResult",
    "PublicDecryptResult",
    "user_decrypt",
    "public_decrypt",
    "DecryptionSigner",
    "AccountSigner",
    "ProviderSigner",
    "DecryptionSignature",
    # Platform
    "create_process_config",
    "create_process_client",
    "create_browser_config",
]
