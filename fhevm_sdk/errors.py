# fhevm_sdk/errors.py
"""
FHEVM SDK: Error Taxonomy

Every distinguishable failure carries a stable ``code`` string suitable
for programmatic branching, and transport failures also carry the
offending ``endpoint``.

Hierarchy:
    FhevmError
    ├── FhevmAbortError            (cancellation, not an error state)
    ├── ConfigurationError         (fatal, never retried)
    ├── TransportError             (fatal per attempt, carries the URL)
    ├── BackendUnavailableError    (relayer SDK missing / not wired up)
    ├── CapabilityMissingError     (instance lacks an operation)
    ├── AbiMappingError            (encrypted payload vs. ABI mismatch)
    ├── DecryptionError
    └── PublicKeyCacheError        (strict cache-write policy only)
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class FhevmError(Exception):
    """Base SDK error."""

    code = "FHEVM_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(message)
        if code is not None:
            self.code = code
        self.endpoint = endpoint


class FhevmAbortError(FhevmError):
    """Operation was cancelled."""

    code = "CANCELLED"

    def __init__(self, message: str = "FHEVM operation was cancelled"):
        super().__init__(message)


# =============================================================================
# Configuration
# =============================================================================

class ConfigurationError(FhevmError):
    """Invalid or incomplete configuration."""
    code = "CONFIGURATION_ERROR"


class UnregisteredChainError(ConfigurationError):
    """Chain id is not present in the registry."""

    code = "UNREGISTERED_CHAIN"

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"Chain with id {chain_id} is not registered in FHEVM config.")


class NoDefaultChainError(ConfigurationError):
    code = "NO_DEFAULT_CHAIN"

    def __init__(self):
        super().__init__("No chain ID provided and no default chain ID found in config")


class ProviderRequiredError(ConfigurationError):
    code = "PROVIDER_REQUIRED"

    def __init__(self):
        super().__init__("provision: provider is required.")


class ChainIdUnresolvedError(ConfigurationError):
    code = "CHAIN_ID_UNRESOLVED"

    def __init__(self):
        super().__init__("provision: unable to resolve chainId.")


class MockChainMissingRpcError(ConfigurationError):
    code = "MOCK_CHAIN_MISSING_RPC"

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(f"Mock chain {chain_id} requires a RPC endpoint.")


class IncompleteRelayerConfigError(ConfigurationError):
    """Merged relayer config lacks one or more contract addresses."""

    code = "INCOMPLETE_RELAYER_CONFIG"

    def __init__(self, missing: Iterable[str]):
        self.missing: List[str] = list(missing)
        super().__init__(
            f"Relayer configuration is missing fields: {', '.join(self.missing)}. "
            f"Provide them via chain metadata or the relayer client adapter."
        )


class MockFactoryUnavailableError(ConfigurationError):
    code = "MOCK_FACTORY_UNAVAILABLE"

    def __init__(self, chain_id: int):
        self.chain_id = chain_id
        super().__init__(
            f"Chain {chain_id} resolved to a mock node but no mock instance factory is configured."
        )


# =============================================================================
# Transport
# =============================================================================

class TransportError(FhevmError):
    """Unreachable or wrong-kind RPC endpoint."""
    code = "TRANSPORT_ERROR"


class ChainIdRequestError(TransportError):
    code = "CHAIN_ID_REQUEST_ERROR"


class ClientVersionError(TransportError):
    code = "WEB3_CLIENTVERSION_ERROR"


class RelayerMetadataError(TransportError):
    code = "FHEVM_RELAYER_METADATA_ERROR"


class MockMetadataUnavailableError(TransportError):
    """Endpoint answered but is not running the expected local FHEVM stack."""
    code = "MOCK_METADATA_UNAVAILABLE"


class ScriptLoadError(TransportError):
    code = "RELAYER_SCRIPT_LOAD_ERROR"


# =============================================================================
# Backend / capabilities
# =============================================================================

class BackendUnavailableError(FhevmError):
    code = "BACKEND_UNAVAILABLE"


class RelayerClientUnavailableError(BackendUnavailableError):
    code = "RELAYER_CLIENT_UNAVAILABLE"


class CapabilityMissingError(FhevmError):
    code = "CAPABILITY_MISSING"


# =============================================================================
# ABI mapping
# =============================================================================

class AbiMappingError(FhevmError):
    code = "ABI_MAPPING_ERROR"


class AbiFunctionNotFoundError(AbiMappingError):
    code = "ABI_FUNCTION_NOT_FOUND"

    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"Function ABI not found for {function_name}")


class MissingInputProofError(AbiMappingError):
    code = "MISSING_INPUT_PROOF"


class InsufficientHandlesError(AbiMappingError):
    code = "INSUFFICIENT_HANDLES"


# =============================================================================
# Decryption
# =============================================================================

class DecryptionError(FhevmError):
    code = "DECRYPTION_ERROR"


class SignatureUnavailableError(DecryptionError):
    code = "SIGNATURE_UNAVAILABLE"

    def __init__(self):
        super().__init__("Failed to create FHE decryption signature")


class EmptyRequestListError(DecryptionError):
    code = "EMPTY_REQUEST_LIST"

    def __init__(self):
        super().__init__("public_decrypt: requests list is empty")


class PublicDecryptFailedError(DecryptionError):
    code = "PUBLIC_DECRYPT_FAILED"


# =============================================================================
# Cache
# =============================================================================

class PublicKeyCacheError(FhevmError):
    code = "PUBLIC_KEY_CACHE_ERROR"

    def __init__(self, acl_address: str, cause: Exception):
        self.acl_address = acl_address
        super().__init__(f"Failed to persist public key material for {acl_address}: {cause}")
