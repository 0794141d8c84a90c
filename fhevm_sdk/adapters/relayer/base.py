# fhevm_sdk/adapters/relayer/base.py
"""
FHEVM SDK Relayer: Client Adapter Interface

Abstracts how the relayer SDK (the FHE backend) is loaded and invoked.

Contract:
    load()                  async, idempotent (no-op when already loaded)
    init(options)           async -> bool; False is a non-fatal signal
    create_instance(config) async -> crypto instance
    get_baseline_config()   sync, best-effort; None when unknown

Instance config:
    Plain dict. Keys used by the SDK itself:
        acl_contract_address, kms_contract_address,
        input_verifier_contract_address, kms_public_key_url,
        network, public_key, public_params, relayer_url, gateway_chain_id
    Any other key is forwarded to the backend untouched.

Crypto instance surface (provided by the backend):
    create_encrypted_input(contract_address, user_address) -> builder
    get_public_key()            -> {"public_key_id", "public_key"} | None
    get_public_params(bits)     -> {"public_params_id", "public_params"} | None
    generate_keypair()          -> {"public_key", "private_key"}
    create_eip712(public_key, contract_addresses, start_timestamp, duration_days)
                                -> {"domain", "types", "message"}
    user_decrypt(requests, private_key, public_key, signature,
                 contract_addresses, user_address, start_timestamp, duration_days)
    public_decrypt(requests)    (optional capability)

Any of these may return an awaitable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


InstanceConfig = Dict[str, Any]


class RelayerClientAdapter(ABC):
    """Capability interface over a relayer SDK backend."""

    @abstractmethod
    async def load(self) -> None:
        """Make the backend available. Must be idempotent."""
        pass

    @abstractmethod
    async def init(self, options: Optional[Dict[str, Any]] = None) -> bool:
        """Initialize the backend."""
        pass

    @abstractmethod
    async def create_instance(self, config: InstanceConfig) -> Any:
        """Create a crypto instance from a merged instance config."""
        pass

    def get_baseline_config(self) -> Optional[InstanceConfig]:
        """Baseline (Sepolia) instance config, if the backend exposes one."""
        return None
