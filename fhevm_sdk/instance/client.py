# fhevm_sdk/instance/client.py
"""
FHEVM SDK Instance: Client Facade

Bundles a config, an InstanceHandle and the crypto helpers.

Usage:
    client = create_client(config, default_provider="https://sepolia.example")
    await client.handle.refresh()
    enc = await client.build_input(client.handle.instance, contract, user, build)
"""

from __future__ import annotations

from typing import Any, Optional

from ..config import FhevmConfig
from ..crypto import (
    build_input,
    map_external_type_to_builder_method,
    map_to_contract_params,
    public_decrypt,
    to_hex,
    user_decrypt,
)
from .handle import InstanceHandle
from .provision import CancelToken, StatusCallback, provision


class FhevmClient:
    """Config plus a ready-made instance handle and helper functions."""

    build_input = staticmethod(build_input)
    map_external_type_to_builder_method = staticmethod(map_external_type_to_builder_method)
    map_to_contract_params = staticmethod(map_to_contract_params)
    to_hex = staticmethod(to_hex)
    user_decrypt = staticmethod(user_decrypt)
    public_decrypt = staticmethod(public_decrypt)

    def __init__(self, config: FhevmConfig, default_provider: Any = None):
        self.config = config
        self.handle = InstanceHandle(config, default_provider=default_provider)

    async def create_instance(
        self,
        provider: Any = None,
        chain_id: Optional[int] = None,
        signal: Optional[CancelToken] = None,
        on_status_change: Optional[StatusCallback] = None,
    ) -> Any:
        """One-off provisioning outside the handle; returns the instance only."""
        result = await provision(
            self.config,
            provider=provider,
            chain_id=chain_id,
            signal=signal,
            on_status_change=on_status_change,
        )
        return result.instance


def create_client(config: FhevmConfig, default_provider: Any = None) -> FhevmClient:
    return FhevmClient(config, default_provider=default_provider)
