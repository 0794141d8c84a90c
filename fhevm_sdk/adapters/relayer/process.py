# fhevm_sdk/adapters/relayer/process.py
"""
FHEVM SDK Relayer: In-Process Adapter

Uses a relayer backend that is directly importable in this process.
There is no load step; ``init`` always succeeds.

Backend module surface:
    create_instance(config) -> crypto instance (or awaitable)
    SEPOLIA_CONFIG          baseline instance config (optional)

Usage:
    client = ProcessRelayerClient(
        backend="my_relayer_backend",
        relayer_url="https://relayer.testnet.example",
        rpc_url="https://sepolia.example",
    )
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any, Callable, Dict, Optional, Union

from ...utils import maybe_await
from .base import InstanceConfig, RelayerClientAdapter


def unwrap_public_key(config: InstanceConfig) -> InstanceConfig:
    """
    Strip the cache wrapper shape before forwarding to the backend.

    A ``{"id", "data"}`` public key is replaced by its raw bytes (or
    dropped when it has none), and cached public params are dropped.
    """
    if not config.get("public_key"):
        return config

    cloned = dict(config)
    public_key = cloned["public_key"]
    if isinstance(public_key, dict) and "data" in public_key:
        data = public_key.get("data")
        if isinstance(data, (bytes, bytearray)):
            cloned["public_key"] = bytes(data)
        else:
            del cloned["public_key"]

    cloned.pop("public_params", None)
    return cloned


class ProcessRelayerClient(RelayerClientAdapter):
    """Relayer adapter over an importable backend module."""

    def __init__(
        self,
        backend: Union[str, ModuleType, Any],
        relayer_url: str,
        rpc_url: str,
        gateway_chain_id: Optional[int] = None,
        get_base_config: Optional[Callable[[], InstanceConfig]] = None,
    ):
        """
        Initialize in-process adapter.

        Args:
            backend: Backend module, or its dotted import path
            relayer_url: Relayer HTTP endpoint
            rpc_url: Chain RPC endpoint passed to the backend as ``network``
            gateway_chain_id: Gateway chain id override
            get_base_config: Baseline config source (defaults to backend.SEPOLIA_CONFIG)
        """
        if isinstance(backend, str):
            backend = importlib.import_module(backend)
        self._backend = backend
        self._relayer_url = relayer_url
        self._rpc_url = rpc_url
        self._gateway_chain_id = gateway_chain_id
        self._get_base_config = get_base_config or self._backend_base_config

    def _backend_base_config(self) -> InstanceConfig:
        return dict(getattr(self._backend, "SEPOLIA_CONFIG", None) or {})

    async def load(self) -> None:
        return None

    async def init(self, options: Optional[Dict[str, Any]] = None) -> bool:
        return True

    def get_baseline_config(self) -> InstanceConfig:
        return self._get_base_config()

    async def create_instance(self, config: InstanceConfig) -> Any:
        base = self._get_base_config()
        gateway_chain_id = config.get("gateway_chain_id")
        if gateway_chain_id is None:
            gateway_chain_id = self._gateway_chain_id
        if gateway_chain_id is None:
            gateway_chain_id = base.get("gateway_chain_id")

        merged = unwrap_public_key({
            **base,
            **config,
            "relayer_url": self._relayer_url,
            "network": self._rpc_url,
            "gateway_chain_id": gateway_chain_id,
        })
        return await maybe_await(self._backend.create_instance(merged))
