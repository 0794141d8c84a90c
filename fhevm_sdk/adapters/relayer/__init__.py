# fhevm_sdk/adapters/relayer/__init__.py
"""
FHEVM SDK Relayer Adapters

Adapters:
    RelayerClientAdapter  - capability interface
    BrowserRelayerClient  - script-tag loaded SDK (through a ScriptHost)
    ProcessRelayerClient  - directly importable backend module
    NoopRelayerClient     - always fails; explicit "not wired up" sentinel
"""

from .base import RelayerClientAdapter, InstanceConfig
from .browser import BrowserRelayerClient, ScriptHost
from .process import ProcessRelayerClient, unwrap_public_key
from .noop import NoopRelayerClient

__all__ = [
    "RelayerClientAdapter",
    "InstanceConfig",
    "BrowserRelayerClient",
    "ScriptHost",
    "ProcessRelayerClient",
    "unwrap_public_key",
    "NoopRelayerClient",
]
