# fhevm_sdk/instance/__init__.py
"""
FHEVM SDK Instance Layer

    network    - mock vs. real chain resolution and the mock-node probe
    provision  - provisioning pipeline
    handle     - idle/loading/ready/error state machine
    client     - FhevmClient facade
"""

from .network import (
    NetworkResolution,
    get_chain_id,
    resolve_network,
    fetch_mock_metadata,
)
from .provision import (
    CancelToken,
    ProvisionResult,
    provision,
    resolve_relayer_instance_config,
    persist_public_key_material,
)
from .handle import InstanceHandle
from .client import FhevmClient, create_client

__all__ = [
    "NetworkResolution",
    "get_chain_id",
    "resolve_network",
    "fetch_mock_metadata",
    "CancelToken",
    "ProvisionResult",
    "provision",
    "resolve_relayer_instance_config",
    "persist_public_key_material",
    "InstanceHandle",
    "FhevmClient",
    "create_client",
]
