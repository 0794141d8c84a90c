# fhevm_sdk/adapters/__init__.py
"""
FHEVM SDK Adapters

Injected collaborators of the provisioning pipeline:
    relayer/  - how the FHE backend is loaded and invoked
    storage/  - public-key cache and signature storage backends
"""

from .relayer import (
    RelayerClientAdapter,
    BrowserRelayerClient,
    ScriptHost,
    ProcessRelayerClient,
    NoopRelayerClient,
)
from .storage import (
    PublicKeyStore,
    PublicKeyRecord,
    MemoryPublicKeyStore,
    FilePublicKeyStore,
    SqlitePublicKeyStore,
    GenericStringStorage,
    InMemoryStringStorage,
)

__all__ = [
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
]
