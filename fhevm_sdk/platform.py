# fhevm_sdk/platform.py
"""
FHEVM SDK: Platform Presets

Ready-made wiring for the two supported runtimes:

    create_process_config   file-backed key cache; no-op relayer unless one
                            is supplied (server processes, scripts)
    create_process_client   create_process_config + FhevmClient
    create_browser_config   browser relayer over a ScriptHost; sqlite key
                            cache (embedded pages)

Every other create_fhevm_config option passes through as a keyword.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from .adapters.relayer import BrowserRelayerClient, NoopRelayerClient, RelayerClientAdapter, ScriptHost
from .adapters.storage import FilePublicKeyStore, PublicKeyStore, SqlitePublicKeyStore
from .config import FhevmConfig, create_fhevm_config
from .instance import FhevmClient, create_client
from .registry import ChainLike


def create_process_config(
    chains: Iterable[ChainLike],
    directory: Union[str, Path],
    relayer_client: Optional[RelayerClientAdapter] = None,
    public_key_store: Optional[PublicKeyStore] = None,
    **options: Any,
) -> FhevmConfig:
    """
    Config for in-process use.

    Args:
        chains: Chain definitions
        directory: Public-key cache directory (ignored with public_key_store)
        relayer_client: Relayer adapter (default: NoopRelayerClient)
        public_key_store: Cache override
        **options: Remaining create_fhevm_config options
    """
    return create_fhevm_config(
        chains=chains,
        relayer_client=relayer_client if relayer_client is not None else NoopRelayerClient(),
        public_key_store=(
            public_key_store if public_key_store is not None else FilePublicKeyStore(directory)
        ),
        **options,
    )


def create_process_client(
    chains: Iterable[ChainLike],
    directory: Union[str, Path],
    default_provider: Any = None,
    **options: Any,
) -> FhevmClient:
    """FhevmClient over create_process_config."""
    config = create_process_config(chains, directory, **options)
    return create_client(config, default_provider=default_provider)


def create_browser_config(
    chains: Iterable[ChainLike],
    host: Optional[ScriptHost] = None,
    mock_chains: Optional[Mapping[Any, str]] = None,
    relayer_client: Optional[RelayerClientAdapter] = None,
    public_key_store: Optional[PublicKeyStore] = None,
    database: Union[str, Path] = ":memory:",
    **options: Any,
) -> FhevmConfig:
    """
    Config for browser-embedded use.

    Args:
        chains: Chain definitions
        host: Page access for the default BrowserRelayerClient
        mock_chains: chain id -> RPC URL of local mock nodes
        relayer_client: Relayer adapter override (then host is not needed)
        public_key_store: Cache override
        database: sqlite database for the default cache

    Raises:
        ValueError: If neither host nor relayer_client is given
    """
    if relayer_client is None:
        if host is None:
            raise ValueError("create_browser_config: host or relayer_client is required")
        relayer_client = BrowserRelayerClient(host, logger=options.get("logger"))

    return create_fhevm_config(
        chains=chains,
        relayer_client=relayer_client,
        public_key_store=(
            public_key_store if public_key_store is not None else SqlitePublicKeyStore(database)
        ),
        mock_chains=mock_chains,
        **options,
    )
