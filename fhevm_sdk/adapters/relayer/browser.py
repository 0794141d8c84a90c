# fhevm_sdk/adapters/relayer/browser.py
"""
FHEVM SDK Relayer: Browser Adapter

Loads the relayer SDK bundle by injecting a single <script> tag and talks
to the global object the bundle populates.

Page access goes through a ScriptHost supplied at construction time (a
Pyodide page, an embedded webview bridge, a headless browser session or
a test fake). The SDK global is captured once after a successful load
and threaded through every later call; calls made before that fail with
BackendUnavailableError instead of reading the global ad hoc.

SDK global surface (JavaScript names):
    initSDK(options)        -> bool
    createInstance(config)  -> crypto instance
    SepoliaConfig           baseline instance config

Usage:
    client = BrowserRelayerClient(host=page_host)
    await client.load()
    await client.init()
    instance = await client.create_instance(config)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ...constants import SDK_CDN_URL, SDK_GLOBAL_NAME
from ...errors import BackendUnavailableError, ScriptLoadError
from ...utils import maybe_await
from .base import InstanceConfig, RelayerClientAdapter


# =============================================================================
# Script Host
# =============================================================================

class ScriptHost(ABC):
    """
    Minimal page interface needed to load the relayer SDK.

    Represents the browser document/window, or a fake for testing.
    """

    @abstractmethod
    def has_script(self, src: str) -> bool:
        """Whether a <script> tag with this exact src already exists."""
        pass

    @abstractmethod
    async def inject_script(self, src: str) -> None:
        """
        Append a <script> tag and wait for it.

        Resolves on the script's load event, raises on its error event.
        """
        pass

    @abstractmethod
    def get_global(self, name: str) -> Optional[Any]:
        """Read a global (window) property, None when absent."""
        pass


# =============================================================================
# Browser Relayer Client
# =============================================================================

class BrowserRelayerClient(RelayerClientAdapter):
    """Relayer adapter for browser environments."""

    def __init__(
        self,
        host: ScriptHost,
        script_url: str = SDK_CDN_URL,
        global_name: str = SDK_GLOBAL_NAME,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize browser adapter.

        Args:
            host: Page access used to inject the script and read the global
            script_url: Relayer SDK bundle URL
            global_name: Global populated by the bundle
            logger: Logger (defaults to "fhevm_sdk")
        """
        self._host = host
        self._script_url = script_url
        self._global_name = global_name
        self._logger = logger or logging.getLogger("fhevm_sdk")
        self._sdk: Optional[Any] = None

    @property
    def is_loaded(self) -> bool:
        return self._sdk is not None

    async def load(self) -> None:
        if not self._host.has_script(self._script_url):
            try:
                await self._host.inject_script(self._script_url)
            except Exception as e:
                self._logger.error(
                    f"BrowserRelayerClient: failed to load relayer script {self._script_url}"
                )
                raise ScriptLoadError(
                    f"Failed to load relayer script from {self._script_url}: {e}",
                    endpoint=self._script_url,
                ) from e

        if self._sdk is None:
            self._sdk = self._host.get_global(self._global_name)

    def _require_sdk(self) -> Any:
        if self._sdk is None:
            self._logger.error(f"BrowserRelayerClient: {self._global_name} missing.")
            raise BackendUnavailableError(
                "BrowserRelayerClient: relayer SDK not loaded.",
                endpoint=self._script_url,
            )
        return self._sdk

    async def init(self, options: Optional[Dict[str, Any]] = None) -> bool:
        sdk = self._require_sdk()
        return bool(await maybe_await(sdk.initSDK(options)))

    async def create_instance(self, config: InstanceConfig) -> Any:
        sdk = self._require_sdk()
        return await maybe_await(sdk.createInstance(config))

    def get_baseline_config(self) -> Optional[InstanceConfig]:
        if self._sdk is None:
            return None
        baseline = getattr(self._sdk, "SepoliaConfig", None)
        return dict(baseline) if baseline is not None else None
