# fhevm_sdk/adapters/relayer/noop.py
"""Explicit "not wired up" relayer adapter: every operation fails."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ...errors import RelayerClientUnavailableError
from .base import InstanceConfig, RelayerClientAdapter


DEFAULT_NOOP_MESSAGE = "Relayer client is not available in this environment."


class NoopRelayerClient(RelayerClientAdapter):
    """Sentinel adapter used where no backend is configured."""

    def __init__(self, message: Optional[str] = None):
        self.message = message or DEFAULT_NOOP_MESSAGE

    def _fail(self):
        raise RelayerClientUnavailableError(self.message)

    async def load(self) -> None:
        self._fail()

    async def init(self, options: Optional[Dict[str, Any]] = None) -> bool:
        self._fail()

    async def create_instance(self, config: InstanceConfig) -> Any:
        self._fail()

    def get_baseline_config(self) -> Optional[InstanceConfig]:
        return None
