# fhevm_sdk/instance/handle.py
"""
FHEVM SDK Instance: Instance Handle

Re-entrant state machine around provisioning attempts.

States:
    idle -> loading -> ready | error
    loading -> idle           (cancelled; not an error)

Every attempt is tagged with a generation number. Only the attempt whose
generation is still current may change visible state, so a slow
superseded attempt can never overwrite a newer one.

Usage:
    handle = InstanceHandle(config, default_provider="https://sepolia.example")
    await handle.refresh()
    if handle.status is InstanceStatus.READY:
        instance = handle.instance
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from ..config import FhevmConfig
from ..constants import InstanceStatus
from ..errors import FhevmAbortError
from .provision import CancelToken, ProvisionResult, StatusCallback, provision


Provisioner = Callable[..., Awaitable[ProvisionResult]]


class InstanceHandle:
    """Cancellable holder of one provisioned instance."""

    def __init__(
        self,
        config: FhevmConfig,
        default_provider: Any = None,
        provisioner: Provisioner = provision,
    ):
        """
        Initialize handle.

        Args:
            config: SDK config
            default_provider: Provider used when refresh() gets none; a
                zero-arg callable is invoked on every refresh
            provisioner: Pipeline entry point (``provision``)
        """
        self._config = config
        self._default_provider = default_provider
        self._provisioner = provisioner

        self._status = InstanceStatus.IDLE
        self._instance: Any = None
        self._error: Optional[BaseException] = None
        self._chain_id: Optional[int] = None

        self._generation = 0
        self._token: Optional[CancelToken] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def status(self) -> InstanceStatus:
        return self._status

    @property
    def instance(self) -> Any:
        return self._instance

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def chain_id(self) -> Optional[int]:
        return self._chain_id

    @property
    def generation(self) -> int:
        return self._generation

    def _resolve_default_provider(self) -> Any:
        provider = self._default_provider
        if callable(provider):
            return provider()
        return provider

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def abort(self) -> None:
        """Cancel the current attempt and return to idle immediately."""
        if self._token is not None:
            self._token.cancel()
            self._token = None
        self._generation += 1
        self._status = InstanceStatus.IDLE
        self._instance = None
        self._error = None
        self._chain_id = None

    async def refresh(
        self,
        provider: Any = None,
        chain_id: Optional[int] = None,
        on_status_change: Optional[StatusCallback] = None,
    ) -> None:
        """
        Start a new provisioning attempt, superseding any in-flight one.

        Failures land in ``error``; this coroutine only raises when the
        task running it is itself cancelled.
        """
        self.abort()
        generation = self._generation
        token = CancelToken()
        self._token = token
        self._status = InstanceStatus.LOADING

        if provider is None:
            provider = self._resolve_default_provider()

        try:
            result = await self._provisioner(
                self._config,
                provider=provider,
                chain_id=chain_id,
                signal=token,
                on_status_change=on_status_change,
            )
        except asyncio.CancelledError:
            if generation == self._generation:
                self._token = None
                self._status = InstanceStatus.IDLE
            raise
        except Exception as e:
            if generation != self._generation:
                return
            self._token = None
            if token.cancelled or isinstance(e, FhevmAbortError):
                self._status = InstanceStatus.IDLE
                return
            self._config.logger.error(f"FHEVM instance provisioning failed: {e}")
            self._error = e
            self._status = InstanceStatus.ERROR
            return

        if generation != self._generation:
            return
        self._token = None
        if token.cancelled:
            self._status = InstanceStatus.IDLE
            return
        self._instance = result.instance
        self._chain_id = result.chain_id
        self._status = InstanceStatus.READY
