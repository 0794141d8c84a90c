# fhevm_sdk/instance/provision.py
"""
FHEVM SDK Instance: Provisioning Pipeline

Produces a ready crypto instance from an FhevmConfig.

Sequence:
    1. relayer load()   [sdk-loading -> sdk-loaded]
    2. relayer init()   [sdk-initializing -> sdk-initialized]
    3. effective provider (argument, else config.injected_provider)
    4. network resolution + effective chain id
    5a. mock:  probe node metadata, build via config.mock_instance_factory
    5b. real:  merge relayer config, read cache, create, persist key material

Cancellation is cooperative: the token is checked after every await and
a tripped token raises FhevmAbortError. An in-flight backend call is
never interrupted, only its result discarded.

Usage:
    result = await provision(config, provider="https://sepolia.example")
    instance = result.instance
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..config import CacheWritePolicy, FhevmConfig, MockInstanceParams
from ..constants import PUBLIC_PARAMS_BITS, ProvisionStatus
from ..errors import (
    ChainIdUnresolvedError,
    FhevmAbortError,
    IncompleteRelayerConfigError,
    MockFactoryUnavailableError,
    ProviderRequiredError,
    PublicKeyCacheError,
)
from ..adapters.relayer import InstanceConfig
from ..adapters.storage import (
    PublicKeyData,
    PublicKeyRecord,
    PublicParamsEntry,
    normalize_acl_address,
)
from ..registry import find_chain
from ..utils import is_hex_address, maybe_await
from .network import NetworkResolution, fetch_mock_metadata, resolve_network


StatusCallback = Callable[[ProvisionStatus], None]

# Instance config fields that must hold contract addresses
REQUIRED_ADDRESS_FIELDS = (
    "acl_contract_address",
    "kms_contract_address",
    "input_verifier_contract_address",
)


# =============================================================================
# Cancellation
# =============================================================================

class CancelToken:
    """Cooperative cancellation flag checked between pipeline steps."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise FhevmAbortError()


@dataclass
class ProvisionResult:
    """
    Provisioned instance.

    ``cancel`` trips the attempt's token; it never undoes an instance
    that was already created.
    """
    instance: Any
    chain_id: int
    cancel: Callable[[], None]


# =============================================================================
# Relayer preparation
# =============================================================================

def _notify(callback: Optional[StatusCallback], status: ProvisionStatus) -> None:
    if callback is not None:
        callback(status)


async def _prepare_relayer(
    config: FhevmConfig,
    token: CancelToken,
    on_status_change: Optional[StatusCallback],
) -> None:
    relayer = config.relayer_client
    logger = config.logger

    try:
        _notify(on_status_change, ProvisionStatus.SDK_LOADING)
        await relayer.load()
        token.raise_if_cancelled()
        _notify(on_status_change, ProvisionStatus.SDK_LOADED)

        _notify(on_status_change, ProvisionStatus.SDK_INITIALIZING)
        initialized = await relayer.init()
        token.raise_if_cancelled()
        _notify(on_status_change, ProvisionStatus.SDK_INITIALIZED)

        if initialized is not True:
            logger.warning("Relayer client init() returned false; continuing with instance creation.")
    except FhevmAbortError:
        raise
    except Exception as e:
        logger.error(f"Failed to prepare relayer client: {e}")
        raise


# =============================================================================
# Relayer config
# =============================================================================

def build_relayer_config_overrides(config: FhevmConfig, chain_id: int) -> InstanceConfig:
    """Instance config contributed by the registered chain (empty if unknown)."""
    chain = find_chain(config, chain_id)
    if chain is None:
        return {}

    overrides: InstanceConfig = dict(chain.metadata.get("relayer_config") or {})

    kms_public_key_url = chain.metadata.get("kms_public_key_url")
    if kms_public_key_url:
        overrides["kms_public_key_url"] = kms_public_key_url

    relayer = chain.relayer
    if relayer is not None:
        if relayer.acl:
            overrides["acl_contract_address"] = relayer.acl
        if relayer.kms:
            overrides["kms_contract_address"] = relayer.kms
        if relayer.input_verifier:
            overrides["input_verifier_contract_address"] = relayer.input_verifier

    return overrides


def resolve_relayer_instance_config(config: FhevmConfig, chain_id: int) -> InstanceConfig:
    """
    Merge baseline and chain config, lowest priority first.

    Raises:
        IncompleteRelayerConfigError: Listing every missing address field
    """
    merged: InstanceConfig = dict(config.relayer_client.get_baseline_config() or {})
    merged.update(build_relayer_config_overrides(config, chain_id))

    missing = [name for name in REQUIRED_ADDRESS_FIELDS if not is_hex_address(merged.get(name))]
    if missing:
        raise IncompleteRelayerConfigError(missing)

    return merged


# =============================================================================
# Instance creation
# =============================================================================

async def _create_mock_instance(
    config: FhevmConfig,
    resolution: NetworkResolution,
    chain_id: int,
    token: CancelToken,
) -> Any:
    token.raise_if_cancelled()
    metadata = await fetch_mock_metadata(resolution.rpc_url, config.rpc_session_factory)
    token.raise_if_cancelled()

    factory = config.mock_instance_factory
    if factory is None:
        raise MockFactoryUnavailableError(chain_id)

    instance = await maybe_await(factory(MockInstanceParams(
        rpc_url=resolution.rpc_url,
        chain_id=chain_id,
        metadata=metadata,
    )))
    token.raise_if_cancelled()
    return instance


def _record_from_instance(public_key: Any, public_params: Any) -> PublicKeyRecord:
    key = None
    if public_key:
        key = PublicKeyData(
            id=public_key.get("public_key_id"),
            data=public_key.get("public_key"),
        )

    params = None
    if public_params:
        params = {
            str(PUBLIC_PARAMS_BITS): PublicParamsEntry(
                public_params_id=public_params["public_params_id"],
                public_params=public_params["public_params"],
            )
        }
    return PublicKeyRecord(public_key=key, public_params=params)


async def persist_public_key_material(
    config: FhevmConfig,
    instance: Any,
    acl_address: str,
) -> None:
    """
    Fetch key material from a fresh instance and write it to the cache.

    Failures follow config.cache_write_policy: logged under ADVISORY,
    raised as PublicKeyCacheError under STRICT.
    """
    try:
        public_key, public_params = await asyncio.gather(
            maybe_await(instance.get_public_key()),
            maybe_await(instance.get_public_params(PUBLIC_PARAMS_BITS)),
        )
        await config.public_key_store.set(
            acl_address, _record_from_instance(public_key, public_params)
        )
    except Exception as e:
        if config.cache_write_policy is CacheWritePolicy.STRICT:
            raise PublicKeyCacheError(acl_address, e) from e
        config.logger.warning(f"Failed to cache public key material for {acl_address}: {e}")


async def _create_relayer_instance(
    config: FhevmConfig,
    provider: Any,
    chain_id: int,
    token: CancelToken,
    on_status_change: Optional[StatusCallback],
) -> Any:
    relayer_config = resolve_relayer_instance_config(config, chain_id)
    acl_address = normalize_acl_address(relayer_config["acl_contract_address"])

    cached = await config.public_key_store.get(acl_address)
    token.raise_if_cancelled()

    public_key, public_params = (None, None)
    if cached is not None:
        public_key, public_params = cached.to_instance_hints()

    _notify(on_status_change, ProvisionStatus.CREATING)

    create_config: Dict[str, Any] = dict(relayer_config)
    create_config.update(
        network=provider,
        public_key=public_key,
        public_params=public_params,
    )
    instance = await config.relayer_client.create_instance(create_config)
    token.raise_if_cancelled()

    if cached is None or not cached.is_complete:
        await persist_public_key_material(config, instance, acl_address)
        token.raise_if_cancelled()

    return instance


# =============================================================================
# Pipeline
# =============================================================================

async def provision(
    config: FhevmConfig,
    provider: Any = None,
    chain_id: Optional[int] = None,
    signal: Optional[CancelToken] = None,
    on_status_change: Optional[StatusCallback] = None,
) -> ProvisionResult:
    """
    Run one provisioning attempt.

    Args:
        config: SDK config
        provider: RPC URL or EIP-1193 provider; falls back to
            config.injected_provider
        chain_id: Explicit chain id (overrides the resolved one)
        signal: Caller-owned cancel token; a fresh one is used otherwise
        on_status_change: Receives ProvisionStatus values

    Returns:
        ProvisionResult with the instance, effective chain id and a cancel
        trigger

    Raises:
        FhevmAbortError: If cancelled between steps
        FhevmError: Configuration and transport failures
    """
    token = signal if signal is not None else CancelToken()

    await _prepare_relayer(config, token, on_status_change)

    effective_provider = provider if provider is not None else config.resolve_injected_provider()
    if effective_provider is None:
        raise ProviderRequiredError()

    resolution = await resolve_network(
        effective_provider, config.mock_chains, config.rpc_session_factory
    )
    token.raise_if_cancelled()

    effective_chain_id = chain_id if chain_id is not None else resolution.chain_id
    if effective_chain_id is None:
        raise ChainIdUnresolvedError()

    if resolution.is_mock:
        _notify(on_status_change, ProvisionStatus.CREATING)
        instance = await _create_mock_instance(config, resolution, effective_chain_id, token)
    else:
        instance = await _create_relayer_instance(
            config, effective_provider, effective_chain_id, token, on_status_change
        )

    return ProvisionResult(
        instance=instance,
        chain_id=effective_chain_id,
        cancel=token.cancel,
    )
