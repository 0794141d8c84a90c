# fhevm_sdk/crypto/decryption.py
"""
FHEVM SDK Crypto: Decryption

    user_decrypt    - authenticated; needs a cached or freshly signed
                      EIP-712 authorization for the request address set
    public_decrypt  - unauthenticated; needs the instance's
                      ``public_decrypt`` capability
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..adapters.storage import GenericStringStorage
from ..errors import (
    CapabilityMissingError,
    EmptyRequestListError,
    PublicDecryptFailedError,
    SignatureUnavailableError,
)
from ..utils import maybe_await
from .signature import DEFAULT_DURATION_DAYS, DecryptionSignature, DecryptionSigner


@dataclass(frozen=True)
class DecryptRequest:
    """Ciphertext handle plus the contract that owns it."""
    handle: str
    contract_address: str

    @classmethod
    def coerce(cls, value: Union[DecryptRequest, Mapping[str, Any]]) -> DecryptRequest:
        if isinstance(value, DecryptRequest):
            return value
        return cls(
            handle=value["handle"],
            contract_address=value.get("contract_address", value.get("contractAddress")),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"handle": self.handle, "contract_address": self.contract_address}


@dataclass
class UserDecryptResult:
    result: Dict[str, Any]
    signature: DecryptionSignature


@dataclass
class PublicDecryptResult:
    result: Dict[str, Any]


def unique_contract_addresses(requests: Sequence[DecryptRequest]) -> List[str]:
    """Distinct contract addresses in order of first appearance."""
    return list(dict.fromkeys(r.contract_address for r in requests))


async def user_decrypt(
    instance: Any,
    signer: DecryptionSigner,
    requests: Sequence[Union[DecryptRequest, Mapping[str, Any]]],
    storage: GenericStringStorage,
    chain_id: Optional[int] = None,
    key_pair: Optional[Mapping[str, str]] = None,
    duration_days: int = DEFAULT_DURATION_DAYS,
) -> UserDecryptResult:
    """
    Decrypt handles the signer is allowed to read.

    The backend is called exactly once; duplicate requests are passed
    through unchanged, only the signed address set is deduplicated.

    Args:
        instance: Crypto instance
        signer: Decryption signer
        requests: {handle, contract_address} pairs
        storage: Signature storage
        chain_id: Chain the handles live on (informational)
        key_pair: Caller key pair {"public_key", "private_key"}
        duration_days: Validity window of a fresh signature

    Raises:
        SignatureUnavailableError: If no signature could be obtained
    """
    reqs = [DecryptRequest.coerce(r) for r in requests]
    addresses = unique_contract_addresses(reqs)

    sig = await DecryptionSignature.load_or_sign(
        instance, addresses, signer, storage,
        key_pair=key_pair, duration_days=duration_days,
    )
    if sig is None:
        raise SignatureUnavailableError()

    result = await maybe_await(instance.user_decrypt(
        [r.to_dict() for r in reqs],
        sig.private_key,
        sig.public_key,
        sig.signature,
        sig.contract_addresses,
        sig.user_address,
        sig.start_timestamp,
        sig.duration_days,
    ))
    return UserDecryptResult(result=result, signature=sig)


async def public_decrypt(
    instance: Any,
    requests: Sequence[Union[DecryptRequest, Mapping[str, Any]]],
) -> PublicDecryptResult:
    """
    Decrypt publicly decryptable handles.

    Raises:
        EmptyRequestListError: If ``requests`` is empty (instance untouched)
        CapabilityMissingError: If the instance has no public_decrypt
        PublicDecryptFailedError: Wrapping any backend failure
    """
    if not requests:
        raise EmptyRequestListError()

    decrypt = getattr(instance, "public_decrypt", None)
    if not callable(decrypt):
        raise CapabilityMissingError(
            "public_decrypt: instance does not support public decryption. "
            "Ensure the relayer backend exposes public_decrypt()."
        )

    reqs = [DecryptRequest.coerce(r).to_dict() for r in requests]
    try:
        result = await maybe_await(decrypt(reqs))
    except Exception as e:
        raise PublicDecryptFailedError(f"public_decrypt failed: {e}") from e
    return PublicDecryptResult(result=result)
