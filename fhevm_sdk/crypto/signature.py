# fhevm_sdk/crypto/signature.py
"""
FHEVM SDK Crypto: Decryption Signatures

EIP-712 user-decryption authorizations, scoped to one signer and one set
of contract addresses and reused from GenericStringStorage while valid.

Storage key:
    "<user address lower>:<keccak(sorted lowercased contract addresses)>"
    plus ":<keccak(public key)>" when the caller supplies its own key pair

Validity:
    start_timestamp + duration_days * 86400 (seconds)

Signers:
    AccountSigner   - eth-account LocalAccount (sign_typed_data)
    ProviderSigner  - EIP-1193 provider (eth_signTypedData_v4)

Usage:
    signer = AccountSigner(Account.from_key(private_key))
    sig = await DecryptionSignature.load_or_sign(
        instance, ["0xContract"], signer, storage,
    )
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from eth_account.signers.local import LocalAccount
from eth_utils import encode_hex, keccak, to_checksum_address

from ..adapters.storage import GenericStringStorage
from ..constants import ETH_ACCOUNTS, ETH_REQUEST_ACCOUNTS, ETH_SIGN_TYPED_DATA
from ..transport import EthereumProvider
from ..utils import maybe_await


logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
DEFAULT_DURATION_DAYS = 365
EIP712_DOMAIN_TYPE = "EIP712Domain"
DEFAULT_PRIMARY_TYPE = "UserDecryptRequestVerification"


# =============================================================================
# Signers
# =============================================================================

class DecryptionSigner(ABC):
    """Signs EIP-712 decryption authorizations."""

    @abstractmethod
    async def get_address(self) -> str:
        pass

    @abstractmethod
    async def sign_typed_data(self, typed_data: Mapping[str, Any]) -> str:
        """Sign ``{"domain", "types", "message"}``; returns 0x-hex signature."""
        pass


class AccountSigner(DecryptionSigner):
    """Signer over an eth-account local account."""

    def __init__(self, account: LocalAccount):
        self._account = account

    async def get_address(self) -> str:
        return self._account.address

    async def sign_typed_data(self, typed_data: Mapping[str, Any]) -> str:
        types = {
            name: fields
            for name, fields in typed_data["types"].items()
            if name != EIP712_DOMAIN_TYPE
        }
        signed = self._account.sign_typed_data(
            domain_data=dict(typed_data["domain"]),
            message_types=types,
            message_data=dict(typed_data["message"]),
        )
        return encode_hex(signed.signature)


class ProviderSigner(DecryptionSigner):
    """Signer over an injected EIP-1193 provider."""

    def __init__(self, provider: EthereumProvider, address: Optional[str] = None):
        self._provider = provider
        self._address = address

    async def get_address(self) -> str:
        if self._address is None:
            accounts = await self._provider.request(ETH_ACCOUNTS)
            if not accounts:
                accounts = await self._provider.request(ETH_REQUEST_ACCOUNTS)
            if not accounts:
                raise ValueError("Provider exposes no accounts")
            self._address = to_checksum_address(accounts[0])
        return self._address

    async def sign_typed_data(self, typed_data: Mapping[str, Any]) -> str:
        address = await self.get_address()
        payload = dict(typed_data)
        payload.setdefault("primaryType", DEFAULT_PRIMARY_TYPE)
        return await self._provider.request(ETH_SIGN_TYPED_DATA, [address, json.dumps(payload)])


# =============================================================================
# Signature
# =============================================================================

def _keccak_hex(text: str) -> str:
    return encode_hex(keccak(text=text))


def signature_storage_key(
    user_address: str,
    contract_addresses: Sequence[str],
    public_key: Optional[str] = None,
) -> str:
    """Storage key for a (signer, contract address set[, public key]) scope."""
    addresses = sorted({address.lower() for address in contract_addresses})
    key = f"{user_address.lower()}:{_keccak_hex(','.join(addresses))}"
    if public_key is not None:
        key = f"{key}:{_keccak_hex(public_key)}"
    return key


@dataclass
class DecryptionSignature:
    """Signed user-decryption authorization plus its key pair."""
    private_key: str
    public_key: str
    signature: str
    contract_addresses: List[str]
    user_address: str
    start_timestamp: int
    duration_days: int
    eip712: Dict[str, Any] = field(default_factory=dict)

    @property
    def expires_at(self) -> int:
        return self.start_timestamp + self.duration_days * SECONDS_PER_DAY

    def is_valid(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return now < self.expires_at

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, text: str) -> DecryptionSignature:
        return cls(**json.loads(text))

    # -------------------------------------------------------------------------
    # Load or sign
    # -------------------------------------------------------------------------

    @classmethod
    async def new(
        cls,
        instance: Any,
        contract_addresses: Sequence[str],
        signer: DecryptionSigner,
        key_pair: Optional[Mapping[str, str]] = None,
        duration_days: int = DEFAULT_DURATION_DAYS,
        now: Optional[float] = None,
    ) -> Optional[DecryptionSignature]:
        """Solicit a fresh signature; None when the signer fails."""
        try:
            user_address = await signer.get_address()
            if key_pair is None:
                key_pair = await maybe_await(instance.generate_keypair())
            public_key = key_pair["public_key"]
            private_key = key_pair["private_key"]

            start_timestamp = int(time.time() if now is None else now)
            eip712 = await maybe_await(instance.create_eip712(
                public_key, list(contract_addresses), start_timestamp, duration_days
            ))
            signature = await signer.sign_typed_data(eip712)
        except Exception as e:
            logger.error(f"Failed to sign decryption authorization: {e}")
            return None

        return cls(
            private_key=private_key,
            public_key=public_key,
            signature=signature,
            contract_addresses=list(contract_addresses),
            user_address=user_address,
            start_timestamp=start_timestamp,
            duration_days=duration_days,
            eip712=dict(eip712),
        )

    @classmethod
    async def load(
        cls,
        storage: GenericStringStorage,
        key: str,
        now: Optional[float] = None,
    ) -> Optional[DecryptionSignature]:
        """Cached signature under ``key`` if present and still valid."""
        raw = await storage.get_item(key)
        if raw is None:
            return None

        try:
            cached = cls.from_json(raw)
        except (ValueError, TypeError) as e:
            logger.warning(f"Discarding unreadable decryption signature {key}: {e}")
            await storage.remove_item(key)
            return None

        if not cached.is_valid(now):
            await storage.remove_item(key)
            return None
        return cached

    @classmethod
    async def load_or_sign(
        cls,
        instance: Any,
        contract_addresses: Sequence[str],
        signer: DecryptionSigner,
        storage: GenericStringStorage,
        key_pair: Optional[Mapping[str, str]] = None,
        duration_days: int = DEFAULT_DURATION_DAYS,
        now: Optional[float] = None,
    ) -> Optional[DecryptionSignature]:
        """
        Reuse a valid cached signature or sign and cache a fresh one.

        Args:
            instance: Crypto instance (generate_keypair, create_eip712)
            contract_addresses: Address set the authorization is scoped to
            signer: Signer identity
            storage: Signature storage
            key_pair: Caller key pair {"public_key", "private_key"}
            duration_days: Validity window of fresh signatures
            now: Clock override (seconds)

        Returns:
            DecryptionSignature, or None if signing failed
        """
        try:
            user_address = await signer.get_address()
        except Exception as e:
            logger.error(f"Failed to read signer address: {e}")
            return None

        public_key = key_pair["public_key"] if key_pair is not None else None
        key = signature_storage_key(user_address, contract_addresses, public_key)

        cached = await cls.load(storage, key, now)
        if cached is not None:
            return cached

        fresh = await cls.new(
            instance, contract_addresses, signer,
            key_pair=key_pair, duration_days=duration_days, now=now,
        )
        if fresh is None:
            return None

        await storage.set_item(key, fresh.to_json())
        return fresh
