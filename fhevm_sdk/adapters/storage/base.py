# fhevm_sdk/adapters/storage/base.py
"""
FHEVM SDK Storage: Public-Key Cache Interface

Maps an ACL contract address to cached public key material and public
parameters. There is no eviction policy: key material for a given ACL
contract is immutable for the contract's lifetime, so entries are only
removed through an explicit ``delete`` (e.g. after a redeployment).

Wire format (JSON, bytes as 0x-hex):
    {
        "publicKey": {"id": "...", "data": "0x..."},
        "publicParams": {"2048": {"publicParamsId": "...", "publicParams": "0x..."}}
    }

Keys are lowercase 0x-prefixed 20-byte addresses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from eth_utils import decode_hex, encode_hex


def normalize_acl_address(address: str) -> str:
    """Lowercase cache key for an ACL contract address."""
    return address.lower()


def _encode_bytes(value: Optional[bytes]) -> Optional[str]:
    return encode_hex(value) if value is not None else None


def _decode_bytes(value: Any) -> Optional[bytes]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return decode_hex(value)


# =============================================================================
# Record
# =============================================================================

@dataclass
class PublicKeyData:
    """Public key as returned by the backend."""
    id: Optional[str]
    data: Optional[bytes]


@dataclass
class PublicParamsEntry:
    """Public params for one size class."""
    public_params_id: str
    public_params: bytes


@dataclass
class PublicKeyRecord:
    """
    Cached key material for one ACL contract.

    A record is complete only when both ``public_key`` and
    ``public_params`` are present; a partial record still counts as a
    miss when deciding whether to refetch.
    """
    public_key: Optional[PublicKeyData] = None
    public_params: Optional[Dict[str, PublicParamsEntry]] = None

    @property
    def is_complete(self) -> bool:
        return self.public_key is not None and bool(self.public_params)

    def to_instance_hints(self) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Shapes handed to ``create_instance`` as creation hints."""
        public_key = None
        if self.public_key is not None:
            public_key = {"id": self.public_key.id, "data": self.public_key.data}

        public_params = None
        if self.public_params:
            public_params = {
                bits: {
                    "public_params_id": entry.public_params_id,
                    "public_params": entry.public_params,
                }
                for bits, entry in self.public_params.items()
            }
        return public_key, public_params

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-serializable wire shape."""
        data: Dict[str, Any] = {}
        if self.public_key is not None:
            data["publicKey"] = {
                "id": self.public_key.id,
                "data": _encode_bytes(self.public_key.data),
            }
        if self.public_params is not None:
            data["publicParams"] = {
                bits: {
                    "publicParamsId": entry.public_params_id,
                    "publicParams": _encode_bytes(entry.public_params),
                }
                for bits, entry in self.public_params.items()
            }
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> PublicKeyRecord:
        """Parse the wire shape."""
        public_key = None
        raw_key = data.get("publicKey")
        if raw_key is not None:
            public_key = PublicKeyData(
                id=raw_key.get("id"),
                data=_decode_bytes(raw_key.get("data")),
            )

        public_params = None
        raw_params = data.get("publicParams")
        if raw_params is not None:
            public_params = {
                str(bits): PublicParamsEntry(
                    public_params_id=entry["publicParamsId"],
                    public_params=_decode_bytes(entry["publicParams"]),
                )
                for bits, entry in raw_params.items()
            }

        return cls(public_key=public_key, public_params=public_params)


# =============================================================================
# Store interface
# =============================================================================

class PublicKeyStore(ABC):
    """
    Public-key cache keyed by ACL contract address.

    Implementations must tolerate concurrent callers targeting different
    addresses. Concurrent writers to the same address are not coordinated;
    the last write wins.
    """

    @abstractmethod
    async def get(self, acl_address: str) -> Optional[PublicKeyRecord]:
        """Return the cached record, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, acl_address: str, record: PublicKeyRecord) -> None:
        """Store (overwrite) the record for an address."""
        pass

    @abstractmethod
    async def delete(self, acl_address: str) -> None:
        """Remove the record for an address; missing entries are ignored."""
        pass
