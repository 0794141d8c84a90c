# fhevm_sdk/adapters/storage/memory.py
"""Volatile in-memory public-key cache."""

from __future__ import annotations

from typing import Dict, Optional

from .base import PublicKeyRecord, PublicKeyStore, normalize_acl_address


class MemoryPublicKeyStore(PublicKeyStore):
    """Dict-backed store; contents are lost with the process."""

    def __init__(self):
        self._records: Dict[str, PublicKeyRecord] = {}

    async def get(self, acl_address: str) -> Optional[PublicKeyRecord]:
        return self._records.get(normalize_acl_address(acl_address))

    async def set(self, acl_address: str, record: PublicKeyRecord) -> None:
        self._records[normalize_acl_address(acl_address)] = record

    async def delete(self, acl_address: str) -> None:
        self._records.pop(normalize_acl_address(acl_address), None)

    def __len__(self) -> int:
        return len(self._records)
