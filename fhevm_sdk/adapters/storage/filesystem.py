# fhevm_sdk/adapters/storage/filesystem.py
"""
FHEVM SDK Storage: File-per-key Public-Key Cache

Layout:
    <directory>/<acl address>.json

A missing file reads as a miss and deleting a missing file is a no-op.
Every other OS error propagates to the caller.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from .base import PublicKeyRecord, PublicKeyStore, normalize_acl_address


class FilePublicKeyStore(PublicKeyStore):
    """Persistent store writing one JSON document per ACL address."""

    def __init__(self, directory: Union[str, Path]):
        """
        Initialize file store.

        Args:
            directory: Cache directory (created lazily on first write)
        """
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, acl_address: str) -> Path:
        return self._directory / f"{normalize_acl_address(acl_address)}.json"

    async def get(self, acl_address: str) -> Optional[PublicKeyRecord]:
        try:
            with open(self._path(acl_address), encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        return PublicKeyRecord.from_dict(data)

    async def set(self, acl_address: str, record: PublicKeyRecord) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        with open(self._path(acl_address), "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f)

    async def delete(self, acl_address: str) -> None:
        try:
            self._path(acl_address).unlink()
        except FileNotFoundError:
            pass
