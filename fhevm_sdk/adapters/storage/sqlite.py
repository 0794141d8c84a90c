# fhevm_sdk/adapters/storage/sqlite.py
"""
FHEVM SDK Storage: Embedded Database Public-Key Cache

Two tables keyed by ACL address, one for the public key and one for the
public params. Only complete keys (id and data) are written, and only a
single params size class is kept: 2048 when present, otherwise the first
entry of the record.

Usage:
    store = SqlitePublicKeyStore("~/.cache/fhevm/keys.db")
    await store.set(acl, record)
    record = await store.get(acl)
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from ...constants import PUBLIC_PARAMS_BITS
from .base import (
    PublicKeyData,
    PublicKeyRecord,
    PublicKeyStore,
    PublicParamsEntry,
    normalize_acl_address,
)


PUBLIC_KEY_TABLE = "public_keys"
PARAMS_TABLE = "public_params"

_SCHEMA = (
    f"CREATE TABLE IF NOT EXISTS {PUBLIC_KEY_TABLE} ("
    " acl TEXT PRIMARY KEY, public_key_id TEXT NOT NULL, public_key BLOB NOT NULL)",
    f"CREATE TABLE IF NOT EXISTS {PARAMS_TABLE} ("
    " acl TEXT PRIMARY KEY, bits TEXT NOT NULL,"
    " public_params_id TEXT NOT NULL, public_params BLOB NOT NULL)",
)


def _pick_public_params(record: PublicKeyRecord) -> Optional[tuple]:
    if not record.public_params:
        return None
    bits = str(PUBLIC_PARAMS_BITS)
    if bits in record.public_params:
        return bits, record.public_params[bits]
    return next(iter(record.public_params.items()))


class SqlitePublicKeyStore(PublicKeyStore):
    """Persistent store backed by an embedded sqlite database."""

    def __init__(self, database: Union[str, Path] = ":memory:"):
        """
        Initialize store.

        Args:
            database: Database file path, or ":memory:" for a private database
        """
        database = str(database)
        if database != ":memory:":
            path = Path(database).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            database = str(path)
        self._conn = sqlite3.connect(database)
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def close(self) -> None:
        self._conn.close()

    async def get(self, acl_address: str) -> Optional[PublicKeyRecord]:
        acl = normalize_acl_address(acl_address)
        key_row = self._conn.execute(
            f"SELECT public_key_id, public_key FROM {PUBLIC_KEY_TABLE} WHERE acl = ?",
            (acl,),
        ).fetchone()
        params_row = self._conn.execute(
            f"SELECT bits, public_params_id, public_params FROM {PARAMS_TABLE} WHERE acl = ?",
            (acl,),
        ).fetchone()

        if key_row is None and params_row is None:
            return None

        record = PublicKeyRecord()
        if key_row is not None:
            record.public_key = PublicKeyData(id=key_row[0], data=bytes(key_row[1]))
        if params_row is not None:
            record.public_params = {
                params_row[0]: PublicParamsEntry(
                    public_params_id=params_row[1],
                    public_params=bytes(params_row[2]),
                )
            }
        return record

    async def set(self, acl_address: str, record: PublicKeyRecord) -> None:
        acl = normalize_acl_address(acl_address)
        params = _pick_public_params(record)
        key = record.public_key

        with self._conn:
            if key is not None and key.id and key.data:
                self._conn.execute(
                    f"INSERT OR REPLACE INTO {PUBLIC_KEY_TABLE} VALUES (?, ?, ?)",
                    (acl, key.id, key.data),
                )
            else:
                self._conn.execute(f"DELETE FROM {PUBLIC_KEY_TABLE} WHERE acl = ?", (acl,))

            if params is not None:
                bits, entry = params
                self._conn.execute(
                    f"INSERT OR REPLACE INTO {PARAMS_TABLE} VALUES (?, ?, ?, ?)",
                    (acl, bits, entry.public_params_id, entry.public_params),
                )
            else:
                self._conn.execute(f"DELETE FROM {PARAMS_TABLE} WHERE acl = ?", (acl,))

    async def delete(self, acl_address: str) -> None:
        acl = normalize_acl_address(acl_address)
        with self._conn:
            self._conn.execute(f"DELETE FROM {PUBLIC_KEY_TABLE} WHERE acl = ?", (acl,))
            self._conn.execute(f"DELETE FROM {PARAMS_TABLE} WHERE acl = ?", (acl,))
