# fhevm_sdk/adapters/storage/__init__.py
"""
FHEVM SDK Storage Layer

Public-key cache backends (all share the PublicKeyStore contract):
    MemoryPublicKeyStore  - volatile dict
    FilePublicKeyStore    - one JSON file per ACL address
    SqlitePublicKeyStore  - embedded database

Signature storage:
    GenericStringStorage  - string key-value interface
    InMemoryStringStorage - dict-backed implementation
"""

from .base import (
    PublicKeyStore,
    PublicKeyRecord,
    PublicKeyData,
    PublicParamsEntry,
    normalize_acl_address,
)
from .memory import MemoryPublicKeyStore
from .filesystem import FilePublicKeyStore
from .sqlite import SqlitePublicKeyStore
from .strings import GenericStringStorage, InMemoryStringStorage

__all__ = [
    "PublicKeyStore",
    "PublicKeyRecord",
    "PublicKeyData",
    "PublicParamsEntry",
    "normalize_acl_address",
    "MemoryPublicKeyStore",
    "FilePublicKeyStore",
    "SqlitePublicKeyStore",
    "GenericStringStorage",
    "InMemoryStringStorage",
]
