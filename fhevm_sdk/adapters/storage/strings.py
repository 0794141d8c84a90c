# fhevm_sdk/adapters/storage/strings.py
"""String key-value storage used to persist decryption signatures."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional


class GenericStringStorage(ABC):
    """String-keyed storage shared across decrypt calls and clients."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        pass


class InMemoryStringStorage(GenericStringStorage):
    """Dict-backed storage."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __len__(self) -> int:
        return len(self._items)
