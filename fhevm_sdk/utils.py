# fhevm_sdk/utils.py
"""Small helpers shared across the SDK."""

from __future__ import annotations

import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if the backend handed back an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def is_hex_address(value: Any) -> bool:
    """Loose address check: a 0x-prefixed string."""
    return isinstance(value, str) and value.startswith("0x")
