"""In-process key-value store for development and tests."""

import copy
import time
from typing import Any

from adtax.interfaces.store import BaseKeyValueStore


class InMemoryKeyValueStore(BaseKeyValueStore):
    """Dict-backed store with the same expiry semantics as the SQL store.

    Values are deep-copied on the way in and out so callers cannot mutate
    stored state by accident.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[Any, float | None]] = {}

    async def get(self, key: str) -> Any | None:
        item = self._data.get(key)
        if item is None:
            return None

        value, expires_at = item
        if expires_at is not None and expires_at <= time.time():
            del self._data[key]
            return None

        return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        expires_at = time.time() + ttl_seconds if ttl_seconds else None
        self._data[key] = (copy.deepcopy(value), expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        self._data.clear()
