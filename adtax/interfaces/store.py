"""Key-value store interface.

Schemas, generation history and API key records are persisted as JSON
values under string keys. The store offers no transactions: callers own
any read-modify-write sequencing.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseKeyValueStore(ABC):
    """Abstract base class for key-value persistence strategies.

    Example:
        ```python
        store = factory.get_store()
        await store.set("config:session_1", schema.model_dump(mode="json", by_alias=True))
        raw = await store.get("config:session_1")
        ```
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the JSON value stored under *key*, or None if absent or expired.

        Raises:
            StoreError: If the backend fails.
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        """Store a JSON-serializable *value* under *key*.

        Args:
            key: The key to write.
            value: JSON-serializable value.
            ttl_seconds: Optional lifetime after which the key reads as missing.

        Raises:
            StoreError: If the backend fails.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*. Deleting a missing key is not an error.

        Raises:
            StoreError: If the backend fails.
        """

    async def initialize(self) -> None:
        """Prepare the backend (create tables, open connections)."""

    async def close(self) -> None:
        """Release backend resources."""


class StoreError(Exception):
    """Exception raised when the key-value backend fails."""

    pass
