"""Concrete key-value store implementations."""

from adtax.strategies.stores.memory import InMemoryKeyValueStore
from adtax.strategies.stores.sql import SQLKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "SQLKeyValueStore",
]
