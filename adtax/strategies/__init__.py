"""Concrete strategy implementations."""

from adtax.strategies.naming_engine import (
    NameComposer,
    NameParser,
    UsageAggregator,
)
from adtax.strategies.stores import (
    InMemoryKeyValueStore,
    SQLKeyValueStore,
)

__all__ = [
    "NameComposer",
    "NameParser",
    "UsageAggregator",
    "InMemoryKeyValueStore",
    "SQLKeyValueStore",
]
