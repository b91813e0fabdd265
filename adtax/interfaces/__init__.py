"""Abstract base classes for naming and storage strategies."""

from adtax.interfaces.naming import BaseNameComposer, BaseNameParser, BaseUsageAggregator
from adtax.interfaces.store import BaseKeyValueStore, StoreError

__all__ = [
    "BaseNameComposer",
    "BaseNameParser",
    "BaseUsageAggregator",
    "BaseKeyValueStore",
    "StoreError",
]
