"""Naming engine interfaces.

Defines abstract base classes for composing file names from a variable
schema, parsing them back, and aggregating usage over history.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from adtax.strategies.naming_engine.aggregator import VariableUsageStats
    from adtax.strategies.naming_engine.models import GeneratedRecord, Schema
    from adtax.strategies.naming_engine.parser import ParsedName


class BaseNameComposer(ABC):
    """Abstract base class for file name composition strategies.

    Implementations never raise for malformed selections: an empty
    string signals that nothing could be generated.
    """

    @abstractmethod
    def compose(self, schema: Schema, values: Mapping[str, Any] | None) -> str:
        """Render one file name from the selected values.

        Args:
            schema: The variable schema.
            values: Field id to selected value(s), plus ``{id}_free`` slots.

        Returns:
            The file name, or an empty string.
        """

    @abstractmethod
    def generate(
        self,
        schema: Schema,
        values: Mapping[str, Any] | None,
        timestamp: int | None = None,
    ) -> list[GeneratedRecord]:
        """Render a batch of records, expanding multi-select selections.

        Args:
            schema: The variable schema.
            values: Field id to selected value(s), plus ``{id}_free`` slots.
            timestamp: Shared batch timestamp in epoch milliseconds.

        Returns:
            The generated records; empty when nothing could be generated.
        """


class BaseNameParser(ABC):
    """Abstract base class for file name parsing strategies."""

    @abstractmethod
    def parse(self, file_name: str, schema: Schema) -> ParsedName:
        """Recover field values from an existing file name.

        Args:
            file_name: The file name to parse.
            schema: The schema to align segments against.

        Returns:
            A best-effort ParsedName; never raises for unmatched segments.
        """


class BaseUsageAggregator(ABC):
    """Abstract base class for usage aggregation strategies."""

    @abstractmethod
    def aggregate(
        self,
        schema: Schema,
        records: Iterable[GeneratedRecord],
    ) -> list[VariableUsageStats]:
        """Fold history records into per-variable usage statistics."""
