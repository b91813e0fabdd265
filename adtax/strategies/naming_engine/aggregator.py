"""Usage statistics over generated-name history.

Folds history records into per-variable option counts. Records written
by older versions may carry only the file name, so any record with
incomplete metadata is re-parsed and the parsed values fill the gaps.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from adtax.interfaces.naming import BaseUsageAggregator
from adtax.strategies.naming_engine.matcher import Matched, match_option
from adtax.strategies.naming_engine.models import (
    FREE_INPUT_SENTINEL,
    FREE_SLOT_SUFFIX,
    GeneratedRecord,
    Schema,
    VariableDefinition,
    VariableKind,
)
from adtax.strategies.naming_engine.parser import parse

logger = logging.getLogger(__name__)


@dataclass
class VariableUsageStats:
    """Usage counts for one schema variable.

    ``option_counts`` keeps first-encountered insertion order, which is
    the tie-break for most- and least-used queries.
    """

    variable: VariableDefinition
    option_counts: dict[str, int] = field(default_factory=dict)
    total_usage: int = 0
    custom_values: set[str] = field(default_factory=set)

    def record(self, value: str, *, custom: bool) -> None:
        self.option_counts[value] = self.option_counts.get(value, 0) + 1
        if custom:
            self.custom_values.add(value)
        self.total_usage += 1

    def most_used(self) -> tuple[str, int] | None:
        """Highest-count value; the earliest inserted wins ties."""
        if not self.option_counts:
            return None
        return max(self.option_counts.items(), key=lambda item: item[1])

    def least_used(self) -> tuple[str, int] | None:
        """Lowest-count value; the earliest inserted wins ties."""
        if not self.option_counts:
            return None
        return min(self.option_counts.items(), key=lambda item: item[1])

    def max_count(self) -> int:
        return max(self.option_counts.values(), default=0)

    def share(self, value: str) -> float:
        """Percentage of total usage taken by *value*, one decimal place."""
        if self.total_usage == 0:
            return 0.0
        percent = Decimal(self.option_counts.get(value, 0) * 100) / Decimal(self.total_usage)
        return float(percent.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    def ordered_custom_values(self) -> list[str]:
        return [value for value in self.option_counts if value in self.custom_values]


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


def _resolve(metadata: dict[str, str], variable_id: str) -> str | None:
    """Countable value for *variable_id*, or None.

    A stored sentinel resolves only through its ``{id}_free`` slot.
    """
    value = metadata.get(variable_id)
    if value == FREE_INPUT_SENTINEL:
        value = metadata.get(f"{variable_id}{FREE_SLOT_SUFFIX}")
    if not _present(value) or value == FREE_INPUT_SENTINEL:
        return None
    return value


def effective_metadata(record: GeneratedRecord, schema: Schema) -> dict[str, str]:
    """Metadata to count for *record*.

    Stored metadata is used as-is when it has a non-empty value for every
    variable. Otherwise the file name is parsed and stored values win
    wherever they are present. A stored sentinel counts as present.
    """
    stored = record.metadata
    if schema.variables and all(_present(stored.get(v.id)) for v in schema.variables):
        return stored

    merged = parse(record.file_name, schema)
    merged.update({key: value for key, value in stored.items() if _present(value)})
    return merged


def _count_value(stats: VariableUsageStats, value: str, schema: Schema) -> None:
    variable = stats.variable
    if variable.kind is VariableKind.FREE_TEXT:
        stats.record(value, custom=True)
        return

    result = match_option(value, variable.options, schema.case_transform, schema.separator)
    if isinstance(result, Matched):
        stats.record(result.option, custom=False)
    else:
        stats.record(value, custom=True)


def aggregate_usage(
    schema: Schema,
    records: Iterable[GeneratedRecord],
) -> list[VariableUsageStats]:
    """Compute per-variable usage statistics.

    Args:
        schema: The current variable schema.
        records: History records in stored order.

    Returns:
        Stats for every variable with at least one use, sorted by total
        usage descending (schema order among equals).
    """
    stats_by_id = {v.id: VariableUsageStats(variable=v) for v in schema.variables}
    record_count = 0

    for record in records:
        record_count += 1
        metadata = effective_metadata(record, schema)

        for variable in schema.variables:
            value = _resolve(metadata, variable.id)
            if value is None:
                continue

            stats = stats_by_id[variable.id]
            if variable.kind is VariableKind.MULTI_SELECT:
                for piece in (p.strip() for p in value.split(",")):
                    if piece:
                        _count_value(stats, piece, schema)
            else:
                _count_value(stats, value, schema)

    used = [stats for stats in stats_by_id.values() if stats.total_usage > 0]
    used.sort(key=lambda stats: stats.total_usage, reverse=True)

    logger.debug(f"Aggregated {record_count} record(s) into {len(used)} variable stat(s)")
    return used


class UsageAggregator(BaseUsageAggregator):
    """Aggregator strategy over in-memory history."""

    def aggregate(
        self,
        schema: Schema,
        records: Iterable[GeneratedRecord],
    ) -> list[VariableUsageStats]:
        return aggregate_usage(schema, records)
