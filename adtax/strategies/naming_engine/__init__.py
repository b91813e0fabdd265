"""Naming engine strategies.

Implements file name composition, positional parsing with option
matching, and usage aggregation over generated-name history.
"""

from adtax.strategies.naming_engine.aggregator import (
    UsageAggregator,
    VariableUsageStats,
    aggregate_usage,
)
from adtax.strategies.naming_engine.composer import NameComposer, compose, generate_records
from adtax.strategies.naming_engine.history import HistoryBatch, group_batches, migrate_history
from adtax.strategies.naming_engine.matcher import Matched, MatchResult, Unmatched, match_option
from adtax.strategies.naming_engine.models import (
    FREE_INPUT_SENTINEL,
    CaseTransform,
    GeneratedRecord,
    Schema,
    VariableDefinition,
    VariableKind,
)
from adtax.strategies.naming_engine.parser import NameParser, ParsedName, parse, parse_name

__all__ = [
    "FREE_INPUT_SENTINEL",
    "CaseTransform",
    "GeneratedRecord",
    "HistoryBatch",
    "Matched",
    "MatchResult",
    "NameComposer",
    "NameParser",
    "ParsedName",
    "Schema",
    "Unmatched",
    "UsageAggregator",
    "VariableDefinition",
    "VariableKind",
    "VariableUsageStats",
    "aggregate_usage",
    "compose",
    "generate_records",
    "group_batches",
    "match_option",
    "migrate_history",
    "parse",
    "parse_name",
]
