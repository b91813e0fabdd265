"""Unit tests for usage aggregation."""

import pytest

from adtax.strategies.naming_engine import (
    GeneratedRecord,
    Schema,
    UsageAggregator,
    aggregate_usage,
    generate_records,
)
from adtax.strategies.naming_engine.aggregator import VariableUsageStats, effective_metadata


def _record(file_name: str, metadata: dict | None = None, timestamp: int = 1) -> GeneratedRecord:
    return GeneratedRecord(file_name=file_name, metadata=metadata or {}, timestamp=timestamp)


def _by_id(stats: list[VariableUsageStats]) -> dict[str, VariableUsageStats]:
    return {entry.variable.id: entry for entry in stats}


@pytest.fixture
def full_values():
    return {"size": "1080x1080", "persona": "Creator", "archetype": ["Hero"], "desc": "Launch"}


# =============================================================================
# Effective Metadata Tests
# =============================================================================


class TestEffectiveMetadata:
    """Test suite for choosing between stored and parsed metadata."""

    def test_complete_metadata_used_as_is(self, schema, full_values):
        record = generate_records(schema, full_values, timestamp=1)[0]
        assert effective_metadata(record, schema) is record.metadata

    def test_legacy_record_is_parsed(self, schema):
        record = _record("1080x1080_creator_hero_launch")

        assert effective_metadata(record, schema) == {
            "size": "1080x1080",
            "persona": "Creator",
            "archetype": "Hero",
            "desc": "launch",
        }

    def test_stored_values_win_over_parsed(self, schema):
        record = _record("1080x1080_creator_hero_launch", {"persona": "Small Business"})
        assert effective_metadata(record, schema)["persona"] == "Small Business"

    def test_stored_sentinel_is_kept_over_parsed(self, schema):
        record = _record("1080x1080_creator_hero_launch", {"persona": "{free_input}"})
        assert effective_metadata(record, schema)["persona"] == "{free_input}"


# =============================================================================
# Aggregation Tests
# =============================================================================


class TestAggregateUsage:
    """Test suite for aggregate_usage()."""

    def test_counts_options(self, schema, full_values):
        records = generate_records(schema, {**full_values, "archetype": ["Hero", "Sage"]}, timestamp=1)

        stats = _by_id(aggregate_usage(schema, records))

        assert stats["size"].option_counts == {"1080x1080": 2}
        assert stats["archetype"].option_counts == {"Hero": 1, "Sage": 1}
        assert stats["archetype"].total_usage == 2
        assert stats["desc"].custom_values == {"Launch"}

    def test_unmatched_value_is_custom(self):
        """Test that a value outside the options is counted under the custom set."""
        schema = Schema.model_validate(
            {"variables": [{"id": "1", "kind": "single-select", "options": ["Alpha", "Beta"]}]}
        )

        stats = aggregate_usage(schema, [_record("bespoke_value", {"1": "bespoke_value"})])

        assert stats[0].option_counts == {"bespoke_value": 1}
        assert stats[0].custom_values == {"bespoke_value"}

    def test_stored_value_is_matched_to_canonical_option(self, schema, full_values):
        record = _record("x", {**full_values, "persona": "creator", "archetype": "hero"})

        stats = _by_id(aggregate_usage(schema, [record]))

        assert stats["persona"].option_counts == {"Creator": 1}
        assert stats["persona"].custom_values == set()
        assert stats["archetype"].option_counts == {"Hero": 1}

    def test_free_entry_is_custom(self, schema, full_values):
        values = {**full_values, "persona": "{free_input}", "persona_free": "Yoga Studio"}

        stats = _by_id(aggregate_usage(schema, generate_records(schema, values, timestamp=1)))

        assert stats["persona"].custom_values == {"Yoga Studio"}

    def test_unresolved_sentinel_is_not_counted(self, schema):
        record = _record(
            "1080x1080_my_brand_hero_x",
            {"size": "1080x1080", "persona": "{free_input}", "archetype": "Hero", "desc": "x"},
        )

        stats = _by_id(aggregate_usage(schema, [record]))

        assert "persona" not in stats
        assert stats["size"].option_counts == {"1080x1080": 1}
        assert stats["archetype"].option_counts == {"Hero": 1}

    def test_sentinel_resolved_from_free_slot(self, schema, full_values):
        record = _record("x", {**full_values, "persona": "{free_input}", "persona_free": "Bakery"})

        stats = _by_id(aggregate_usage(schema, [record]))

        assert stats["persona"].option_counts == {"Bakery": 1}
        assert stats["persona"].custom_values == {"Bakery"}

    def test_free_text_always_custom(self, schema, full_values):
        record = _record("x", {**full_values, "desc": "Hero"})
        stats = _by_id(aggregate_usage(schema, [record]))

        assert stats["desc"].custom_values == {"Hero"}

    def test_comma_joined_multi_select_pieces_counted_separately(self, schema, full_values):
        record = _record("x", {**full_values, "archetype": "Hero, Jester"})

        stats = _by_id(aggregate_usage(schema, [record]))

        assert stats["archetype"].option_counts == {"Hero": 1, "Jester": 1}
        assert stats["archetype"].custom_values == {"Jester"}
        assert stats["archetype"].total_usage == 2

    def test_unused_variables_omitted_and_sorted_by_usage(self, schema):
        records = [
            _record("a", {"size": "1080x1080", "archetype": "Hero,Sage"}),
            _record("b", {"size": "1920x1080", "archetype": "Outlaw,Hero,Sage"}),
        ]

        stats = aggregate_usage(schema, records)

        assert [entry.variable.id for entry in stats] == ["archetype", "size"]

    def test_equal_totals_keep_schema_order(self, schema, full_values):
        stats = aggregate_usage(schema, generate_records(schema, full_values, timestamp=1))
        assert [entry.variable.id for entry in stats] == ["size", "persona", "archetype", "desc"]

    def test_no_records(self, schema):
        assert aggregate_usage(schema, []) == []

    def test_aggregator_strategy(self, schema, full_values):
        records = generate_records(schema, full_values, timestamp=1)
        assert len(UsageAggregator().aggregate(schema, records)) == 4


# =============================================================================
# Derived Query Tests
# =============================================================================


class TestVariableUsageStats:
    """Test suite for most/least used and share queries."""

    @pytest.fixture
    def stats(self, schema):
        stats = VariableUsageStats(variable=schema.get_variable("persona"))
        for value in ["Creator", "Small Business", "Creator"]:
            stats.record(value, custom=False)
        return stats

    def test_most_and_least_used(self, stats):
        assert stats.most_used() == ("Creator", 2)
        assert stats.least_used() == ("Small Business", 1)
        assert stats.max_count() == 2

    def test_ties_go_to_first_encountered(self, schema):
        stats = VariableUsageStats(variable=schema.get_variable("persona"))
        stats.record("Small Business", custom=False)
        stats.record("Creator", custom=False)

        assert stats.most_used() == ("Small Business", 1)
        assert stats.least_used() == ("Small Business", 1)

    def test_share_is_percentage_to_one_decimal(self, stats):
        assert stats.share("Creator") == 66.7
        assert stats.share("Small Business") == 33.3
        assert stats.share("Unknown") == 0.0

    def test_share_rounds_half_up(self, schema):
        stats = VariableUsageStats(variable=schema.get_variable("size"))
        stats.record("1080x1080", custom=False)
        for _ in range(15):
            stats.record("1920x1080", custom=False)

        assert stats.share("1080x1080") == 6.3
        assert stats.share("1920x1080") == 93.8

    def test_empty_stats(self, schema):
        stats = VariableUsageStats(variable=schema.get_variable("size"))

        assert stats.most_used() is None
        assert stats.least_used() is None
        assert stats.share("1080x1080") == 0.0

    def test_ordered_custom_values(self, schema):
        stats = VariableUsageStats(variable=schema.get_variable("persona"))
        stats.record("Yoga Studio", custom=True)
        stats.record("Creator", custom=False)
        stats.record("Bakery", custom=True)

        assert stats.ordered_custom_values() == ["Yoga Studio", "Bakery"]
