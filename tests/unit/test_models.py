"""Unit tests for the naming schema and record models."""

import pytest
from pydantic import ValidationError

from adtax.strategies.naming_engine import (
    CaseTransform,
    GeneratedRecord,
    Schema,
    VariableDefinition,
    VariableKind,
)


# =============================================================================
# Variable Definition Tests
# =============================================================================


class TestVariableDefinition:
    """Test suite for VariableDefinition."""

    def test_legacy_keys_are_accepted(self):
        """Test that records written with the old key names still load."""
        variable = VariableDefinition.model_validate(
            {
                "id": "2",
                "label": "Persona",
                "type": "dropdown",
                "values": ["Creator", "{free_input}"],
                "allowFreeInput": True,
            }
        )

        assert variable.kind is VariableKind.SINGLE_SELECT
        assert variable.options == ["Creator"]
        assert variable.allow_free_entry is True

    @pytest.mark.parametrize(
        "legacy,kind",
        [
            ("dropdown", VariableKind.SINGLE_SELECT),
            ("multiselect", VariableKind.MULTI_SELECT),
            ("input", VariableKind.FREE_TEXT),
        ],
    )
    def test_legacy_kinds_map_to_current_names(self, legacy, kind):
        variable = VariableDefinition.model_validate({"id": "x", "type": legacy})
        assert variable.kind is kind

    def test_sentinel_and_blank_options_are_stripped(self):
        variable = VariableDefinition(id="x", options=[" Hero ", "", "{free_input}", "Sage"])
        assert variable.options == ["Hero", "Sage"]

    def test_free_text_has_no_options(self):
        variable = VariableDefinition(id="x", kind=VariableKind.FREE_TEXT, options=["A"])
        assert variable.options == []

    def test_free_entry_only_on_single_select(self):
        variable = VariableDefinition(id="x", kind=VariableKind.MULTI_SELECT, allow_free_entry=True)
        assert variable.allow_free_entry is False

    def test_free_slot(self):
        assert VariableDefinition(id="persona").free_slot == "persona_free"

    def test_serializes_with_camel_case_keys(self):
        variable = VariableDefinition(
            id="1",
            label="Size",
            options=["1080x1080"],
            allow_free_entry=True,
            option_descriptions={"1080x1080": "Square"},
        )

        dumped = variable.model_dump(mode="json", by_alias=True)

        assert dumped["kind"] == "single-select"
        assert dumped["allowFreeEntry"] is True
        assert dumped["optionDescriptions"] == {"1080x1080": "Square"}


# =============================================================================
# Schema Tests
# =============================================================================


class TestSchema:
    """Test suite for Schema validation."""

    def test_defaults(self):
        schema = Schema()
        assert schema.separator == "_"
        assert schema.case_transform is CaseTransform.LOWERCASE
        assert schema.locked is False

    def test_round_trips_through_persisted_shape(self, schema):
        dumped = schema.model_dump(mode="json", by_alias=True)

        assert set(dumped) == {"variables", "separator", "caseTransform", "locked"}
        assert Schema.model_validate(dumped) == schema

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate variable id"):
            Schema(variables=[VariableDefinition(id="1"), VariableDefinition(id="1")])

    def test_options_colliding_after_folding_rejected(self):
        with pytest.raises(ValidationError, match="collide"):
            Schema(variables=[VariableDefinition(id="1", options=["Learn More", "learn_more"])])

    def test_same_option_under_different_separator_is_allowed(self):
        schema = Schema(
            variables=[VariableDefinition(id="1", options=["Learn More", "learn_more"])],
            separator="-",
        )
        assert schema.variables[0].options == ["Learn More", "learn_more"]

    @pytest.mark.parametrize("separator", ["", "__"])
    def test_separator_must_be_one_character(self, separator):
        with pytest.raises(ValidationError):
            Schema(separator=separator)

    def test_unknown_case_transform_rejected(self):
        with pytest.raises(ValidationError):
            Schema.model_validate({"caseTransform": "titlecase"})

    def test_get_variable(self, schema):
        assert schema.get_variable("persona").label == "Persona"
        assert schema.get_variable("missing") is None


class TestCaseTransform:
    """Test suite for CaseTransform."""

    def test_apply(self):
        assert CaseTransform.UPPERCASE.apply("Hero_Sage") == "HERO_SAGE"
        assert CaseTransform.LOWERCASE.apply("Hero_Sage") == "hero_sage"
        assert CaseTransform.NONE.apply("Hero_Sage") == "Hero_Sage"


# =============================================================================
# Generated Record Tests
# =============================================================================


class TestGeneratedRecord:
    """Test suite for GeneratedRecord."""

    def test_metadata_is_coerced_to_strings(self):
        record = GeneratedRecord.model_validate(
            {
                "fileName": "a_b",
                "metadata": {"archetype": ["Hero", "Sage"], "count": 3, "gone": None},
                "timestamp": 1700000000000,
            }
        )

        assert record.metadata == {"archetype": "Hero,Sage", "count": "3"}

    def test_null_metadata_becomes_empty(self):
        record = GeneratedRecord.model_validate({"fileName": "a", "metadata": None, "timestamp": 1})
        assert record.metadata == {}

    def test_float_timestamp_is_truncated(self):
        record = GeneratedRecord(file_name="a", timestamp=1700000000000.7)
        assert record.timestamp == 1700000000000

    def test_empty_file_name_rejected(self):
        with pytest.raises(ValidationError):
            GeneratedRecord(file_name="", timestamp=1)

    def test_serializes_with_file_name_key(self):
        record = GeneratedRecord(file_name="a_b", metadata={"1": "a"}, timestamp=5)
        assert record.model_dump(by_alias=True) == {
            "fileName": "a_b",
            "metadata": {"1": "a"},
            "timestamp": 5,
        }
