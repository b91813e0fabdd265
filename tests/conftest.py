"""Shared pytest fixtures: naming schemas used across unit and API tests."""

import pytest

from adtax.strategies.naming_engine import Schema


@pytest.fixture
def schema_payload() -> dict:
    """Wire-form schema with one field of every kind."""
    return {
        "variables": [
            {"id": "size", "label": "Size", "kind": "single-select", "options": ["1080x1080", "1920x1080"]},
            {
                "id": "persona",
                "label": "Persona",
                "kind": "single-select",
                "options": ["Creator", "Small Business"],
                "allowFreeEntry": True,
            },
            {"id": "archetype", "label": "Archetype", "kind": "multi-select", "options": ["Hero", "Sage", "Outlaw"]},
            {"id": "desc", "label": "Description", "kind": "free-text"},
        ],
        "separator": "_",
        "caseTransform": "lowercase",
        "locked": False,
    }


@pytest.fixture
def schema(schema_payload) -> Schema:
    """Validated schema built from ``schema_payload``."""
    return Schema.model_validate(schema_payload)


@pytest.fixture
def two_field_schema() -> Schema:
    """Size and persona single-selects."""
    return Schema.model_validate(
        {
            "variables": [
                {"id": "1", "label": "Size", "kind": "single-select", "options": ["1080x1080", "1920x1080"]},
                {"id": "2", "label": "Persona", "kind": "single-select", "options": ["Creator", "Business"]},
            ],
            "separator": "_",
            "caseTransform": "lowercase",
        }
    )
