"""Example configuration used to seed a new owner."""

import logging

from adtax.core.storage_keys import config_key
from adtax.interfaces.store import BaseKeyValueStore
from adtax.strategies.naming_engine import Schema

logger = logging.getLogger(__name__)

EXAMPLE_CONFIG = {
    "variables": [
        {
            "id": "1",
            "label": "Size",
            "kind": "single-select",
            "options": ["1080x1080", "1080x1350", "1080x1920", "1920x1080", "1200x628"],
            "description": "The dimensions of the ad creative",
            "optionDescriptions": {
                "1080x1080": "Square format, ideal for Instagram feed",
                "1080x1350": "Portrait format, good for Instagram Stories",
                "1080x1920": "Vertical format, perfect for Reels and Stories",
                "1920x1080": "Landscape format, standard for video ads",
                "1200x628": "Facebook link preview format",
            },
        },
        {
            "id": "2",
            "label": "Persona",
            "kind": "single-select",
            "options": ["Creator", "Business", "Agency", "Generic"],
            "allowFreeEntry": True,
            "description": "The target audience persona for this ad",
            "optionDescriptions": {
                "Creator": "Content creators and influencers",
                "Business": "Business owners and entrepreneurs",
                "Agency": "Marketing agencies and professionals",
                "Generic": "General audience",
            },
        },
        {
            "id": "3",
            "label": "Funnel Stage",
            "kind": "single-select",
            "options": ["Cold", "Warm", "Hot"],
            "description": "The stage of the marketing funnel",
            "optionDescriptions": {
                "Cold": "Top of funnel - awareness stage",
                "Warm": "Middle of funnel - consideration stage",
                "Hot": "Bottom of funnel - conversion stage",
            },
        },
        {
            "id": "4",
            "label": "Archetype",
            "kind": "multi-select",
            "options": [
                "Hero", "Sage", "Outlaw", "Explorer", "Creator", "Ruler",
                "Magician", "Innocent", "Caregiver", "Jester", "Lover", "Orphan",
            ],
            "description": "Brand archetype(s) represented in the ad",
        },
        {
            "id": "5",
            "label": "Hook",
            "kind": "single-select",
            "options": ["Problem", "Solution", "Story", "Question", "Statistic", "Controversy"],
            "description": "The hook type used to capture attention",
        },
        {
            "id": "6",
            "label": "CTA",
            "kind": "single-select",
            "options": ["Learn More", "Sign Up", "Buy Now", "Download", "Get Started", "Watch Now"],
            "description": "The call-to-action in the ad",
        },
        {
            "id": "7",
            "label": "Style",
            "kind": "single-select",
            "options": ["Minimalist", "Bold", "Playful", "Professional", "Vintage", "Modern"],
            "description": "The visual style of the ad creative",
        },
        {
            "id": "8",
            "label": "Ad Description",
            "kind": "free-text",
            "options": [],
            "description": "Brief description of the ad content",
        },
    ],
    "caseTransform": "lowercase",
    "separator": "_",
    "locked": False,
}


def example_schema() -> Schema:
    """A fresh copy of the example advertising schema."""
    return Schema.model_validate(EXAMPLE_CONFIG)


async def seed_example_config(store: BaseKeyValueStore, owner: str) -> tuple[Schema, bool]:
    """Store the example schema for *owner* unless one already exists.

    Returns:
        The owner's schema and whether it was created by this call.
    """
    existing = await store.get(config_key(owner))
    if existing is not None:
        logger.info(f"Configuration already exists for {owner}, skipping seed")
        return Schema.model_validate(existing), False

    schema = example_schema()
    await store.set(config_key(owner), schema.model_dump(mode="json", by_alias=True))
    logger.info(f"Seeded example configuration for {owner}")
    return schema, True
