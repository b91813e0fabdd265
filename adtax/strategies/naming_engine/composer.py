"""File name composition.

Renders an ordered, separator-joined, case-transformed file name from a
schema and the selected values, and expands multi-select selections
into one record per selected value.
"""

import logging
import time

from adtax.interfaces.naming import BaseNameComposer
from adtax.strategies.naming_engine.models import (
    GeneratedRecord,
    Schema,
    VariableKind,
    join_whitespace,
)
from adtax.strategies.naming_engine.selections import (
    FreeEntry,
    MultiSelected,
    Selected,
    Selection,
    SelectionValues,
    raw_value,
    resolve_selections,
)

logger = logging.getLogger(__name__)


def _segment_source(selection: Selection) -> str:
    match selection:
        case MultiSelected(values=values):
            # One representative value per call; fan-out is the caller's job
            return values[0] if values else ""
        case Selected(value=value):
            return value
        case FreeEntry(text=text):
            return text
        case _:
            return ""


def compose_selections(schema: Schema, selections: dict[str, Selection]) -> str:
    """Compose a file name from already-resolved selections.

    Args:
        schema: The variable schema. Field order sets segment order.
        selections: Resolved selection per field id. Missing ids count as unset.

    Returns:
        The file name, or an empty string when no field contributed a segment.
    """
    segments: list[str] = []

    for variable in schema.variables:
        source = _segment_source(selections.get(variable.id))
        segment = join_whitespace(source.strip(), schema.separator)
        if segment:
            segments.append(segment)

    if not segments:
        return ""

    return schema.separator.join(schema.case_transform.apply(segment) for segment in segments)


def compose(schema: Schema, values: SelectionValues | None) -> str:
    """Compose a file name from wire-form *values*.

    Never raises for malformed input; fields that cannot be read are
    simply omitted.
    """
    return compose_selections(schema, resolve_selections(schema, values))


def build_metadata(schema: Schema, selections: dict[str, Selection]) -> dict[str, str]:
    """Raw contributing value per field, as stored alongside a file name."""
    return {variable.id: raw_value(selections.get(variable.id)) for variable in schema.variables}


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_records(
    schema: Schema,
    values: SelectionValues | None,
    timestamp: int | None = None,
) -> list[GeneratedRecord]:
    """Generate one batch of records from a single user request.

    When the schema has a multi-select field, the first such field is
    expanded: one file name per selected value, all other fields held
    fixed. Every record of the batch shares *timestamp*.

    Args:
        schema: The variable schema.
        values: Wire-form selection values.
        timestamp: Batch timestamp in epoch milliseconds. Defaults to now.

    Returns:
        The generated records in selection order. An empty list means
        nothing could be generated.
    """
    timestamp = now_ms() if timestamp is None else timestamp
    selections = resolve_selections(schema, values)

    variants: list[dict[str, Selection]] = [selections]
    fan_out = next((v for v in schema.variables if v.kind is VariableKind.MULTI_SELECT), None)
    if fan_out is not None:
        chosen = selections.get(fan_out.id)
        if isinstance(chosen, MultiSelected) and len(chosen.values) > 1:
            variants = [
                {**selections, fan_out.id: MultiSelected((value,))} for value in chosen.values
            ]

    records: list[GeneratedRecord] = []
    for variant in variants:
        file_name = compose_selections(schema, variant)
        if not file_name:
            continue
        records.append(
            GeneratedRecord(
                file_name=file_name,
                metadata=build_metadata(schema, variant),
                timestamp=timestamp,
            )
        )

    logger.debug(f"Generated {len(records)} record(s) from {len(variants)} variant(s)")
    return records


class NameComposer(BaseNameComposer):
    """Composer strategy bound to the module-level composition functions."""

    def compose(self, schema: Schema, values: SelectionValues | None) -> str:
        return compose(schema, values)

    def generate(
        self,
        schema: Schema,
        values: SelectionValues | None,
        timestamp: int | None = None,
    ) -> list[GeneratedRecord]:
        return generate_records(schema, values, timestamp)
