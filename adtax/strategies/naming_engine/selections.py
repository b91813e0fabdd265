"""Per-field selections.

The wire form of a generation request is a loose mapping of field id to
either a string or a list of strings, with the free-entry sentinel and
``{id}_free`` companion slots layered on top. This module resolves that
mapping, by consulting each field's declared kind, into explicit
selection variants the composer can consume without guessing.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeAlias

from adtax.strategies.naming_engine.models import (
    FREE_INPUT_SENTINEL,
    Schema,
    VariableDefinition,
    VariableKind,
)

RawValue: TypeAlias = str | list[str] | tuple[str, ...] | None
SelectionValues: TypeAlias = Mapping[str, RawValue]


@dataclass(frozen=True)
class Selected:
    """A single chosen value (single-select option or free-text input)."""

    value: str


@dataclass(frozen=True)
class FreeEntry:
    """A single-select field whose value was typed in instead of picked."""

    text: str


@dataclass(frozen=True)
class MultiSelected:
    """Ordered values of a multi-select field."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class Unset:
    """No value supplied for the field."""


UNSET = Unset()

Selection: TypeAlias = Selected | FreeEntry | MultiSelected | Unset


def _as_text(raw: RawValue) -> str:
    if isinstance(raw, str):
        return raw
    return ""


def _as_values(raw: RawValue) -> tuple[str, ...]:
    if isinstance(raw, str):
        # Stored record metadata keeps multi-select values comma-joined
        return tuple(piece.strip() for piece in raw.split(",") if piece.strip())
    if isinstance(raw, (list, tuple)):
        return tuple(item for item in raw if isinstance(item, str))
    return ()


def resolve_selection(variable: VariableDefinition, values: SelectionValues) -> Selection:
    """Resolve the wire value for one *variable*.

    Args:
        variable: The schema field being resolved.
        values: The full wire mapping, including companion free slots.

    Returns:
        The selection variant for the field. Malformed payloads resolve
        to ``UNSET`` rather than raising.
    """
    raw = values.get(variable.id)

    match variable.kind:
        case VariableKind.MULTI_SELECT:
            selected = _as_values(raw)
            return MultiSelected(selected) if selected else UNSET
        case VariableKind.FREE_TEXT:
            text = _as_text(raw)
            return Selected(text) if text else UNSET
        case _:
            text = _as_text(raw)
            if text == FREE_INPUT_SENTINEL:
                free_text = _as_text(values.get(variable.free_slot))
                return FreeEntry(free_text) if free_text else UNSET
            return Selected(text) if text else UNSET


def resolve_selections(schema: Schema, values: SelectionValues | None) -> dict[str, Selection]:
    """Resolve every schema field from the wire mapping *values*."""
    values = values or {}
    return {variable.id: resolve_selection(variable, values) for variable in schema.variables}


def raw_value(selection: Selection) -> str:
    """Value recorded in metadata for *selection*, before any transform."""
    match selection:
        case Selected(value=value):
            return value
        case FreeEntry(text=text):
            return text
        case MultiSelected(values=values):
            return ",".join(values)
        case _:
            return ""
