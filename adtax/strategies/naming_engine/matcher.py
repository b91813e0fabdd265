"""Reverse lookup of file name segments to canonical options.

A generated segment may have had whitespace replaced by the separator and
its case transformed relative to the stored option, so matching undoes
both transformations before comparing.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from adtax.strategies.naming_engine.models import CaseTransform, join_whitespace


@dataclass(frozen=True)
class Matched:
    """The segment resolved to a canonical option."""

    option: str


@dataclass(frozen=True)
class Unmatched:
    """No option matched; the raw value is treated as custom."""

    raw_value: str


MatchResult: TypeAlias = Matched | Unmatched


def normalize_for_match(value: str) -> str:
    """Case-insensitive, whitespace-trimmed comparison form."""
    return value.strip().lower()


def _first_match(
    options: Sequence[str],
    target: str,
    *candidates: Callable[[str], str],
) -> str | None:
    for option in options:
        for candidate in candidates:
            if normalize_for_match(candidate(option)) == target:
                return option
    return None


def match_option(
    segment: str,
    options: Sequence[str],
    case_transform: CaseTransform,
    separator: str,
) -> MatchResult:
    """Match *segment* to the first option (in schema order) it represents.

    Three passes run in order, each over every option, stopping at the
    first pass that finds a match:

    1. plain case-insensitive comparison;
    2. comparison against the option after the schema case transform;
    3. comparison against the option with whitespace runs replaced by
       *separator*, both plain and case-transformed.

    Args:
        segment: Raw segment taken from a file name or stored metadata.
        options: Canonical options of the field, in schema order.
        case_transform: The schema's case transform.
        separator: The schema's separator.

    Returns:
        ``Matched`` with the canonical option, or ``Unmatched`` carrying
        *segment* unchanged.
    """
    target = normalize_for_match(segment)

    matched = (
        _first_match(options, target, lambda option: option)
        or _first_match(options, target, case_transform.apply)
        or _first_match(
            options,
            target,
            lambda option: join_whitespace(option, separator),
            lambda option: case_transform.apply(join_whitespace(option, separator)),
        )
    )

    if matched is None:
        return Unmatched(segment)
    return Matched(matched)
