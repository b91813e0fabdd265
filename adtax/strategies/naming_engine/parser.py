"""Positional parsing of file names back into field values.

Names carry no escaping or field-boundary markers: the i-th segment is
assumed to belong to the i-th schema variable. A value containing the
separator, an empty field closed up during composition, or a schema
edited after generation can all shift that alignment. The ambiguity is
reported on the result rather than guessed around.
"""

import logging
from dataclasses import dataclass, field

from adtax.interfaces.naming import BaseNameParser
from adtax.strategies.naming_engine.matcher import Matched, MatchResult, Unmatched, match_option
from adtax.strategies.naming_engine.models import Schema, VariableKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedName:
    """Best-effort reconstruction of a file name.

    Attributes:
        file_name: The parsed file name.
        metadata: Field id to recovered value (canonical option when matched).
        matches: Field id to the match outcome for that field's segment.
        segment_count: Number of separator-delimited segments in the name.
        variable_count: Number of variables in the schema used to parse.
        extra_segments: Segments left over after every variable was assigned.
    """

    file_name: str
    metadata: dict[str, str]
    matches: dict[str, MatchResult]
    segment_count: int
    variable_count: int
    extra_segments: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_ambiguous(self) -> bool:
        """True when segments and variables do not line up one-to-one."""
        return self.segment_count != self.variable_count


def parse_name(file_name: str, schema: Schema) -> ParsedName:
    """Split *file_name* on the schema separator and recover field values.

    Never raises; unmatched segments are kept verbatim as custom values.
    """
    segments = file_name.split(schema.separator) if file_name else []
    metadata: dict[str, str] = {}
    matches: dict[str, MatchResult] = {}

    for index, variable in enumerate(schema.variables):
        if index >= len(segments):
            break
        segment = segments[index]
        if not segment:
            continue

        if variable.kind is VariableKind.FREE_TEXT:
            result: MatchResult = Unmatched(segment)
        else:
            result = match_option(
                segment, variable.options, schema.case_transform, schema.separator
            )

        matches[variable.id] = result
        metadata[variable.id] = result.option if isinstance(result, Matched) else segment

    parsed = ParsedName(
        file_name=file_name,
        metadata=metadata,
        matches=matches,
        segment_count=len(segments),
        variable_count=len(schema.variables),
        extra_segments=tuple(segments[len(schema.variables):]),
    )

    if parsed.is_ambiguous:
        logger.debug(
            f"Positional parse of '{file_name}' is ambiguous: "
            f"{parsed.segment_count} segments for {parsed.variable_count} variables"
        )

    return parsed


def parse(file_name: str, schema: Schema) -> dict[str, str]:
    """Recover per-field metadata from *file_name*."""
    return parse_name(file_name, schema).metadata


class NameParser(BaseNameParser):
    """Parser strategy using positional alignment and option matching."""

    def parse(self, file_name: str, schema: Schema) -> ParsedName:
        return parse_name(file_name, schema)
