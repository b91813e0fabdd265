"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization. Field names are
exposed in camelCase on the wire.
"""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from adtax.strategies.naming_engine import (
    GeneratedRecord,
    HistoryBatch,
    Matched,
    ParsedName,
    Schema,
    VariableKind,
    VariableUsageStats,
)


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Generic Schemas
# =============================================================================


class SuccessResponse(ApiModel):
    """Acknowledgement for write operations."""

    success: bool = True
    message: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")


# =============================================================================
# Config Schemas
# =============================================================================


class ConfigResponse(ApiModel):
    """The owner's stored schema, or null when none exists."""

    value: Schema | None = None


class UnlockRequest(ApiModel):
    """Request to unlock a locked schema."""

    password: str = Field(min_length=1)


class SeedResponse(ApiModel):
    """Outcome of seeding the example schema."""

    message: str
    existing: bool = False
    config: Schema | None = None


# =============================================================================
# Name Schemas
# =============================================================================


class GenerateRequest(ApiModel):
    """Selected values for one generation action.

    ``values`` maps field id to a string (single-select, free-text) or a
    list of strings (multi-select). A single-select set to ``{free_input}``
    reads its value from the ``{id}_free`` slot.
    """

    values: dict[str, str | list[str] | None] = Field(
        validation_alias=AliasChoices("values", "variableValues"),
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "values": {
                    "1": "1080x1080",
                    "2": "{free_input}",
                    "2_free": "Small Business",
                    "4": ["Hero", "Sage"],
                }
            }
        }
    )


class GenerateResponse(ApiModel):
    """Records produced by one generation action."""

    timestamp: int
    records: list[GeneratedRecord]


class HistoryResponse(ApiModel):
    """Stored history, newest first."""

    records: list[GeneratedRecord]
    total: int


class BatchResponse(ApiModel):
    """Records sharing one generation timestamp."""

    timestamp: int
    records: list[GeneratedRecord]

    @classmethod
    def from_batch(cls, batch: HistoryBatch) -> "BatchResponse":
        return cls(timestamp=batch.timestamp, records=list(batch.records))


class BatchListResponse(ApiModel):
    """History grouped into generation batches."""

    batches: list[BatchResponse]
    total: int


class ParseRequest(ApiModel):
    """File name to parse against the owner's schema."""

    file_name: str = Field(min_length=1)


class FieldMatch(ApiModel):
    """Match outcome for one field's segment."""

    value: str
    matched: bool


class ParseResponse(ApiModel):
    """Best-effort reconstruction of a file name."""

    file_name: str
    metadata: dict[str, str]
    matches: dict[str, FieldMatch]
    segment_count: int
    variable_count: int
    extra_segments: list[str]
    ambiguous: bool

    @classmethod
    def from_parsed(cls, parsed: ParsedName) -> "ParseResponse":
        return cls(
            file_name=parsed.file_name,
            metadata=parsed.metadata,
            matches={
                field_id: FieldMatch(
                    value=parsed.metadata[field_id],
                    matched=isinstance(result, Matched),
                )
                for field_id, result in parsed.matches.items()
            },
            segment_count=parsed.segment_count,
            variable_count=parsed.variable_count,
            extra_segments=list(parsed.extra_segments),
            ambiguous=parsed.is_ambiguous,
        )


class MigrateRequest(ApiModel):
    """Legacy history: bare file name strings and/or record objects."""

    entries: list[Any]


# =============================================================================
# Analytics Schemas
# =============================================================================


class OptionUsage(ApiModel):
    """Usage of one observed value."""

    option: str
    count: int
    share: float = Field(description="Percentage of the variable's total usage")
    custom: bool


class VariableUsageResponse(ApiModel):
    """Usage statistics for one variable."""

    variable_id: str
    label: str
    kind: VariableKind
    total_usage: int
    options: list[OptionUsage]
    custom_values: list[str]
    most_used: OptionUsage | None = None
    least_used: OptionUsage | None = None

    @classmethod
    def from_stats(cls, stats: VariableUsageStats) -> "VariableUsageResponse":
        def usage(option: str, count: int) -> OptionUsage:
            return OptionUsage(
                option=option,
                count=count,
                share=stats.share(option),
                custom=option in stats.custom_values,
            )

        most = stats.most_used()
        least = stats.least_used()
        return cls(
            variable_id=stats.variable.id,
            label=stats.variable.label,
            kind=stats.variable.kind,
            total_usage=stats.total_usage,
            options=[usage(option, count) for option, count in stats.option_counts.items()],
            custom_values=stats.ordered_custom_values(),
            most_used=usage(*most) if most else None,
            least_used=usage(*least) if least else None,
        )


class AnalyticsResponse(ApiModel):
    """Usage statistics across the owner's history."""

    record_count: int
    variables: list[VariableUsageResponse]


# =============================================================================
# API Key Schemas
# =============================================================================


class ApiKeyCreate(ApiModel):
    """Request schema for issuing an API key."""

    name: str = Field(default="API Key", min_length=1, max_length=255)
    environment: Literal["live", "test"] = "live"


class ApiKeyResponse(ApiModel):
    """API key metadata (never the key itself)."""

    key_id: str
    name: str
    environment: Literal["live", "test"]
    created_at: str
    last_used: str | None = None
    usage_count: int = 0


class ApiKeyCreatedResponse(ApiModel):
    """Response for a newly issued key. The plain key is shown only here."""

    api_key: str
    key_id: str
    name: str
    environment: Literal["live", "test"]
    created_at: str


class ApiKeyListResponse(ApiModel):
    """Response for listing API keys."""

    keys: list[ApiKeyResponse]
