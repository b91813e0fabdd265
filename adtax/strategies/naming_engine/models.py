"""Naming engine domain models.

Pydantic models for the variable schema and generated records. Models
serialize with camelCase keys so the persisted shape stays compatible
with stored configurations and history written by earlier versions.
"""

import enum
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

FREE_INPUT_SENTINEL = "{free_input}"
FREE_SLOT_SUFFIX = "_free"

_WHITESPACE_RUN = re.compile(r"\s+")


class VariableKind(str, enum.Enum):
    """How a variable's value is chosen."""

    SINGLE_SELECT = "single-select"
    MULTI_SELECT = "multi-select"
    FREE_TEXT = "free-text"

    @classmethod
    def _missing_(cls, value: object) -> "VariableKind | None":
        legacy = {
            "dropdown": cls.SINGLE_SELECT,
            "multiselect": cls.MULTI_SELECT,
            "input": cls.FREE_TEXT,
        }
        if isinstance(value, str):
            return legacy.get(value.strip().lower())
        return None


class CaseTransform(str, enum.Enum):
    """Case policy applied to every composed segment."""

    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    NONE = "none"

    def apply(self, value: str) -> str:
        """Return *value* with this transform applied."""
        match self:
            case CaseTransform.UPPERCASE:
                return value.upper()
            case CaseTransform.LOWERCASE:
                return value.lower()
            case _:
                return value


def join_whitespace(value: str, separator: str) -> str:
    """Replace every run of whitespace in *value* with *separator*."""
    return _WHITESPACE_RUN.sub(separator, value)


def fold_option(value: str, case_transform: CaseTransform, separator: str) -> str:
    """Comparison key for an option as it would appear in a file name."""
    return case_transform.apply(join_whitespace(value.strip(), separator)).lower()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VariableDefinition(_CamelModel):
    """A single field of the naming schema."""

    id: str = Field(min_length=1, description="Stable identifier, unique within a schema")
    label: str = Field(default="", description="Display name, not used for matching")
    kind: VariableKind = Field(
        default=VariableKind.SINGLE_SELECT,
        validation_alias=AliasChoices("kind", "type"),
    )
    options: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("options", "values"),
        description="Canonical, case-preserved vocabulary",
    )
    allow_free_entry: bool = Field(
        default=False,
        validation_alias=AliasChoices("allowFreeEntry", "allow_free_entry", "allowFreeInput"),
        serialization_alias="allowFreeEntry",
    )
    description: str | None = None
    option_descriptions: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("optionDescriptions", "option_descriptions"),
        serialization_alias="optionDescriptions",
    )

    @field_validator("options", mode="before")
    @classmethod
    def drop_sentinel(cls, v: Any) -> Any:
        """Remove blanks and the free-entry sentinel from the option list."""
        if v is None:
            return []
        if isinstance(v, list):
            return [
                o.strip()
                for o in v
                if isinstance(o, str) and o.strip() and o.strip() != FREE_INPUT_SENTINEL
            ]
        return v

    @field_validator("kind", mode="before")
    @classmethod
    def map_legacy_kind(cls, v: Any) -> Any:
        """Accept the kind names used by older stored configurations."""
        if isinstance(v, str) and not isinstance(v, VariableKind):
            return VariableKind(v)
        return v

    @field_validator("allow_free_entry", mode="before")
    @classmethod
    def coerce_free_entry(cls, v: Any) -> Any:
        return bool(v) if v is not None else False

    @field_validator("option_descriptions", mode="before")
    @classmethod
    def coerce_descriptions(cls, v: Any) -> Any:
        return v if v is not None else {}

    @model_validator(mode="after")
    def normalize_kind(self) -> "VariableDefinition":
        if self.kind is VariableKind.FREE_TEXT:
            self.options = []
        if self.kind is not VariableKind.SINGLE_SELECT:
            self.allow_free_entry = False
        return self

    @property
    def free_slot(self) -> str:
        """Key of the companion slot carrying this field's free entry."""
        return f"{self.id}{FREE_SLOT_SUFFIX}"


class Schema(_CamelModel):
    """Ordered variable schema plus composition policy.

    Variable order defines both UI layout and positional order in the
    generated name.
    """

    variables: list[VariableDefinition] = Field(default_factory=list)
    separator: str = Field(default="_", min_length=1, max_length=1)
    case_transform: CaseTransform = Field(default=CaseTransform.LOWERCASE)
    locked: bool = False

    @field_validator("locked", mode="before")
    @classmethod
    def coerce_locked(cls, v: Any) -> bool:
        return bool(v) if v is not None else False

    @model_validator(mode="after")
    def check_invariants(self) -> "Schema":
        seen_ids: set[str] = set()
        for variable in self.variables:
            if variable.id in seen_ids:
                raise ValueError(f"Duplicate variable id '{variable.id}'")
            seen_ids.add(variable.id)

            folded: dict[str, str] = {}
            for option in variable.options:
                key = fold_option(option, self.case_transform, self.separator)
                if key in folded:
                    raise ValueError(
                        f"Options '{folded[key]}' and '{option}' of variable "
                        f"'{variable.id}' collide after case/separator folding"
                    )
                folded[key] = option
        return self

    def get_variable(self, variable_id: str) -> VariableDefinition | None:
        """Return the variable with *variable_id*, if any."""
        for variable in self.variables:
            if variable.id == variable_id:
                return variable
        return None


class GeneratedRecord(_CamelModel):
    """One generated file name with the values that produced it."""

    file_name: str = Field(min_length=1)
    metadata: dict[str, str] = Field(default_factory=dict)
    timestamp: int = Field(description="Creation time in epoch milliseconds")

    @field_validator("timestamp", mode="before")
    @classmethod
    def truncate_timestamp(cls, v: Any) -> Any:
        if isinstance(v, float):
            return int(v)
        return v

    @field_validator("metadata", mode="before")
    @classmethod
    def coerce_metadata(cls, v: Any) -> dict[str, str]:
        """Tolerate null metadata and non-string values in stored history."""
        if not isinstance(v, dict):
            return {}
        coerced = {}
        for key, value in v.items():
            if value is None:
                continue
            if isinstance(value, list):
                coerced[str(key)] = ",".join(str(item) for item in value)
            else:
                coerced[str(key)] = str(value)
        return coerced
