"""Field declarations and validation rules.

A Field describes one typed attribute of a Model. Its validation rules are
a closed tagged union discriminated on ``type``, matching the JSON shape
used by hand-written declarations:

    Field(
        name="email",
        type="string",
        required=True,
        unique=True,
        validation=[{"type": "email"}, {"type": "maxLength", "value": 255}],
    )

Rules are descriptive only. They are checked for structure by the field
validator and handed unchanged to the request-validation collaborator.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, StrictInt, field_validator
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel

from domainir.core.types import FIELD_TYPE_ALIASES, FieldType


class Declaration(BaseModel):
    """Base for every declaration model.

    Accepts snake_case and camelCase keys, ignores unknown keys (UI hints and
    other collaborator-specific metadata) and dumps camelCase by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class RequiredRule(Declaration):
    type: Literal["required"] = "required"


class MaxLengthRule(Declaration):
    type: Literal["maxLength"] = "maxLength"
    value: StrictInt


class MinLengthRule(Declaration):
    type: Literal["minLength"] = "minLength"
    value: StrictInt


class PatternRule(Declaration):
    type: Literal["pattern"] = "pattern"
    value: str
    message: str | None = None


class EmailRule(Declaration):
    type: Literal["email"] = "email"


class UrlRule(Declaration):
    type: Literal["url"] = "url"


ValidationRule = Annotated[
    Union[RequiredRule, MaxLengthRule, MinLengthRule, PatternRule, EmailRule, UrlRule],
    PydanticField(discriminator="type"),
]


class Field(Declaration):
    """Typed, validated attribute of a Model."""

    name: str
    type: FieldType
    required: bool = False
    unique: bool = False
    default: Any = None
    primary_key: bool = False
    auto_increment: bool = PydanticField(
        default=False,
        validation_alias=AliasChoices("autoIncrement", "autoincrement", "auto_increment"),
    )
    validation: list[ValidationRule] = PydanticField(default_factory=list)
    description: str | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, FieldType):
            lowered = value.lower()
            return FIELD_TYPE_ALIASES.get(lowered, lowered)
        return value

    @property
    def is_required(self) -> bool:
        """Primary key fields are implicitly required."""
        return self.required or self.primary_key

    @property
    def is_unique(self) -> bool:
        return self.unique or self.primary_key

    def rules_of(self, kind: str) -> list[Any]:
        return [rule for rule in self.validation if rule.type == kind]

    def has_rule(self, kind: str) -> bool:
        return any(rule.type == kind for rule in self.validation)


__all__ = [
    "Declaration",
    "Field",
    "ValidationRule",
    "RequiredRule",
    "MaxLengthRule",
    "MinLengthRule",
    "PatternRule",
    "EmailRule",
    "UrlRule",
]
