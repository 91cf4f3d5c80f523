"""Input shapes for the request-validation collaborator.

Each model gets a mapping of author-declared field name → (type, category,
required, rules). Lifecycle columns synthesized at compile time are not part
of the shape: clients never send them. An auto-increment primary key is not
required on input because the store assigns it.
"""

from __future__ import annotations

from collections.abc import Sequence

from domainir.compiler.artifact import InputField, InputShape
from domainir.core.types import TYPE_REGISTRY
from domainir.models.base import Model
from domainir.models.field import Field


def _is_required_on_input(model: Model, field: Field) -> bool:
    if field.primary_key and field.auto_increment:
        return False
    if field.is_required or field.has_rule("required"):
        return True
    # Composite key members identify the row and must be supplied.
    return model.primary_key is not None and field.name in model.primary_key


def build_input_shape(model: Model) -> InputShape:
    fields: dict[str, InputField] = {}
    for field in model.fields:
        fields[field.name] = InputField(
            type=field.type,
            category=TYPE_REGISTRY[field.type].category,
            required=_is_required_on_input(model, field),
            rules=tuple(
                rule.model_dump(mode="json", by_alias=True, exclude_none=True)
                for rule in field.validation
            ),
        )
    return InputShape(model=model.name, fields=fields)


def build_input_shapes(models: Sequence[Model]) -> dict[str, InputShape]:
    """Input shapes keyed by model name, in name order."""
    return {model.name: build_input_shape(model) for model in sorted(models, key=lambda m: m.name)}


__all__ = ["build_input_shape", "build_input_shapes"]
