# ==============================================================================
# PAYLOAD VALIDATION - Descriptor-Driven Checks
# ==============================================================================
# Shared by create and update; pydantic does the checking, this module
# turns its errors into the application's ValidationError
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pydantic import ValidationError as PydanticValidationError

from healthfit.core.exceptions import ValidationError
from healthfit.entities.fields import EntityDescriptor, FieldDescriptor, SemanticType
from healthfit.schemas.payloads import payload_model

TYPE_MESSAGES = {
    SemanticType.TEXT: "{name} must be a string",
    SemanticType.NUMBER: "{name} must be a number",
    SemanticType.DATE: "{name} must be a valid date",
}


def validate_payload(
    entity: EntityDescriptor,
    payload: Any,
    partial: bool = False,
) -> Dict[str, Any]:
    """
    Validate and normalize a payload against an entity's fields.

    Unknown keys are ignored. On create (`partial=False`) every required
    field must be present and non-empty; on update (`partial=True`)
    omitted fields are left alone but a supplied required field still
    may not be empty. Optional fields supplied empty are dropped.

    Args:
        entity: Entity descriptor to validate against
        payload: Decoded JSON body
        partial: Merge-style update semantics

    Returns:
        Attributes ready for storage, containing only declared fields

    Raises:
        ValidationError: Naming the first offending field; `errors`
            holds every offending field
    """
    if not isinstance(payload, Mapping):
        raise ValidationError(message="Request body must be a JSON object")

    model = payload_model(entity, partial)
    try:
        instance = model.model_validate(dict(payload))
    except PydanticValidationError as e:
        errors = describe_errors(entity, e.errors())
        first = next(iter(errors))
        raise ValidationError(
            message=errors[first],
            field=first,
            errors=errors,
        ) from None

    data = instance.model_dump(by_alias=True, exclude_unset=True)
    return {name: value for name, value in data.items() if value is not None}


def describe_errors(
    entity: EntityDescriptor,
    errors: List[Dict[str, Any]],
) -> Dict[str, str]:
    """
    One message per offending field, in declaration order.

    A union type reports one error per member; they are grouped by
    field and a bound violation wins over a type mismatch.
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for error in errors:
        loc = error.get("loc") or ("",)
        grouped.setdefault(str(loc[0]), []).append(error)

    messages: Dict[str, str] = {}
    for descriptor in entity.fields:
        if descriptor.name in grouped:
            messages[descriptor.name] = _message(descriptor, grouped[descriptor.name])
    return messages


def _message(descriptor: FieldDescriptor, errors: List[Dict[str, Any]]) -> str:
    name = descriptor.name

    if any(e["type"] == "missing" or e.get("input") is None for e in errors):
        return f"{name} is required"

    for error in errors:
        if error["type"] == "greater_than_equal" and descriptor.min is not None:
            return f"{name} must be at least {_format_bound(descriptor.min)}"
        if error["type"] == "less_than_equal" and descriptor.max is not None:
            return f"{name} must be at most {_format_bound(descriptor.max)}"

    return TYPE_MESSAGES[descriptor.semantic_type].format(name=name)


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)
