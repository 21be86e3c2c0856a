# ==============================================================================
# PAYLOAD SCHEMAS - Request Models Built from Entity Descriptors
# ==============================================================================
# One create model and one partial update model per entity, generated with
# pydantic.create_model; no per-entity classes are written by hand
# ==============================================================================

from __future__ import annotations

import math
from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Any, Dict, Optional, Tuple, Type, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    create_model,
    field_validator,
)

from healthfit.entities.fields import EntityDescriptor, FieldDescriptor, SemanticType

# Largest integers both SQLite and BSON store exactly; larger ones become floats
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def is_blank(value: Any) -> bool:
    """None and whitespace-only strings count as "not supplied"."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


# ==============================================================================
# FIELD TYPES
# ==============================================================================

def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    return value


def _reject_timestamp(value: Any) -> Any:
    # Bare numbers would otherwise be read as unix timestamps
    if isinstance(value, (bool, int, float)):
        raise ValueError("dates must be ISO-8601 strings")
    return value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("date is outside the supported range") from None


def number_type(descriptor: FieldDescriptor) -> Any:
    """
    Integer-or-decimal type honouring the descriptor's inclusive bounds.

    Integers are tried first so whole numbers stay exact; anything that
    is not an int64 falls through to a finite float.
    """
    lo, hi = descriptor.min, descriptor.max

    exact = Annotated[int, Field(
        ge=INT64_MIN if lo is None else max(math.ceil(lo), INT64_MIN),
        le=INT64_MAX if hi is None else min(math.floor(hi), INT64_MAX),
    )]
    decimal = Annotated[float, Field(ge=lo, le=hi, allow_inf_nan=False)]

    return Annotated[Union[exact, decimal], BeforeValidator(_reject_bool)]


DateValue = Annotated[
    datetime,
    BeforeValidator(_reject_timestamp),
    AfterValidator(_as_utc),
]


def field_type(descriptor: FieldDescriptor) -> Any:
    if descriptor.semantic_type is SemanticType.NUMBER:
        return number_type(descriptor)
    if descriptor.semantic_type is SemanticType.DATE:
        return DateValue
    return str


# ==============================================================================
# MODEL FACTORY
# ==============================================================================

class PayloadSchema(BaseModel):
    """
    Base for generated payload models.

    Unknown keys are ignored and plain numbers sent for text fields are
    kept as their string form. Blank strings are treated as missing, so
    a blank required field fails exactly like an absent one.
    """

    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
        populate_by_name=False,
    )

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        return None if is_blank(v) else v


@lru_cache(maxsize=None)
def payload_model(entity: EntityDescriptor, partial: bool = False) -> Type[PayloadSchema]:
    """
    Build (once) the request model for an entity.

    Attribute names are positional (`field_0`, ...) and the declared
    field name is the alias, so entity fields can never collide with
    BaseModel attributes.

    Args:
        entity: Entity descriptor
        partial: Update model; every field may be omitted, but a
            supplied required field must still be non-empty

    Returns:
        Generated pydantic model class
    """
    fields: Dict[str, Tuple[Any, Any]] = {}

    for index, descriptor in enumerate(entity.fields):
        annotation = field_type(descriptor)
        if descriptor.required and not partial:
            default = ...
        else:
            default = None
        if not descriptor.required:
            annotation = Optional[annotation]

        fields[f"field_{index}"] = (
            annotation,
            Field(default, alias=descriptor.name),
        )

    suffix = "Update" if partial else "Create"
    return create_model(
        f"{entity.name}_{suffix}",
        __base__=PayloadSchema,
        **fields,
    )
