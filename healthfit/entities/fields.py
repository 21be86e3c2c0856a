# ==============================================================================
# FIELD DESCRIPTORS - Declarative Entity Schemas
# ==============================================================================
# Immutable descriptions of entity attributes and entities
# Validation and search eligibility are driven by these tags
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

from healthfit.core.exceptions import SchemaError

# Keys owned by the storage layer; never declared as entity fields
ID_FIELD = "_id"
CREATED_AT_FIELD = "createdAt"
RESERVED_FIELDS = frozenset({ID_FIELD, "id", CREATED_AT_FIELD, "created_at", "__v"})


class SemanticType(str, Enum):
    """
    Semantic type of an entity attribute.

    Attributes:
        TEXT: Free text; the only type that takes part in search
        NUMBER: Integer or decimal value, optionally bounded
        DATE: Calendar date (with optional time of day)
    """
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Metadata for one attribute of an entity.

    Attributes:
        name: Attribute key as it appears in payloads and records
        semantic_type: Drives type checking and search eligibility
        required: Whether create payloads must supply a non-empty value
        min: Inclusive lower bound (NUMBER fields only)
        max: Inclusive upper bound (NUMBER fields only)
        unique: Whether two records may not share the same value

    Example:
        >>> FieldDescriptor("rating", SemanticType.NUMBER, min=1, max=5)
    """

    name: str
    semantic_type: SemanticType = SemanticType.TEXT
    required: bool = True
    min: Optional[float] = None
    max: Optional[float] = None
    unique: bool = False

    def __post_init__(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise SchemaError("Field name must be a non-empty string")
        if self.name in RESERVED_FIELDS:
            raise SchemaError(f"Field name '{self.name}' is reserved")

        has_bounds = self.min is not None or self.max is not None
        if has_bounds and self.semantic_type is not SemanticType.NUMBER:
            raise SchemaError(
                f"Field '{self.name}': bounds are only allowed on number fields"
            )
        if self.min is not None and self.max is not None and self.min > self.max:
            raise SchemaError(
                f"Field '{self.name}': min ({self.min}) is greater than max ({self.max})"
            )

    @property
    def is_searchable(self) -> bool:
        """Whether free-text search looks at this field."""
        return self.semantic_type is SemanticType.TEXT


def text(name: str, required: bool = True, unique: bool = False) -> FieldDescriptor:
    """Shorthand for a TEXT field."""
    return FieldDescriptor(name, SemanticType.TEXT, required=required, unique=unique)


def number(
    name: str,
    required: bool = True,
    min: Optional[float] = None,
    max: Optional[float] = None,
) -> FieldDescriptor:
    """Shorthand for a NUMBER field."""
    return FieldDescriptor(
        name, SemanticType.NUMBER, required=required, min=min, max=max
    )


def date(name: str, required: bool = True) -> FieldDescriptor:
    """Shorthand for a DATE field."""
    return FieldDescriptor(name, SemanticType.DATE, required=required)


@dataclass(frozen=True)
class EntityDescriptor:
    """
    One registered entity: its route name, ordered fields and storage handle.

    Attributes:
        name: Entity name, also the URL path segment (e.g. "goals")
        fields: Ordered field descriptors; order only matters for display
        collection: Table/collection name handed to the storage adapter
    """

    name: str
    fields: Tuple[FieldDescriptor, ...]
    collection: str = field(default="")

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Entity name must be a non-empty string")

        # Accept any iterable of descriptors but store a tuple
        object.__setattr__(self, "fields", tuple(self.fields))
        if not self.collection:
            object.__setattr__(self, "collection", self.name)

        seen = set()
        for descriptor in self.fields:
            if not isinstance(descriptor, FieldDescriptor):
                raise SchemaError(
                    f"Entity '{self.name}': fields must be FieldDescriptor instances"
                )
            if descriptor.name in seen:
                raise SchemaError(
                    f"Entity '{self.name}': field '{descriptor.name}' declared twice"
                )
            seen.add(descriptor.name)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None

    @property
    def unique_fields(self) -> Tuple[FieldDescriptor, ...]:
        return tuple(f for f in self.fields if f.unique)

    @property
    def search_fields(self) -> Tuple[str, ...]:
        """
        Names of the fields that free-text search matches against.

        The id and creation timestamp are never declared fields, so only
        the TEXT-typed declared fields remain. An empty tuple means the
        entity has nothing to search and search returns every record.
        """
        return tuple(
            f.name for f in self.fields
            if f.name not in RESERVED_FIELDS and f.is_searchable
        )
