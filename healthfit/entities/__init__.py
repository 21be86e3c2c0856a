# ==============================================================================
# ENTITIES PACKAGE INITIALIZATION
# ==============================================================================

"""
Entities Module
===============

Declarative entity descriptions:
- fields: FieldDescriptor / EntityDescriptor and the semantic type tags
- registry: EntityRegistry (name -> descriptor)
- catalogue: the built-in Health & Fitness entity catalogue
"""

from healthfit.entities.fields import (
    EntityDescriptor,
    FieldDescriptor,
    SemanticType,
)
from healthfit.entities.registry import EntityRegistry
from healthfit.entities.catalogue import ENTITY_FIELDS, build_registry

__all__ = [
    "EntityDescriptor",
    "FieldDescriptor",
    "SemanticType",
    "EntityRegistry",
    "ENTITY_FIELDS",
    "build_registry",
]
