# ==============================================================================
# ENTITY REGISTRY - Name -> Entity Descriptor Mapping
# ==============================================================================
# Explicitly constructed and passed to the app factory; no module global
# ==============================================================================

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional

from healthfit.core.exceptions import (
    DuplicateEntityError,
    EntityNotRegisteredError,
    RegistryFrozenError,
)
from healthfit.entities.fields import EntityDescriptor, FieldDescriptor

logger = logging.getLogger(__name__)


class EntityRegistry:
    """
    Registry of entity descriptors keyed by entity name.

    Entities are registered once at startup. After `freeze()` the
    registry rejects further registrations, so the set of installed
    routes and the set of registered entities cannot drift apart.

    Example:
        >>> registry = EntityRegistry()
        >>> registry.register("goals", [text("goalName"), date("deadline")])
        >>> registry.resolve("goals").search_fields
        ('goalName',)
    """

    def __init__(self) -> None:
        self._entities: Dict[str, EntityDescriptor] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        fields: Iterable[FieldDescriptor],
        collection: Optional[str] = None,
    ) -> EntityDescriptor:
        """
        Register an entity.

        Args:
            name: Entity name, used as the URL path segment
            fields: Ordered field descriptors
            collection: Storage collection/table name (defaults to name)

        Returns:
            The immutable entity descriptor

        Raises:
            DuplicateEntityError: If the name is already registered
            RegistryFrozenError: If the registry has been frozen
            SchemaError: If the field declarations are invalid
        """
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register '{name}': registry is frozen"
            )
        if name in self._entities:
            raise DuplicateEntityError(name)

        descriptor = EntityDescriptor(
            name=name,
            fields=tuple(fields),
            collection=collection or name,
        )
        self._entities[name] = descriptor
        logger.debug(
            f"Registered entity '{name}' -> {descriptor.collection} "
            f"({len(descriptor.fields)} fields)"
        )
        return descriptor

    def resolve(self, name: str) -> EntityDescriptor:
        """
        Look up an entity by name.

        Raises:
            EntityNotRegisteredError: If the name was never registered
        """
        try:
            return self._entities[name]
        except KeyError:
            raise EntityNotRegisteredError(name) from None

    def freeze(self) -> None:
        """Reject any further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        return list(self._entities)

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __iter__(self) -> Iterator[EntityDescriptor]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)
