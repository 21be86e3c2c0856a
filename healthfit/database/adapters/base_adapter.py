# ==============================================================================
# BASE DATABASE ADAPTER - Abstract Persistence Interface
# ==============================================================================
# Defines the contract the resource service relies on
# Ensures consistent behaviour across SQLite and MongoDB
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from healthfit.entities.fields import EntityDescriptor
from healthfit.schemas.base import Record


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


class BaseDatabaseAdapter(ABC):
    """
    Abstract Base Class for Database Adapters.

    Every operation takes the entity descriptor so adapters can use the
    collection name and the declared field types. Records come back as
    `Record` instances regardless of backend.

    Identifier rules are backend specific: an id that is not well-formed
    for the backend raises `InvalidIdError`; a well-formed id with no
    record yields `None` / `False`.

    Driver failures are raised as `PersistenceError`; unique index
    violations as `ConflictError`.

    Example:
        >>> adapter = SQLiteAdapter()
        >>> adapter.register_entity(registry.resolve("goals"))
        >>> await adapter.connect()
        >>> record = await adapter.insert(goals, {"goalName": "Run 5k"})
        >>> await adapter.disconnect()
    """

    def __init__(self) -> None:
        self._entities: Dict[str, EntityDescriptor] = {}

    # ==========================================================================
    # ENTITY REGISTRATION
    # ==========================================================================

    def register_entity(self, entity: EntityDescriptor) -> None:
        """
        Make an entity's collection known to the adapter.

        Must be called before `connect()` so that tables and indexes
        are created for it.
        """
        self._entities[entity.name] = entity

    @property
    def entities(self) -> List[EntityDescriptor]:
        return list(self._entities.values())

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish database connection and prepare collections.

        Raises:
            DatabaseConnectionError: If connection cannot be established
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Release all connections."""

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def insert(
        self,
        entity: EntityDescriptor,
        attributes: Dict[str, Any],
    ) -> Record:
        """
        Insert a new record.

        The adapter assigns the id and creation timestamp.

        Returns:
            The stored record
        """

    @abstractmethod
    async def find_all(self, entity: EntityDescriptor) -> List[Record]:
        """Return every record of the entity."""

    @abstractmethod
    async def find_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
    ) -> Optional[Record]:
        """
        Retrieve a record by id.

        Returns:
            Record if found, None otherwise

        Raises:
            InvalidIdError: If the id is malformed for this backend
        """

    @abstractmethod
    async def update_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
        attributes: Dict[str, Any],
    ) -> Optional[Record]:
        """
        Merge `attributes` into an existing record.

        Fields absent from `attributes` keep their stored values; the id
        and creation timestamp never change.

        Returns:
            Updated record if found, None if not exists
        """

    @abstractmethod
    async def delete_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
    ) -> bool:
        """
        Delete a record by id.

        Returns:
            True if deleted, False if not found
        """

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def find_where_any_text_field_contains(
        self,
        entity: EntityDescriptor,
        text_fields: Sequence[str],
        substring: str,
    ) -> List[Record]:
        """
        Records where at least one of `text_fields` contains `substring`.

        Matching is case-insensitive and literal (no pattern syntax).
        An empty `text_fields` matches every record.
        """

    @abstractmethod
    async def exists(
        self,
        entity: EntityDescriptor,
        filters: Dict[str, Any],
        exclude_id: Optional[str] = None,
    ) -> bool:
        """
        Check if any record matches all `filters` by equality.

        Args:
            entity: Entity to query
            filters: Field-value pairs
            exclude_id: Record id to ignore (the record being updated)

        Returns:
            True if at least one other record matches
        """
