# ==============================================================================
# RESOURCE SERVICE - Generic CRUD + Search for One Entity
# ==============================================================================
# Same algorithm for every entity; all variation comes from the descriptor
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List

from healthfit.core.exceptions import ConflictError, NotFoundError
from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter
from healthfit.entities.fields import EntityDescriptor
from healthfit.schemas.base import Record
from healthfit.services.validation import validate_payload

logger = logging.getLogger(__name__)

DELETED_MESSAGE = "Item deleted successfully"


class ResourceService:
    """
    Business operations for a single entity.

    Stateless: one instance per request is fine, and nothing is kept
    between calls. Concurrent updates to one record are last-write-wins;
    ordering is left to the storage backend.

    Attributes:
        entity: Descriptor driving validation and search
        _adapter: Storage backend

    Example:
        >>> service = ResourceService(registry.resolve("goals"), adapter)
        >>> record = await service.create({"goalName": "Run 5k", ...})
        >>> await service.search("run")
    """

    def __init__(
        self,
        entity: EntityDescriptor,
        adapter: BaseDatabaseAdapter,
    ) -> None:
        self.entity = entity
        self._adapter = adapter

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def create(self, payload: Any) -> Record:
        """
        Validate a payload and store it as a new record.

        Raises:
            ValidationError: Missing/empty required field or bad value
            ConflictError: A unique field value is already taken
            PersistenceError: Storage failure
        """
        attributes = validate_payload(self.entity, payload)
        await self._ensure_unique(attributes)

        record = await self._adapter.insert(self.entity, attributes)
        logger.info(f"Created {self.entity.name} {record.id}")
        return record

    async def list(self) -> List[Record]:
        """Every record of the entity, unpaginated."""
        return await self._adapter.find_all(self.entity)

    async def get_by_id(self, id: str) -> Record:
        """
        Raises:
            NotFoundError: No record with this id
            InvalidIdError: Malformed id
        """
        record = await self._adapter.find_by_id(self.entity, id)
        if record is None:
            raise self._not_found(id)
        return record

    async def update(self, id: str, payload: Any) -> Record:
        """
        Merge validated fields into an existing record.

        Supplied fields overwrite; omitted fields keep their values. The
        id and creation timestamp are never changed.

        Raises:
            ValidationError: Supplied field invalid or emptied
            ConflictError: A unique field value is already taken
            NotFoundError: No record with this id
            InvalidIdError: Malformed id
        """
        attributes = validate_payload(self.entity, payload, partial=True)
        await self._ensure_unique(attributes, exclude_id=id)

        record = await self._adapter.update_by_id(self.entity, id, attributes)
        if record is None:
            raise self._not_found(id)

        logger.info(f"Updated {self.entity.name} {id}: {sorted(attributes)}")
        return record

    async def delete(self, id: str) -> Dict[str, str]:
        """
        Raises:
            NotFoundError: No record with this id
            InvalidIdError: Malformed id
        """
        deleted = await self._adapter.delete_by_id(self.entity, id)
        if not deleted:
            raise self._not_found(id)

        logger.info(f"Deleted {self.entity.name} {id}")
        return {"message": DELETED_MESSAGE}

    # ==========================================================================
    # SEARCH
    # ==========================================================================

    async def search(self, query: str) -> List[Record]:
        """
        Case-insensitive substring search across the entity's text fields.

        A record matches when any text field contains `query`. Number and
        date fields never take part. An entity with no text fields
        returns every record.
        """
        text_fields = self.entity.search_fields
        if not text_fields:
            logger.debug(
                f"{self.entity.name} has no text fields; search returns all records"
            )

        return await self._adapter.find_where_any_text_field_contains(
            self.entity,
            text_fields,
            query,
        )

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    async def _ensure_unique(
        self,
        attributes: Dict[str, Any],
        exclude_id: str | None = None,
    ) -> None:
        for descriptor in self.entity.unique_fields:
            if descriptor.name not in attributes:
                continue

            taken = await self._adapter.exists(
                self.entity,
                {descriptor.name: attributes[descriptor.name]},
                exclude_id=exclude_id,
            )
            if taken:
                raise ConflictError(
                    message=f"{descriptor.name} already exists",
                    resource_type=self.entity.name,
                    fields=[descriptor.name],
                )

    def _not_found(self, id: str) -> NotFoundError:
        return NotFoundError(
            message="Item not found",
            resource_type=self.entity.name,
            resource_id=id,
        )
