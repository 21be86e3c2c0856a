# ==============================================================================
# MONGODB ADAPTER - Motor Async Driver Implementation
# ==============================================================================
# Document-oriented storage; one collection per registered entity
# ==============================================================================

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from healthfit.core.exceptions import (
    ConflictError,
    DatabaseConnectionError,
    InvalidIdError,
    PersistenceError,
)
from healthfit.core.settings import settings
from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter, utc_now
from healthfit.entities.fields import CREATED_AT_FIELD, EntityDescriptor
from healthfit.schemas.base import Record

logger = logging.getLogger(__name__)


class MongoDBAdapter(BaseDatabaseAdapter):
    """
    MongoDB database adapter using Motor async driver.

    Documents are stored flat: declared fields plus `createdAt`, keyed
    by a generated ObjectId. Unique fields get a unique index on
    connect.

    Attributes:
        _connection_url: MongoDB connection string
        _database_name: Target database name
        _client: Motor async client
        _database: Target database instance

    Example:
        >>> adapter = MongoDBAdapter()
        >>> adapter.register_entity(users)
        >>> await adapter.connect()
        >>> record = await adapter.insert(users, {"email": "ana@example.com"})
        >>> print(record.id)  # String ObjectId
    """

    def __init__(
        self,
        connection_url: Optional[str] = None,
        database_name: Optional[str] = None,
    ) -> None:
        """
        Initialize MongoDB adapter.

        Args:
            connection_url: MongoDB connection URI (defaults to settings)
            database_name: Database name (defaults to settings)
        """
        super().__init__()
        self._connection_url = connection_url or settings.MONGODB_URL
        self._database_name = database_name or settings.MONGODB_DB
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None

    # ==========================================================================
    # ID AND QUERY HELPERS
    # ==========================================================================

    @staticmethod
    def _deserialize_id(entity: EntityDescriptor, id_value: Any) -> ObjectId:
        """
        Convert a string id to an ObjectId.

        Raises:
            InvalidIdError: If the value is not a valid ObjectId
        """
        if isinstance(id_value, ObjectId):
            return id_value
        try:
            return ObjectId(str(id_value))
        except (InvalidId, TypeError):
            raise InvalidIdError(
                resource_type=entity.name,
                resource_id=id_value,
            ) from None

    @staticmethod
    def _to_record(entity: EntityDescriptor, document: Dict[str, Any]) -> Record:
        """
        Convert a stored document to a Record.

        Keys that are not declared fields (e.g. a legacy `__v`) are dropped.
        """
        attributes = {
            name: document[name]
            for name in entity.field_names
            if document.get(name) is not None
        }
        return Record(
            id=str(document["_id"]),
            attributes=attributes,
            created_at=document.get(CREATED_AT_FIELD),
        )

    @staticmethod
    def build_search_query(
        text_fields: Sequence[str],
        substring: str,
    ) -> Dict[str, Any]:
        """
        Build the `$or` filter for a free-text search.

        The substring is regex-escaped so it matches literally. With no
        text fields the filter is empty and matches every document.
        """
        if not text_fields:
            return {}

        pattern = {"$regex": re.escape(substring), "$options": "i"}
        return {"$or": [{name: dict(pattern)} for name in text_fields]}

    def _collection(self, entity: EntityDescriptor) -> AsyncIOMotorCollection:
        if self._database is None:
            raise RuntimeError("Database not connected")
        return self._database[entity.collection]

    @asynccontextmanager
    async def _guard(
        self,
        entity: EntityDescriptor,
        operation: str,
    ) -> AsyncIterator[None]:
        """Translate driver errors into application errors."""
        try:
            yield
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key on {operation} '{entity.name}': {e}")
            raise ConflictError(
                message=f"Duplicate value for a unique field of {entity.name}",
                resource_type=entity.name,
                fields=[f.name for f in entity.unique_fields],
            ) from e
        except PyMongoError as e:
            logger.error(f"MongoDB {operation} on '{entity.name}' failed: {e}")
            raise PersistenceError(operation=operation) from e

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize MongoDB connection and ensure unique indexes.
        """
        try:
            self._client = AsyncIOMotorClient(
                self._connection_url,
                maxPoolSize=settings.DB_POOL_SIZE,
                minPoolSize=1,
                maxIdleTimeMS=settings.DB_POOL_TIMEOUT * 1000,
                tz_aware=True,
            )
            self._database = self._client[self._database_name]

            # Verify connection
            await self._client.admin.command("ping")

            for entity in self.entities:
                for descriptor in entity.unique_fields:
                    await self._database[entity.collection].create_index(
                        [(descriptor.name, ASCENDING)],
                        unique=True,
                    )

            logger.info(
                f"MongoDB adapter connected to {self._database_name}"
            )

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise DatabaseConnectionError(f"MongoDB connection failed: {e}")

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB adapter disconnected")

    async def health_check(self) -> bool:
        try:
            if self._client is not None:
                await self._client.admin.command("ping")
                return True
            return False
        except Exception as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def insert(
        self,
        entity: EntityDescriptor,
        attributes: Dict[str, Any],
    ) -> Record:
        collection = self._collection(entity)
        document = dict(attributes)
        document[CREATED_AT_FIELD] = utc_now()

        async with self._guard(entity, "insert"):
            result = await collection.insert_one(document)

        document["_id"] = result.inserted_id
        return self._to_record(entity, document)

    async def find_all(self, entity: EntityDescriptor) -> List[Record]:
        collection = self._collection(entity)

        async with self._guard(entity, "find_all"):
            documents = await collection.find({}).to_list(length=None)
        return [self._to_record(entity, doc) for doc in documents]

    async def find_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
    ) -> Optional[Record]:
        collection = self._collection(entity)
        object_id = self._deserialize_id(entity, id)

        async with self._guard(entity, "find_by_id"):
            document = await collection.find_one({"_id": object_id})
        return self._to_record(entity, document) if document else None

    async def update_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
        attributes: Dict[str, Any],
    ) -> Optional[Record]:
        collection = self._collection(entity)
        object_id = self._deserialize_id(entity, id)

        # Never touch the key or the creation timestamp
        data = {
            k: v for k, v in attributes.items()
            if k not in ("_id", CREATED_AT_FIELD)
        }

        async with self._guard(entity, "update"):
            if data:
                document = await collection.find_one_and_update(
                    {"_id": object_id},
                    {"$set": data},
                    return_document=ReturnDocument.AFTER,
                )
            else:
                document = await collection.find_one({"_id": object_id})
        return self._to_record(entity, document) if document else None

    async def delete_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
    ) -> bool:
        collection = self._collection(entity)
        object_id = self._deserialize_id(entity, id)

        async with self._guard(entity, "delete"):
            result = await collection.delete_one({"_id": object_id})
        return result.deleted_count > 0

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    async def find_where_any_text_field_contains(
        self,
        entity: EntityDescriptor,
        text_fields: Sequence[str],
        substring: str,
    ) -> List[Record]:
        collection = self._collection(entity)
        query = self.build_search_query(text_fields, substring)

        async with self._guard(entity, "search"):
            documents = await collection.find(query).to_list(length=None)
        return [self._to_record(entity, doc) for doc in documents]

    async def exists(
        self,
        entity: EntityDescriptor,
        filters: Dict[str, Any],
        exclude_id: Optional[str] = None,
    ) -> bool:
        collection = self._collection(entity)
        query: Dict[str, Any] = dict(filters)
        if exclude_id is not None:
            query["_id"] = {"$ne": self._deserialize_id(entity, exclude_id)}

        async with self._guard(entity, "exists"):
            count = await collection.count_documents(query, limit=1)
        return count > 0
