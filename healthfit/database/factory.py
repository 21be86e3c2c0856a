# ==============================================================================
# DATABASE FACTORY - Adapter Instantiation & Lifecycle Management
# ==============================================================================
# Picks the adapter for the configured backend and wires entities into it
# ==============================================================================

from __future__ import annotations

import logging
from typing import Iterable, Optional

from healthfit.core.settings import DatabaseType, Settings, settings as default_settings
from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter
from healthfit.database.adapters.mongodb_adapter import MongoDBAdapter
from healthfit.database.adapters.sqlite_adapter import SQLiteAdapter
from healthfit.entities.fields import EntityDescriptor

logger = logging.getLogger(__name__)


class DatabaseFactory:
    """
    Factory for creating and managing database adapters.

    Holds no adapter cache: the application owns the adapter it gets
    back (stored on `app.state`), so separate apps (and tests) never
    share connections.

    Example:
        >>> adapter = DatabaseFactory.create_adapter(DatabaseType.SQLITE)
        >>> await DatabaseFactory.initialize(adapter, registry)
        >>> ...
        >>> await DatabaseFactory.shutdown(adapter)
    """

    @staticmethod
    def create_adapter(
        db_type: Optional[DatabaseType] = None,
        config: Optional[Settings] = None,
        **kwargs,
    ) -> BaseDatabaseAdapter:
        """
        Create the adapter for a database type.

        Args:
            db_type: Database type (defaults to config.DATABASE_TYPE)
            config: Settings to read connection details from
            **kwargs: Overrides
                - database_url: SQLite connection URL
                - connection_url: MongoDB connection URL
                - database_name: MongoDB database name

        Returns:
            Unconnected database adapter

        Raises:
            ValueError: If database type is not supported
        """
        config = config or default_settings
        db_type = db_type or config.DATABASE_TYPE

        adapter: BaseDatabaseAdapter

        if db_type == DatabaseType.SQLITE:
            adapter = SQLiteAdapter(
                database_url=kwargs.get("database_url") or config.sqlite_async_url
            )
            logger.info("Created SQLite adapter")

        elif db_type == DatabaseType.MONGODB:
            adapter = MongoDBAdapter(
                connection_url=kwargs.get("connection_url") or config.MONGODB_URL,
                database_name=kwargs.get("database_name") or config.MONGODB_DB,
            )
            logger.info("Created MongoDB adapter")

        else:
            raise ValueError(f"Unsupported database type: {db_type}")

        return adapter

    @staticmethod
    def register_entities(
        adapter: BaseDatabaseAdapter,
        entities: Iterable[EntityDescriptor],
    ) -> None:
        """Register every entity with the adapter."""
        count = 0
        for entity in entities:
            adapter.register_entity(entity)
            count += 1
        logger.info(f"Registered {count} entities with adapter")

    @staticmethod
    async def initialize(
        adapter: BaseDatabaseAdapter,
        entities: Optional[Iterable[EntityDescriptor]] = None,
    ) -> BaseDatabaseAdapter:
        """
        Register entities (if given) and connect.

        Should be called at application startup.

        Raises:
            DatabaseConnectionError: If connection fails
        """
        if entities is not None:
            DatabaseFactory.register_entities(adapter, entities)

        await adapter.connect()
        logger.info(f"Database initialized: {type(adapter).__name__}")
        return adapter

    @staticmethod
    async def shutdown(adapter: Optional[BaseDatabaseAdapter]) -> None:
        """
        Close the adapter's connections.

        Errors are logged, not raised, so shutdown always completes.
        """
        if adapter is None:
            return
        try:
            await adapter.disconnect()
        except Exception as e:
            logger.error(f"Error disconnecting {type(adapter).__name__}: {e}")
        logger.info("All database connections closed")

    @staticmethod
    async def health_check(adapter: Optional[BaseDatabaseAdapter]) -> bool:
        if adapter is None:
            return False
        try:
            return await adapter.health_check()
        except Exception:
            return False
