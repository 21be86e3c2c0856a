# ==============================================================================
# SQLITE ADAPTER - SQLAlchemy Async with aiosqlite
# ==============================================================================
# One table per registered entity, built from its field descriptors
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
from uuid import UUID, uuid4

from sqlalchemy import (
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
    and_,
    delete,
    event,
    func,
    insert,
    or_,
    select,
    text,
    update,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.types import UserDefinedType

from healthfit.core.exceptions import (
    ConflictError,
    DatabaseConnectionError,
    InvalidIdError,
    PersistenceError,
)
from healthfit.core.settings import settings
from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter, utc_now
from healthfit.entities.fields import EntityDescriptor, FieldDescriptor, SemanticType
from healthfit.schemas.base import Record

logger = logging.getLogger(__name__)

CASEFOLD_FUNCTION = "py_casefold"


class ExactNumeric(UserDefinedType):
    """
    NUMERIC-affinity column with no driver-side conversion.

    SQLite keeps integers as INTEGER and non-integral values as REAL
    under this affinity, so int64 values round-trip exactly.
    """

    cache_ok = True

    def get_col_spec(self, **kw) -> str:
        return "NUMERIC"


COLUMN_TYPES = {
    SemanticType.TEXT: Text,
    SemanticType.NUMBER: ExactNumeric,
    SemanticType.DATE: lambda: DateTime(timezone=True),
}


def casefold(value: Any) -> Any:
    """Unicode case folding for SQL; NULL and non-text pass through."""
    return value.casefold() if isinstance(value, str) else value


def _register_functions(dbapi_connection, connection_record) -> None:
    # SQLite's own lower()/LIKE only fold ASCII
    dbapi_connection.create_function(
        CASEFOLD_FUNCTION, 1, casefold, deterministic=True
    )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo; everything is stored as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLiteAdapter(BaseDatabaseAdapter):
    """
    SQLite database adapter using SQLAlchemy async with aiosqlite.

    Tables are generated from entity descriptors at registration time:
    a `String(36)` UUID primary key, one column per declared field
    (TEXT -> Text, NUMBER -> NUMERIC, DATE -> DateTime) and a
    `created_at` column. Unique fields get a unique constraint.

    Attributes:
        _database_url: SQLite connection string
        _engine: SQLAlchemy async engine
        _session_factory: Session factory for creating sessions
        _metadata: Table definitions for registered entities

    Example:
        >>> adapter = SQLiteAdapter("sqlite+aiosqlite:///./dev.db")
        >>> adapter.register_entity(goals)
        >>> await adapter.connect()  # Creates tables automatically
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        """
        Initialize SQLite adapter.

        Args:
            database_url: SQLite connection URL (defaults to settings)
        """
        super().__init__()
        url = database_url or settings.SQLITE_URL
        if "sqlite://" in url and "aiosqlite" not in url:
            url = url.replace("sqlite://", "sqlite+aiosqlite://")

        self._database_url = url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._metadata = MetaData()
        self._tables: Dict[str, Table] = {}

    # ==========================================================================
    # TABLE REGISTRY
    # ==========================================================================

    def register_entity(self, entity: EntityDescriptor) -> None:
        super().register_entity(entity)
        if entity.name in self._tables:
            return

        columns = [Column("id", String(36), primary_key=True)]
        for descriptor in entity.fields:
            columns.append(
                Column(
                    descriptor.name,
                    COLUMN_TYPES[descriptor.semantic_type](),
                    nullable=not descriptor.required,
                    unique=descriptor.unique,
                )
            )
        columns.append(
            Column("created_at", DateTime(timezone=True), nullable=False, index=True)
        )

        self._tables[entity.name] = Table(entity.collection, self._metadata, *columns)
        logger.debug(f"Registered table '{entity.collection}' for '{entity.name}'")

    def _get_table(self, entity: EntityDescriptor) -> Table:
        """
        Raises:
            ValueError: If the entity was never registered
        """
        if entity.name not in self._tables:
            raise ValueError(
                f"Entity '{entity.name}' not registered. "
                f"Available entities: {list(self._tables.keys())}"
            )
        return self._tables[entity.name]

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize database engine and create tables.
        """
        try:
            self._engine = create_async_engine(
                self._database_url,
                echo=settings.DEBUG,
                connect_args={"check_same_thread": False},
            )
            event.listen(self._engine.sync_engine, "connect", _register_functions)

            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            async with self._engine.begin() as conn:
                await conn.run_sync(self._metadata.create_all)

            logger.info(
                f"SQLite adapter connected ({len(self._tables)} tables)"
            )

        except Exception as e:
            logger.error(f"Failed to connect to SQLite: {e}")
            raise DatabaseConnectionError(f"SQLite connection failed: {e}")

    async def disconnect(self) -> None:
        """Close database connections and dispose engine."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("SQLite adapter disconnected")

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"SQLite health check failed: {e}")
            return False

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide transactional session scope.

        Commits on successful exit, rolls back on exception.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError(
                "Database not connected. Call connect() first."
            )

        session: AsyncSession = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def _guard(
        self,
        entity: EntityDescriptor,
        operation: str,
    ) -> AsyncIterator[None]:
        """Translate driver errors into application errors."""
        try:
            yield
        except IntegrityError as e:
            logger.warning(f"Integrity error on {operation} '{entity.name}': {e.orig}")
            raise ConflictError(
                message=f"Duplicate value for a unique field of {entity.name}",
                resource_type=entity.name,
                fields=[f.name for f in entity.unique_fields],
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"SQLite {operation} on '{entity.name}' failed: {e}")
            raise PersistenceError(operation=operation) from e

    # ==========================================================================
    # ROW CONVERSION
    # ==========================================================================

    @staticmethod
    def _check_id(entity: EntityDescriptor, id: str) -> str:
        try:
            UUID(str(id))
        except ValueError:
            raise InvalidIdError(resource_type=entity.name, resource_id=id) from None
        return str(id)

    @staticmethod
    def _from_column(descriptor: FieldDescriptor, value: Any) -> Any:
        # NUMERIC affinity already returns whole numbers as ints
        if descriptor.semantic_type is SemanticType.DATE:
            return _as_utc(value)
        return value

    def _to_record(self, entity: EntityDescriptor, row: Any) -> Record:
        mapping = row._mapping
        attributes = {}
        for descriptor in entity.fields:
            value = mapping[descriptor.name]
            if value is not None:
                attributes[descriptor.name] = self._from_column(descriptor, value)

        return Record(
            id=mapping["id"],
            attributes=attributes,
            created_at=_as_utc(mapping["created_at"]),
        )

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def insert(
        self,
        entity: EntityDescriptor,
        attributes: Dict[str, Any],
    ) -> Record:
        table = self._get_table(entity)
        record = Record(
            id=str(uuid4()),
            attributes=dict(attributes),
            created_at=utc_now(),
        )

        async with self._guard(entity, "insert"):
            async with self.session() as session:
                await session.execute(
                    insert(table).values(
                        id=record.id,
                        created_at=record.created_at,
                        **record.attributes,
                    )
                )
                # Hand back what the column stored, not what was sent
                result = await session.execute(
                    select(table).where(table.c.id == record.id)
                )
                return self._to_record(entity, result.one())

    async def find_all(self, entity: EntityDescriptor) -> List[Record]:
        table = self._get_table(entity)

        async with self._guard(entity, "find_all"):
            async with self.session() as session:
                result = await session.execute(
                    select(table).order_by(table.c.created_at, table.c.id)
                )
                return [self._to_record(entity, row) for row in result.all()]

    async def find_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
    ) -> Optional[Record]:
        table = self._get_table(entity)
        id = self._check_id(entity, id)

        async with self._guard(entity, "find_by_id"):
            async with self.session() as session:
                result = await session.execute(select(table).where(table.c.id == id))
                row = result.first()
                return self._to_record(entity, row) if row else None

    async def update_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
        attributes: Dict[str, Any],
    ) -> Optional[Record]:
        table = self._get_table(entity)
        id = self._check_id(entity, id)

        async with self._guard(entity, "update"):
            async with self.session() as session:
                if attributes:
                    result = await session.execute(
                        update(table).where(table.c.id == id).values(**attributes)
                    )
                    if result.rowcount == 0:
                        return None

                result = await session.execute(select(table).where(table.c.id == id))
                row = result.first()
                return self._to_record(entity, row) if row else None

    async def delete_by_id(
        self,
        entity: EntityDescriptor,
        id: str,
    ) -> bool:
        table = self._get_table(entity)
        id = self._check_id(entity, id)

        async with self._guard(entity, "delete"):
            async with self.session() as session:
                result = await session.execute(delete(table).where(table.c.id == id))
                return result.rowcount > 0

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    async def find_where_any_text_field_contains(
        self,
        entity: EntityDescriptor,
        text_fields: Sequence[str],
        substring: str,
    ) -> List[Record]:
        table = self._get_table(entity)
        needle = casefold(substring)

        # Both sides folded in Python; autoescape makes % and _ literal
        conditions = [
            getattr(func, CASEFOLD_FUNCTION)(table.c[name], type_=Text).contains(
                needle, autoescape=True
            )
            for name in text_fields
            if name in table.c
        ]

        query = select(table)
        if conditions:
            query = query.where(or_(*conditions))
        query = query.order_by(table.c.created_at, table.c.id)

        async with self._guard(entity, "search"):
            async with self.session() as session:
                result = await session.execute(query)
                return [self._to_record(entity, row) for row in result.all()]

    async def exists(
        self,
        entity: EntityDescriptor,
        filters: Dict[str, Any],
        exclude_id: Optional[str] = None,
    ) -> bool:
        table = self._get_table(entity)

        conditions = [
            table.c[key] == value
            for key, value in filters.items()
            if key in table.c
        ]
        if exclude_id is not None:
            conditions.append(table.c.id != str(exclude_id))

        query = select(table.c.id).limit(1)
        if conditions:
            query = query.where(and_(*conditions))

        async with self._guard(entity, "exists"):
            async with self.session() as session:
                result = await session.execute(query)
                return result.first() is not None
