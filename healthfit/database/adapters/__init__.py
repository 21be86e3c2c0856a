# ==============================================================================
# DATABASE ADAPTERS PACKAGE
# ==============================================================================

"""
Database Adapters
=================

Provides unified interface implementations for different databases:
- BaseDatabaseAdapter: Abstract interface definition
- SQLiteAdapter: SQLite using SQLAlchemy async + aiosqlite
- MongoDBAdapter: MongoDB using Motor async driver
"""

from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter
from healthfit.database.adapters.mongodb_adapter import MongoDBAdapter
from healthfit.database.adapters.sqlite_adapter import SQLiteAdapter

__all__ = [
    "BaseDatabaseAdapter",
    "MongoDBAdapter",
    "SQLiteAdapter",
]
