# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================

"""
Database Module
===============

Storage abstraction used by the resource service:
- Adapters: SQLite and MongoDB implementations of one interface
- Factory: adapter selection and lifecycle
"""

from healthfit.database.factory import DatabaseFactory
from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter

__all__ = [
    "DatabaseFactory",
    "BaseDatabaseAdapter",
]
