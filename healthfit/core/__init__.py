# ==============================================================================
# CORE PACKAGE INITIALIZATION
# ==============================================================================
# Core utilities: Settings, Exceptions, Logging
# ==============================================================================

"""
Core Module
===========

- settings: Environment configuration management
- exceptions: Error hierarchy mapped to HTTP status codes
- logger: Root logger configuration
"""

from healthfit.core.settings import settings, get_settings, DatabaseType
from healthfit.core.exceptions import (
    AppException,
    ConflictError,
    InvalidIdError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "settings",
    "get_settings",
    "DatabaseType",
    "AppException",
    "ConflictError",
    "InvalidIdError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
