# ==============================================================================
# CUSTOM EXCEPTIONS - Application Error Hierarchy
# ==============================================================================
# Structured exception classes for consistent error handling
# Each exception maps to an HTTP status code
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, List, Optional


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        status_code: HTTP status code to return
        details: Additional context dictionary

    Example:
        >>> raise AppException(
        ...     message="Something went wrong",
        ...     error_code="INTERNAL_ERROR",
        ...     status_code=500
        ... )
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format for JSON response.

        The top-level `message` key is what API clients display.

        Returns:
            Dictionary containing error details
        """
        return {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"status_code={self.status_code})"
        )


# ==============================================================================
# CLIENT DATA EXCEPTIONS
# ==============================================================================

class ValidationError(AppException):
    """
    Raised when a payload violates its entity schema.

    Maps to HTTP 400 Bad Request. `field` names the first offending
    field; `errors` maps every offending field to its message.
    """

    def __init__(
        self,
        message: str = "Validation error",
        field: Optional[str] = None,
        errors: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"validation_errors": errors or {}},
        )
        self.field = field
        self.errors = errors or {}


class ConflictError(AppException):
    """
    Raised when a unique field value is already taken.

    Maps to HTTP 400 Bad Request.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        resource_type: Optional[str] = None,
        fields: Optional[List[str]] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if resource_type:
            details["resource_type"] = resource_type
        if fields:
            details["fields"] = list(fields)

        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=400,
            details=details,
        )
        self.fields = list(fields or [])


# ==============================================================================
# RESOURCE EXCEPTIONS
# ==============================================================================

class NotFoundError(AppException):
    """
    Raised when a requested record does not exist.

    Maps to HTTP 404 Not Found.

    Attributes:
        resource_type: Type of resource that was not found
        resource_id: Identifier of the missing resource
    """

    def __init__(
        self,
        message: str = "Item not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ) -> None:
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = str(resource_id)

        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details=details,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidIdError(NotFoundError):
    """
    Raised when an identifier is not well-formed for the storage backend.

    A malformed id can never resolve to a record, so it is reported
    with the same 404 status as a missing one.
    """

    def __init__(
        self,
        message: str = "Item not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ) -> None:
        super().__init__(
            message=message,
            resource_type=resource_type,
            resource_id=resource_id,
        )
        self.error_code = "INVALID_ID"


# ==============================================================================
# PERSISTENCE EXCEPTIONS
# ==============================================================================

class PersistenceError(AppException):
    """
    Raised when a storage operation fails.

    Maps to HTTP 500. The message sent to clients is always generic;
    the driver error is only logged.
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
    ) -> None:
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            error_code="PERSISTENCE_ERROR",
            status_code=500,
            details=details,
        )


class DatabaseConnectionError(PersistenceError):
    """
    Raised when the database connection cannot be established.
    """

    def __init__(
        self,
        message: str = "Failed to connect to database",
    ) -> None:
        super().__init__(message=message, operation="connect")
        self.error_code = "DATABASE_CONNECTION_ERROR"
        self.status_code = 503


# ==============================================================================
# REGISTRY EXCEPTIONS
# ==============================================================================

class SchemaError(Exception):
    """
    Raised for an invalid entity or field declaration.

    Schema errors happen while the registry is being built at startup
    and are not request failures, so they are not AppExceptions.
    """


class DuplicateEntityError(SchemaError):
    """Raised when an entity name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Entity '{name}' is already registered")
        self.name = name


class EntityNotRegisteredError(SchemaError, LookupError):
    """Raised when resolving an entity name that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Entity '{name}' is not registered")
        self.name = name


class RegistryFrozenError(SchemaError):
    """Raised when registering into a registry whose routes are installed."""
