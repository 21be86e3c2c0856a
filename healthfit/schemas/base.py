# ==============================================================================
# BASE SCHEMAS - Records and Service Responses
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from healthfit.entities.fields import CREATED_AT_FIELD, ID_FIELD


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )


class Record(BaseSchema):
    """
    One persisted instance of an entity.

    Attributes:
        id: Storage-assigned identifier, immutable
        attributes: Declared field values
        created_at: Creation timestamp, immutable
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Record identifier")
    attributes: Dict[str, Any] = Field(
        default_factory=dict,
        description="Field name -> value"
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Record creation timestamp"
    )

    def to_document(self) -> Dict[str, Any]:
        """
        Flatten into the wire representation.

        Returns:
            {"_id": ..., <fields>..., "createdAt": ...}
        """
        document: Dict[str, Any] = {ID_FIELD: self.id}
        document.update(self.attributes)
        document[CREATED_AT_FIELD] = self.created_at
        return document


class MessageResponse(BaseSchema):
    """Plain confirmation message."""

    message: str


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str = Field(
        ...,
        description="Health status"
    )
    message: str = Field(
        ...,
        description="Human-readable status"
    )
    version: str = Field(
        ...,
        description="Application version"
    )
    database: str = Field(
        ...,
        description="Database connection status"
    )
