# ==============================================================================
# SCHEMAS PACKAGE INITIALIZATION
# ==============================================================================

from healthfit.schemas.base import (
    BaseSchema,
    HealthResponse,
    MessageResponse,
    Record,
)
from healthfit.schemas.payloads import PayloadSchema, payload_model

__all__ = [
    "BaseSchema",
    "HealthResponse",
    "MessageResponse",
    "Record",
    "PayloadSchema",
    "payload_model",
]
