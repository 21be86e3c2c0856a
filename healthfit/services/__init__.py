# ==============================================================================
# SERVICES PACKAGE INITIALIZATION
# ==============================================================================

"""
Services Module
===============

Business logic layer shared by every entity:
- ResourceService: CRUD and free-text search
- validate_payload: descriptor-driven payload checks
"""

from healthfit.services.resource_service import ResourceService
from healthfit.services.validation import validate_payload

__all__ = [
    "ResourceService",
    "validate_payload",
]
