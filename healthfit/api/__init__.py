# ==============================================================================
# API PACKAGE INITIALIZATION
# ==============================================================================

from healthfit.api.router import build_api_router
from healthfit.api.resources import build_resource_router

__all__ = ["build_api_router", "build_resource_router"]
