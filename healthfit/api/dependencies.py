# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies for database access
# ==============================================================================

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from healthfit.database.adapters.base_adapter import BaseDatabaseAdapter


# ==============================================================================
# DATABASE DEPENDENCIES
# ==============================================================================

async def get_adapter(request: Request) -> BaseDatabaseAdapter:
    """
    Get database adapter dependency.

    Returns the adapter owned by the running application.
    """
    return request.app.state.adapter


# Annotated type for database adapter
DatabaseDep = Annotated[BaseDatabaseAdapter, Depends(get_adapter)]
