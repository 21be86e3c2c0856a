# ==============================================================================
# MAIN API ROUTER - Route Aggregation
# ==============================================================================
# Combines the health endpoint and one router per registered entity
# ==============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter

from healthfit.api.dependencies import DatabaseDep
from healthfit.api.resources import build_resource_router
from healthfit.core.settings import settings
from healthfit.database.factory import DatabaseFactory
from healthfit.entities.registry import EntityRegistry
from healthfit.schemas.base import HealthResponse

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "Health & Fitness API is running"


def build_api_router(registry: EntityRegistry, prefix: str = "") -> APIRouter:
    """
    Create the API router for every entity in the registry.

    Args:
        registry: Entities to expose
        prefix: Route prefix (e.g. "/api")

    Returns:
        Router ready to be included by the application
    """
    api_router = APIRouter(prefix=prefix)

    @api_router.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
        description="Check application and database health.",
    )
    async def health_check(adapter: DatabaseDep) -> HealthResponse:
        db_healthy = await DatabaseFactory.health_check(adapter)

        return HealthResponse(
            status="OK",
            message=HEALTH_MESSAGE,
            version=settings.APP_VERSION,
            database="connected" if db_healthy else "disconnected",
        )

    for entity in registry:
        api_router.include_router(build_resource_router(entity))

    logger.info(f"Mounted {len(registry)} resources under '{prefix or '/'}'")
    return api_router
