# ==============================================================================
# RESOURCE ENDPOINTS - Generic Entity Routes
# ==============================================================================
# One router per registered entity, all built by the same factory
# ==============================================================================

# Endpoint signatures reference the closure-local ServiceDep, so annotations
# must stay evaluated (no `from __future__ import annotations`)

from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Body, Depends, status

from healthfit.api.dependencies import DatabaseDep
from healthfit.entities.fields import EntityDescriptor
from healthfit.schemas.base import MessageResponse
from healthfit.services.resource_service import ResourceService


def build_resource_router(entity: EntityDescriptor) -> APIRouter:
    """
    Build the CRUD + search router for one entity.

    Routes (relative to the API prefix):
        POST   /{entity}                 create
        GET    /{entity}                 list
        GET    /{entity}/search/{query}  search
        GET    /{entity}/{item_id}       get
        PUT    /{entity}/{item_id}       update
        DELETE /{entity}/{item_id}       delete

    Errors are raised as AppExceptions and rendered by the
    application-wide handlers.
    """
    router = APIRouter(prefix=f"/{entity.name}", tags=[entity.name])

    async def get_service(adapter: DatabaseDep) -> ResourceService:
        return ResourceService(entity, adapter)

    ServiceDep = Annotated[ResourceService, Depends(get_service)]

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {entity.name}",
        description=f"Create a new {entity.name} record.",
    )
    async def create_item(
        service: ServiceDep,
        payload: Any = Body(...),
    ) -> Dict[str, Any]:
        record = await service.create(payload)
        return record.to_document()

    @router.get(
        "",
        summary=f"List {entity.name}",
        description=f"Get every {entity.name} record.",
    )
    async def list_items(service: ServiceDep) -> List[Dict[str, Any]]:
        records = await service.list()
        return [record.to_document() for record in records]

    # Declared before /{item_id} so "search" is never taken for an id
    @router.get(
        "/search/{query}",
        summary=f"Search {entity.name}",
        description=(
            f"Case-insensitive substring search over the text fields "
            f"of {entity.name}."
        ),
    )
    async def search_items(
        query: str,
        service: ServiceDep,
    ) -> List[Dict[str, Any]]:
        records = await service.search(query)
        return [record.to_document() for record in records]

    @router.get(
        "/{item_id}",
        summary=f"Get {entity.name} by ID",
    )
    async def get_item(item_id: str, service: ServiceDep) -> Dict[str, Any]:
        record = await service.get_by_id(item_id)
        return record.to_document()

    @router.put(
        "/{item_id}",
        summary=f"Update {entity.name}",
        description="Supplied fields overwrite; omitted fields are kept.",
    )
    async def update_item(
        item_id: str,
        service: ServiceDep,
        payload: Any = Body(...),
    ) -> Dict[str, Any]:
        record = await service.update(item_id, payload)
        return record.to_document()

    @router.delete(
        "/{item_id}",
        response_model=MessageResponse,
        summary=f"Delete {entity.name}",
    )
    async def delete_item(item_id: str, service: ServiceDep) -> Dict[str, str]:
        return await service.delete(item_id)

    return router
