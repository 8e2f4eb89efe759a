"""
Generic entity API routes.

One set of endpoints serves every registered collection:

    GET    /entities/{collection}?<field>=<value>&sort=&limit=   list
    GET    /entities/{collection}?id=<id>&_single=true           one record
    POST   /entities/{collection}                                create (object or array)
    PUT    /entities/{collection}?id=<id>                        partial update
    PATCH  /entities/{collection}?id=<id>                        partial update
    DELETE /entities/{collection}?id=<id>                        delete

Data is scoped to the owner resolved for the caller (own data, the
selected workspace's owner, or a legacy sharing inviter).
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status

from src.api.dependencies import (
    EntityDefinitionDep,
    EntityOwnerContext,
    get_entity_service,
)
from src.schemas.common import ok
from src.services.entity_service import EntityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entities", tags=["Entities"])


@router.get("/{collection}", summary="List or get records")
async def read_entities(
    request: Request,
    definition: EntityDefinitionDep,
    context: EntityOwnerContext,
    service: EntityService = Depends(get_entity_service),
) -> dict[str, Any]:
    """
    List records; with ``_single=true`` and ``id``, return one record.

    A bare ``id`` without ``_single`` is an ordinary filter and still
    returns an array.
    """
    params = dict(request.query_params)
    record_id = params.get("id")

    if params.get("_single") == "true" and record_id:
        return ok(await service.get(definition, context, record_id))

    return ok(await service.list_records(definition, context, params))


@router.post(
    "/{collection}",
    status_code=status.HTTP_201_CREATED,
    summary="Create one or several records",
)
async def create_entities(
    response: Response,
    definition: EntityDefinitionDep,
    context: EntityOwnerContext,
    body: Any = Body(default=None),
    service: EntityService = Depends(get_entity_service),
) -> dict[str, Any]:
    """Single object: 201. Array: 200 with the created records in order."""
    created = await service.create(definition, context, body)
    if isinstance(created, list):
        response.status_code = status.HTTP_200_OK
    return ok(created)


@router.api_route("/{collection}", methods=["PUT", "PATCH"], summary="Update a record")
async def update_entity(
    definition: EntityDefinitionDep,
    context: EntityOwnerContext,
    record_id: str | None = Query(default=None, alias="id"),
    body: Any = Body(default=None),
    service: EntityService = Depends(get_entity_service),
) -> dict[str, Any]:
    return ok(await service.update(definition, context, record_id, body))


@router.delete("/{collection}", summary="Delete a record")
async def delete_entity(
    definition: EntityDefinitionDep,
    context: EntityOwnerContext,
    record_id: str | None = Query(default=None, alias="id"),
    service: EntityService = Depends(get_entity_service),
) -> dict[str, Any]:
    return ok(await service.delete(definition, context, record_id))
