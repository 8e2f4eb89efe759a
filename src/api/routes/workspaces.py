"""
Workspace API routes.

A single path dispatches on the HTTP method and ``?action=``:

    GET    /workspaces                                   list (newest first)
    GET    /workspaces?id=                               one workspace
    POST   /workspaces                                   create
    POST   /workspaces?id=&action=invite                 invite a member
    POST   /workspaces?action=accept                     always 400
    PUT    /workspaces?id=                               rename
    PUT    /workspaces?id=&action=updateMember&memberId= change role/permissions
    DELETE /workspaces?id=                               delete
    DELETE /workspaces?id=&action=removeMember&memberId= remove a member
"""

import logging
from typing import Any, TypeVar

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.api.dependencies import CurrentUser, get_workspace_service
from src.core.handlers import format_validation_errors
from src.exceptions import InvalidInputError, ValidationError
from src.models.workspace import Workspace
from src.schemas.common import ok
from src.schemas.workspace import (
    InviteRequest,
    MemberUpdate,
    WorkspaceCreate,
    WorkspaceMemberResponse,
    WorkspaceRename,
    WorkspaceResponse,
)
from src.services.workspace_service import WorkspaceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workspaces", tags=["Workspaces"])

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _parse(schema: type[SchemaT], body: Any) -> SchemaT:
    try:
        return schema.model_validate(body if isinstance(body, dict) else {})
    except PydanticValidationError as e:
        raise ValidationError(format_validation_errors(e.errors())) from e


def _serialize(workspace: Workspace) -> dict[str, Any]:
    return WorkspaceResponse.model_validate(workspace).model_dump(mode="json", by_alias=True)


def _require_id(workspace_id: str | None) -> str:
    if not workspace_id:
        raise InvalidInputError(field="id", message="Workspace ID required")
    return workspace_id


def _body_value(body: Any, key: str) -> Any:
    return body.get(key) if isinstance(body, dict) else None


@router.get("", summary="List workspaces or get one")
async def read_workspaces(
    current_user: CurrentUser,
    workspace_id: str | None = Query(default=None, alias="id"),
    service: WorkspaceService = Depends(get_workspace_service),
) -> dict[str, Any]:
    if workspace_id:
        return ok(_serialize(await service.get_workspace(workspace_id, current_user)))

    workspaces = await service.list_workspaces(current_user)
    return ok([_serialize(workspace) for workspace in workspaces])


@router.post("", summary="Create a workspace or invite a member")
async def post_workspaces(
    response: Response,
    current_user: CurrentUser,
    workspace_id: str | None = Query(default=None, alias="id"),
    action: str | None = Query(default=None),
    body: Any = Body(default=None),
    service: WorkspaceService = Depends(get_workspace_service),
) -> dict[str, Any]:
    """
    Create a workspace (201), or with ``action=invite`` add a pending member.

    The invite response carries the workspace with its members and the new
    member, whose id is the invitation token.
    """
    if action == "invite":
        workspace_id = _require_id(workspace_id)
        if not _body_value(body, "email"):
            raise InvalidInputError(field="email", message="Email required")

        data = _parse(InviteRequest, body)
        workspace, member = await service.invite_member(workspace_id, data, current_user)
        return ok(
            {
                "message": "Invitation sent",
                "workspace": _serialize(workspace),
                "member": WorkspaceMemberResponse.model_validate(member).model_dump(
                    mode="json", by_alias=True
                ),
            }
        )

    if action == "accept":
        raise InvalidInputError(field="action", message="Use the invitation link to accept")

    if not str(_body_value(body, "name") or "").strip():
        raise InvalidInputError(field="name", message="Workspace name required")

    data = _parse(WorkspaceCreate, body)
    workspace = await service.create_workspace(data.name, current_user)
    response.status_code = status.HTTP_201_CREATED
    return ok(_serialize(workspace))


@router.put("", summary="Rename a workspace or update a member")
async def put_workspaces(
    current_user: CurrentUser,
    workspace_id: str | None = Query(default=None, alias="id"),
    action: str | None = Query(default=None),
    member_id: str | None = Query(default=None, alias="memberId"),
    body: Any = Body(default=None),
    service: WorkspaceService = Depends(get_workspace_service),
) -> dict[str, Any]:
    workspace_id = _require_id(workspace_id)

    if action == "updateMember":
        data = _parse(MemberUpdate, body)
        workspace = await service.update_member(workspace_id, member_id, data, current_user)
        return ok(_serialize(workspace))

    data = _parse(WorkspaceRename, body)
    workspace = await service.rename_workspace(workspace_id, data.name, current_user)
    return ok(_serialize(workspace))


@router.delete("", summary="Delete a workspace or remove a member")
async def delete_workspaces(
    current_user: CurrentUser,
    workspace_id: str | None = Query(default=None, alias="id"),
    action: str | None = Query(default=None),
    member_id: str | None = Query(default=None, alias="memberId"),
    service: WorkspaceService = Depends(get_workspace_service),
) -> dict[str, Any]:
    workspace_id = _require_id(workspace_id)

    if action == "removeMember":
        workspace = await service.remove_member(workspace_id, member_id, current_user)
        return ok(_serialize(workspace))

    await service.delete_workspace(workspace_id, current_user)
    return ok({"message": "Workspace deleted"})
