"""
Workspace, membership and invitation schemas.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator

from src.models.enums import PERMISSION_KEYS, MemberRole, MemberStatus
from src.schemas.common import CamelModel


def _clean_permissions(value: dict[str, Any] | None) -> dict[str, bool] | None:
    if value is None:
        return None
    return {k: bool(v) for k, v in value.items() if k in PERMISSION_KEYS}


class _UUIDFields(CamelModel):
    @field_validator("id", "workspace_id", "user_id", "owner_id", mode="before", check_fields=False)
    @classmethod
    def stringify_uuid(cls, value: Any) -> Any:
        if isinstance(value, uuid.UUID):
            return str(value)
        return value


# =============================================================================
# Responses
# =============================================================================


class WorkspaceMemberResponse(_UUIDFields):
    """One member row as returned to clients. ``id`` is the invitation token."""

    id: str
    workspace_id: str
    user_id: str | None = None
    email: str
    role: MemberRole
    status: MemberStatus
    permissions: dict[str, bool]
    created_date: datetime = Field(alias="created_date")


class WorkspaceResponse(_UUIDFields):
    """Workspace with its ordered members."""

    id: str
    name: str
    owner_id: str
    members: list[WorkspaceMemberResponse]
    created_date: datetime = Field(alias="created_date")
    updated_date: datetime = Field(alias="updated_date")


class InvitationResponse(CamelModel):
    """
    Public invitation lookup result.

    Attributes:
        id: Invitation token (member id)
        workspace_id: Workspace being joined (None for legacy sharing records)
        workspace_name: Display name of the workspace
        invited_email: E-mail the invitation was sent to
        role: Role granted on acceptance
        permissions: Feature flags granted on acceptance
        invited_by: E-mail of the workspace owner
        created_date: When the invitation was created
    """

    id: str
    workspace_id: str | None = None
    workspace_name: str
    invited_email: str
    role: str
    permissions: dict[str, bool]
    invited_by: str | None = None
    created_date: datetime = Field(alias="created_date")


# =============================================================================
# Requests
# =============================================================================


class WorkspaceCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Workspace name is required")
        return value


class WorkspaceRename(CamelModel):
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Workspace name is required")
        return value


class InviteRequest(CamelModel):
    """
    Body of ``POST /workspaces?id=<workspace>&action=invite``.

    Attributes:
        email: E-mail to invite (normalized to lowercase)
        role: admin | editor | viewer (default viewer); owner cannot be granted
        permissions: Partial feature flags; missing flags take the defaults
    """

    email: EmailStr
    role: MemberRole = MemberRole.viewer
    permissions: dict[str, Any] | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("role")
    @classmethod
    def reject_owner(cls, value: MemberRole) -> MemberRole:
        if value == MemberRole.owner:
            raise ValueError("The owner role cannot be granted")
        return value

    @field_validator("permissions")
    @classmethod
    def clean_permissions(cls, value: dict[str, Any] | None) -> dict[str, bool] | None:
        return _clean_permissions(value)


class MemberUpdate(CamelModel):
    """Body of ``PUT /workspaces?id=&action=updateMember&memberId=``."""

    role: MemberRole | None = None
    permissions: dict[str, Any] | None = None

    @field_validator("role")
    @classmethod
    def reject_owner(cls, value: MemberRole | None) -> MemberRole | None:
        if value == MemberRole.owner:
            raise ValueError("The owner role cannot be granted")
        return value

    @field_validator("permissions")
    @classmethod
    def clean_permissions(cls, value: dict[str, Any] | None) -> dict[str, bool] | None:
        return _clean_permissions(value)
