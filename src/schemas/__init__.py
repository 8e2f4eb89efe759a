"""
Pydantic schemas for request/response validation.
"""

from src.schemas.auth import AuthResponse, GoogleAuthRequest, LoginRequest, RegisterRequest
from src.schemas.common import ApiResponse, CamelModel, ErrorResponse, ok
from src.schemas.user import UserResponse, UserUpdate
from src.schemas.workspace import (
    InvitationResponse,
    InviteRequest,
    MemberUpdate,
    WorkspaceCreate,
    WorkspaceMemberResponse,
    WorkspaceRename,
    WorkspaceResponse,
)

__all__ = [
    "ApiResponse",
    "AuthResponse",
    "CamelModel",
    "ErrorResponse",
    "GoogleAuthRequest",
    "InvitationResponse",
    "InviteRequest",
    "LoginRequest",
    "MemberUpdate",
    "RegisterRequest",
    "UserResponse",
    "UserUpdate",
    "WorkspaceCreate",
    "WorkspaceMemberResponse",
    "WorkspaceRename",
    "WorkspaceResponse",
    "ok",
]
