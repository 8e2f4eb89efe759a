"""
FastAPI dependencies for authentication and request context.

This module provides:
- Current user extraction from JWT (hard fail: 401)
- Workspace selection from ``X-Workspace-Id`` (soft fail: no context)
- Owner context resolution per entity collection
- Service instances bound to the request's database session
"""

import logging
from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.database import get_db
from src.core.security import read_access_token
from src.exceptions import AuthenticationError
from src.models.user import User
from src.models.workspace import Workspace
from src.repositories.user_repository import UserRepository
from src.services import (
    AuthService,
    EntityService,
    InvitationService,
    OwnerContext,
    OwnershipService,
    UserService,
    WorkspaceService,
)
from src.services.entity_registry import EntityDefinition, get_entity_definition

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI - this adds the padlock icon
security = HTTPBearer(
    scheme_name="Bearer",
    description="Enter your JWT access token",
    auto_error=False,
)

DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    """
    Dependency to extract and validate current user from JWT access token.

    The token only names the user; the row is reloaded on every request.

    Raises:
        AuthenticationError (401): Token missing, invalid, or user unusable

    Usage:
        @router.get("/me")
        async def me(current_user: CurrentUser):
            return {"email": current_user.email}
    """
    if not credentials or not credentials.credentials:
        logger.warning("Authentication failed: missing Bearer token")
        raise AuthenticationError("Missing authentication credentials")

    user_id = read_access_token(credentials.credentials)

    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        logger.warning(f"Authentication failed: user not found - {user_id}")
        raise AuthenticationError("User not found")

    # Everything a user owns is keyed by e-mail
    if not user.email or not user.email.strip():
        logger.error(f"Authentication failed: user {user_id} has no e-mail")
        raise AuthenticationError("User account is missing an e-mail address")

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_workspace_context(
    current_user: CurrentUser,
    db: DbSession,
    x_workspace_id: Annotated[str | None, Header()] = None,
) -> Workspace | None:
    """
    Workspace selected by the ``X-Workspace-Id`` header.

    Soft fail: a malformed id, an unknown workspace or one the caller does
    not belong to yields None and the request proceeds on the caller's own
    (or legacy-shared) data.
    """
    return await WorkspaceService(db).get_selected_workspace(x_workspace_id, current_user)


SelectedWorkspace = Annotated[Workspace | None, Depends(get_workspace_context)]


def get_entity_definition_dep(collection: str) -> EntityDefinition:
    """Resolve the ``{collection}`` path segment; unknown collection is 404."""
    return get_entity_definition(collection)


EntityDefinitionDep = Annotated[EntityDefinition, Depends(get_entity_definition_dep)]


async def get_entity_owner_context(
    definition: EntityDefinitionDep,
    current_user: CurrentUser,
    workspace: SelectedWorkspace,
    db: DbSession,
) -> OwnerContext:
    """Owner context for an entity collection request."""
    return await OwnershipService(db).resolve(current_user, definition.name, workspace)


async def get_request_owner_context(
    current_user: CurrentUser,
    workspace: SelectedWorkspace,
    db: DbSession,
) -> OwnerContext:
    """Owner context independent of any collection (permission map)."""
    return await OwnershipService(db).resolve(current_user, None, workspace)


EntityOwnerContext = Annotated[OwnerContext, Depends(get_entity_owner_context)]
RequestOwnerContext = Annotated[OwnerContext, Depends(get_request_owner_context)]


# ============================================================================
# Service Dependencies
# ============================================================================


def get_auth_service(db: DbSession) -> AuthService:
    """
    Dependency to get AuthService instance.

    Usage:
        @router.post("/login")
        async def login(auth_service: AuthService = Depends(get_auth_service)):
            user, token = await auth_service.login(...)
    """
    return AuthService(db)


def get_user_service(db: DbSession) -> UserService:
    return UserService(db)


def get_entity_service(db: DbSession) -> EntityService:
    return EntityService(db)


def get_workspace_service(db: DbSession) -> WorkspaceService:
    return WorkspaceService(db)


def get_invitation_service(db: DbSession) -> InvitationService:
    return InvitationService(db)
