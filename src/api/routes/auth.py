"""
Authentication API routes.

This module provides REST endpoints for:
- User registration
- User login
- Google sign-in
- Current user profile (read and update)
- Effective permissions for the request context
"""

import logging

from fastapi import APIRouter, Depends, Request, status

from src.api.dependencies import (
    CurrentUser,
    RequestOwnerContext,
    get_auth_service,
    get_user_service,
)
from src.core.config import settings
from src.core.rate_limit import limiter
from src.schemas.auth import AuthResponse, GoogleAuthRequest, LoginRequest, RegisterRequest
from src.schemas.common import ApiResponse
from src.schemas.user import UserResponse, UserUpdate
from src.services.auth_service import AuthService
from src.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Register a new account with e-mail and password.

    **Password Requirements:** at least 6 characters.

    A default workspace ("My Workspace") is created for the new account.

    **Rate Limit:** Configurable via RATE_LIMIT_AUTH (default: 50/5minute)
    """,
)
@limiter.limit(settings.rate_limit_auth)
async def register(
    request: Request,
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthResponse]:
    """
    Register a new user.

    Raises:
        400: Invalid e-mail or password too short
        409: E-mail already registered
    """
    user, token = await auth_service.register(data)
    return ApiResponse(
        data=AuthResponse(
            user=UserResponse.model_validate(user),
            token=token,
            is_first_login=True,
        )
    )


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Login with e-mail and password",
)
@limiter.limit(settings.rate_limit_auth)
async def login(
    request: Request,
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthResponse]:
    """
    Authenticate and return a token.

    Raises:
        401: "Invalid email or password" (unknown e-mail or wrong password)
    """
    user, token = await auth_service.login(data)
    return ApiResponse(data=AuthResponse(user=UserResponse.model_validate(user), token=token))


@router.post(
    "/google",
    response_model=ApiResponse[AuthResponse],
    summary="Sign in with Google",
    description="""
    Sign in with a Google ID token (`credential`) or OAuth access token
    (`accessToken`). New accounts get a default workspace; pending workspace
    invitations for the verified e-mail are accepted.
    """,
)
@limiter.limit(settings.rate_limit_auth)
async def google_login(
    request: Request,
    data: GoogleAuthRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> ApiResponse[AuthResponse]:
    user, token, is_first_login = await auth_service.google_login(data)
    return ApiResponse(
        data=AuthResponse(
            user=UserResponse.model_validate(user),
            token=token,
            is_first_login=is_first_login,
        )
    )


@router.get("/me", response_model=ApiResponse[UserResponse], summary="Get current user")
async def get_me(current_user: CurrentUser) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(current_user))


@router.api_route(
    "/me",
    methods=["PUT", "PATCH"],
    response_model=ApiResponse[UserResponse],
    summary="Update current user profile",
    description="""
    Only `full_name`, `language`, `currency`, `theme`, `blurValues`,
    `priceAlerts`, `weeklyReports` and `emailNotifications` can change.
    Other fields in the body are ignored.
    """,
)
async def update_me(
    data: UserUpdate,
    current_user: CurrentUser,
    user_service: UserService = Depends(get_user_service),
) -> ApiResponse[UserResponse]:
    user = await user_service.update_profile(current_user, data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.get(
    "/permissions",
    response_model=ApiResponse[dict[str, bool]],
    summary="Effective permissions",
    description="""
    Permission map for the current request context: every flag is true on
    the caller's own data; inside a workspace or legacy share the grant's
    flags apply, and a grant that is not accepted confers nothing.
    """,
)
async def get_permissions(context: RequestOwnerContext) -> ApiResponse[dict[str, bool]]:
    return ApiResponse(data=UserService.permissions_for(context))
