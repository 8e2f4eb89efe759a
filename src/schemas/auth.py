"""
Authentication Pydantic schemas for API request/response handling.

This module provides:
- Registration and login request schemas
- Google sign-in request schema
- Authentication response (user + token)
"""

from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.core.security import MIN_PASSWORD_LENGTH
from src.schemas.common import CamelModel
from src.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """
    Schema for ``POST /auth/register``.

    Attributes:
        email: User's email address (normalized to lowercase)
        password: Plain password, at least 6 characters
        full_name: Optional display name
    """

    email: EmailStr = Field(description="User's email address")
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, description="User's password")
    full_name: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginRequest(BaseModel):
    """
    Schema for user login request.

    Attributes:
        email: User's email address
        password: User's password
    """

    email: EmailStr = Field(description="User's email address")
    password: str = Field(min_length=1, description="User's password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class GoogleAuthRequest(CamelModel):
    """
    Schema for ``POST /auth/google``.

    Exactly one flow is used:
    - ``credential``: a Google ID token, verified with the tokeninfo endpoint
    - ``access_token``: an OAuth access token, verified with the userinfo
      endpoint. ``user_info`` is accepted for compatibility but never trusted.

    Attributes:
        credential: Google ID token (JWT)
        access_token: Google OAuth2 access token
        user_info: Profile the client already fetched (ignored for identity)
        client_id: OAuth client id the token must have been issued for
    """

    credential: str | None = None
    access_token: str | None = None
    user_info: dict[str, Any] | None = None
    client_id: str | None = None


class AuthResponse(CamelModel):
    """
    Successful authentication payload.

    Attributes:
        user: Public user representation
        token: JWT access token for the ``Authorization: Bearer`` header
        is_first_login: True for a freshly created account
    """

    user: UserResponse
    token: str
    is_first_login: bool | None = None
