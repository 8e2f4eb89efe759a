"""
User Pydantic schemas for API request/response handling.

This module provides:
- Public user representation
- Profile update schema (whitelisted fields only)
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from src.schemas.common import CamelModel


class UserResponse(CamelModel):
    """
    Public user representation returned by auth endpoints.

    The password hash never leaves the server.
    """

    id: str
    email: str
    full_name: str | None = Field(default=None, alias="full_name")
    avatar: str | None = None
    auth_provider: str
    language: str
    currency: str
    theme: str
    blur_values: bool
    price_alerts: bool
    weekly_reports: bool
    email_notifications: bool
    is_first_login: bool
    default_workspace: str | None = Field(
        default=None,
        validation_alias=AliasChoices("default_workspace_id", "defaultWorkspace"),
    )
    last_login: datetime | None = None
    created_date: datetime = Field(alias="created_date")
    updated_date: datetime = Field(alias="updated_date")

    @field_validator("id", "default_workspace", mode="before")
    @classmethod
    def stringify_uuid(cls, value: Any) -> Any:
        if isinstance(value, uuid.UUID):
            return str(value)
        return value


class UserUpdate(CamelModel):
    """
    Schema for ``PUT/PATCH /auth/me``.

    Only these fields may change; anything else in the body is ignored.
    """

    full_name: str | None = Field(default=None, alias="full_name", max_length=255)
    language: str | None = Field(default=None, max_length=10)
    currency: str | None = Field(default=None, max_length=10)
    theme: str | None = Field(default=None, max_length=20)
    blur_values: bool | None = None
    price_alerts: bool | None = None
    weekly_reports: bool | None = None
    email_notifications: bool | None = None
