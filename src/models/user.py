"""
User model.

A user is identified by a unique lowercase e-mail. That e-mail is also the
owner key stamped on every record the user owns (``created_by``), which is
why users are never hard-deleted.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base
from src.models.enums import AuthProvider
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """
    User model for authentication, preferences and profile.

    Attributes:
        id: UUID primary key
        email: Unique lowercase e-mail (the owner key)
        password_hash: Argon2id hash; NULL for accounts created via Google
        full_name: Display name
        google_id: Google subject id once the account is linked
        avatar: Picture URL from Google
        auth_provider: 'local' or 'google'
        language / currency / theme: UI preferences
        blur_values / price_alerts / weekly_reports / email_notifications:
            notification and privacy flags
        is_first_login: True until the first Google sign-in completes
        default_workspace_id: Workspace created at sign-up
        last_login: Timestamp of last successful login
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Google identity
    google_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    auth_provider: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AuthProvider.local.value,
    )

    # Preferences
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="en")
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    theme: Mapped[str] = mapped_column(String(20), nullable=False, default="dark")

    # Notification / privacy flags
    blur_values: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    price_alerts: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    weekly_reports: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    email_notifications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_first_login: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Loose reference; the workspace is created after the user row
    default_workspace_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )

    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    @property
    def owner_key(self) -> str:
        """Lowercase e-mail used as ``created_by`` for owned records."""
        return self.email.strip().lower()

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email})"
