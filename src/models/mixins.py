"""
Reusable mixins for database models.

This module provides mixins for common model patterns:
- TimestampMixin: created_date and updated_date timestamps
- OwnedMixin: created_by owner key used to scope every financial record
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    """
    Mixin to add timestamp columns to models.

    Adds:
    - created_date: Timestamp when record was created (auto-set)
    - updated_date: Timestamp when record was last updated (auto-updated)

    Both timestamps use UTC timezone. ``created_date`` is the default sort
    key of every entity list, newest first.
    """

    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        index=True,
    )

    updated_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )


class OwnedMixin:
    """
    Mixin for records that belong to an owner.

    Adds:
    - created_by: effective owner key the record is scoped to: a
      lowercase e-mail for personal data, ``workspace:<uuid>`` for
      workspace data. Under legacy sharing it is the inviter's e-mail,
      never the caller's.

    Usage:
        class Budget(Base, TimestampMixin, OwnedMixin):
            __tablename__ = "budgets"
    """

    created_by: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
