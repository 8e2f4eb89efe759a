"""
Legacy sharing model.

Before workspaces, an owner shared data by creating a SharedUser record for
an invited e-mail. When a request carries no workspace context, an accepted
record for the caller's e-mail redirects ownership to the inviter.
"""

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, validates

from src.models.base import Base, JSONType
from src.models.enums import MemberStatus
from src.models.mixins import OwnedMixin, TimestampMixin


class SharedUser(Base, TimestampMixin, OwnedMixin):
    """
    Sharing record created by an owner for an invited e-mail.

    Attributes:
        invited_email: E-mail of the person being granted access. Stored
            as supplied, so comparisons must tolerate mixed case.
        display_name: Optional label shown in the owner's settings
        status: pending | accepted | rejected
        permissions: JSON object of feature flags
        created_by: Owner key of the inviter
    """

    __tablename__ = "shared_users"

    invited_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MemberStatus.pending.value,
    )
    permissions: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)

    @validates("invited_email")
    def _reset_status_on_new_invitee(self, key: str, value: str) -> str:
        # A share pointed at someone else needs that person's own acceptance
        previous = self.invited_email
        if previous is not None and previous.strip().lower() != value.strip().lower():
            self.status = MemberStatus.pending.value
        return value
