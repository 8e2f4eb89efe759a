"""
Workspace and WorkspaceMember models.

Members live in their own table, one row per member, so that inviting,
updating and removing are single-row statements. The unique constraint on
(workspace_id, email) is what keeps concurrent invitations consistent.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, JSONType
from src.models.enums import MemberRole, MemberStatus
from src.models.mixins import TimestampMixin


class Workspace(Base, TimestampMixin):
    """
    A shared tenant.

    Attributes:
        id: UUID primary key
        name: Display name
        owner_id: User who created the workspace
        members: Member rows ordered by creation (the owner first)

    Invariant:
        At creation there is exactly one member, with role 'owner',
        ``user_id == owner_id``, status 'accepted' and every permission true.
    """

    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    members: Mapped[list["WorkspaceMember"]] = relationship(
        back_populates="workspace",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkspaceMember.created_date",
        lazy="selectin",
    )

    def get_member(self, member_id: str | uuid.UUID) -> Optional["WorkspaceMember"]:
        """Find a member by member id or by bound user id."""
        key = str(member_id)
        for member in self.members:
            if str(member.id) == key or (member.user_id and str(member.user_id) == key):
                return member
        return None

    def member_for_user(self, user_id: uuid.UUID) -> Optional["WorkspaceMember"]:
        for member in self.members:
            if member.user_id == user_id:
                return member
        return None

    def __repr__(self) -> str:
        return f"Workspace(id={self.id}, name={self.name})"


class WorkspaceMember(Base, TimestampMixin):
    """
    One member (or pending invitation) of a workspace.

    The member id doubles as the invitation token.

    Attributes:
        workspace_id: Owning workspace
        user_id: Bound user, NULL until the invitation is accepted
        email: Lowercase invited e-mail
        role: owner | admin | editor | viewer
        status: pending | accepted | rejected
        permissions: JSON object of the twelve feature flags
    """

    __tablename__ = "workspace_members"
    __table_args__ = (
        UniqueConstraint("workspace_id", "email", name="uq_workspace_members_workspace_email"),
    )

    workspace_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MemberRole.viewer.value,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=MemberStatus.pending.value,
        index=True,
    )

    permissions: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        default=dict,
    )

    workspace: Mapped[Workspace] = relationship(back_populates="members", lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"WorkspaceMember(id={self.id}, workspace_id={self.workspace_id}, "
            f"email={self.email}, role={self.role}, status={self.status})"
        )
