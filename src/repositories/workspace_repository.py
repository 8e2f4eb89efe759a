"""
Workspace and member repositories.

Membership mutations are single-row statements. Uniqueness of
(workspace_id, email) is enforced by the database, so two concurrent
invitations can never overwrite each other.
"""

import uuid

from sqlalchemy import select, update
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import MemberRole, MemberStatus, full_permissions
from src.models.user import User
from src.models.workspace import Workspace, WorkspaceMember
from src.repositories.base import BaseRepository


class WorkspaceRepository(BaseRepository[Workspace]):
    """
    Repository for Workspace model operations.

    Members are eager-loaded with every workspace (``lazy="selectin"``).
    """

    def __init__(self, session: AsyncSession):
        super().__init__(Workspace, session)

    async def create_with_owner(self, name: str, owner: User) -> Workspace:
        """
        Create a workspace together with its owner membership.

        The owner member is bound to the creator, accepted, and holds every
        permission flag.

        Args:
            name: Workspace name
            owner: Creating user

        Returns:
            Persisted workspace with its single member loaded
        """
        workspace = Workspace(name=name, owner_id=owner.id)
        workspace.members.append(
            WorkspaceMember(
                user_id=owner.id,
                email=owner.owner_key,
                role=MemberRole.owner.value,
                status=MemberStatus.accepted.value,
                permissions=full_permissions(),
            )
        )
        self.session.add(workspace)
        await self.session.flush()
        await self.session.refresh(workspace, attribute_names=["members"])
        return workspace

    async def get_for_member(
        self,
        workspace_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Workspace | None:
        """
        Get a workspace only if the user is a bound member of it.

        Args:
            workspace_id: Workspace to load
            user_id: User who must appear as a member

        Returns:
            Workspace, or None when it does not exist or the user is not a member
        """
        query = (
            select(Workspace)
            .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
            .where(Workspace.id == workspace_id, WorkspaceMember.user_id == user_id)
        )
        result = await self.session.execute(query)
        return result.scalars().first()

    async def list_for_user(self, user_id: uuid.UUID) -> list[Workspace]:
        """List workspaces where the user is a bound member, newest first."""
        query = (
            select(Workspace)
            .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
            .where(WorkspaceMember.user_id == user_id)
            .order_by(Workspace.created_date.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().unique().all())

    async def reload(self, workspace: Workspace) -> Workspace:
        """Refresh scalar columns and the member list after member changes."""
        await self.session.refresh(workspace)
        await self.session.refresh(workspace, attribute_names=["members"])
        return workspace


class WorkspaceMemberRepository(BaseRepository[WorkspaceMember]):
    """Repository for WorkspaceMember rows (memberships and invitations)."""

    def __init__(self, session: AsyncSession):
        super().__init__(WorkspaceMember, session)

    async def get_by_email(
        self,
        workspace_id: uuid.UUID,
        email: str,
    ) -> WorkspaceMember | None:
        """Get the member row for an e-mail in one workspace."""
        return await self.find_one(
            [
                WorkspaceMember.workspace_id == workspace_id,
                WorkspaceMember.email == email.strip().lower(),
            ]
        )

    async def get_with_workspace(self, member_id: uuid.UUID) -> WorkspaceMember | None:
        """Load a member row together with its workspace, for the public invitation page."""
        query = (
            select(WorkspaceMember)
            .options(selectinload(WorkspaceMember.workspace))
            .where(WorkspaceMember.id == member_id)
        )
        result = await self.session.execute(query)
        return result.scalars().first()

    async def bind_pending_invitations(self, email: str, user_id: uuid.UUID) -> int:
        """
        Accept every pending invitation for an e-mail in one statement.

        Only rows still ``pending`` are touched, so re-running is harmless
        and accepted or rejected rows are never rewritten.

        Args:
            email: Verified e-mail of the signed-in user
            user_id: User to bind to the member rows

        Returns:
            Number of invitations accepted
        """
        stmt = (
            update(WorkspaceMember)
            .where(
                WorkspaceMember.email == email.strip().lower(),
                WorkspaceMember.status == MemberStatus.pending.value,
            )
            .values(user_id=user_id, status=MemberStatus.accepted.value)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
