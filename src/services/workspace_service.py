"""
Workspace service: workspaces, members and invitations.

Access rules:
    - Caller not a bound member of the workspace: 404 (existence is not leaked)
    - Rename and delete: owner only (403 otherwise)
    - Invite and update members: owner or admin (403 otherwise)
    - Remove member: owner, admin, or the member removing themself
    - The owner member can be neither changed (403) nor removed (400)
"""

import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import (
    AlreadyMemberError,
    ForbiddenError,
    InsufficientPermissionsError,
    InvalidInputError,
    NotFoundError,
)
from src.models.enums import (
    MANAGER_ROLES,
    MemberRole,
    MemberStatus,
    default_invite_permissions,
)
from src.models.user import User
from src.models.workspace import Workspace, WorkspaceMember
from src.repositories.workspace_repository import (
    WorkspaceMemberRepository,
    WorkspaceRepository,
)
from src.schemas.workspace import InviteRequest, MemberUpdate
from src.services.email_service import EmailService

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_NAME = "My Workspace"
WORKSPACE_NOT_FOUND = "Workspace not found or access denied"


class WorkspaceService:
    """
    Service class for workspace management.

    All methods take the authenticated caller and check membership first.
    """

    def __init__(self, session: AsyncSession, email_service: EmailService | None = None):
        """
        Initialize WorkspaceService.

        Args:
            session: Async database session
            email_service: Sender for invitation e-mails
        """
        self.session = session
        self.workspace_repo = WorkspaceRepository(session)
        self.member_repo = WorkspaceMemberRepository(session)
        self.email_service = email_service or EmailService()

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse_id(value: str | uuid.UUID | None) -> uuid.UUID | None:
        if isinstance(value, uuid.UUID):
            return value
        try:
            return uuid.UUID(str(value))
        except (TypeError, ValueError):
            return None

    async def _load_for_member(self, workspace_id: str | uuid.UUID, user: User) -> Workspace:
        """
        Raises:
            NotFoundError: Bad id, unknown workspace, or caller not a member
        """
        parsed = self._parse_id(workspace_id)
        workspace = (
            await self.workspace_repo.get_for_member(parsed, user.id) if parsed else None
        )
        if workspace is None:
            raise NotFoundError(message=WORKSPACE_NOT_FOUND)
        return workspace

    @staticmethod
    def _caller_role(workspace: Workspace, user: User) -> MemberRole | None:
        member = workspace.member_for_user(user.id)
        return MemberRole(member.role) if member else None

    def _require_manager(self, workspace: Workspace, user: User) -> None:
        if self._caller_role(workspace, user) not in MANAGER_ROLES:
            logger.warning(f"User {user.id} lacks manager role in workspace {workspace.id}")
            raise InsufficientPermissionsError(
                message="Only the workspace owner or an admin can manage members"
            )

    @staticmethod
    def _require_owner(workspace: Workspace, user: User) -> None:
        if workspace.owner_id != user.id:
            logger.warning(f"User {user.id} is not the owner of workspace {workspace.id}")
            raise InsufficientPermissionsError(
                message="Only the workspace owner can perform this action"
            )

    async def list_workspaces(self, user: User) -> list[Workspace]:
        """List workspaces where the caller is a bound member, newest first."""
        return await self.workspace_repo.list_for_user(user.id)

    async def get_workspace(self, workspace_id: str, user: User) -> Workspace:
        """
        Get one workspace the caller belongs to.

        Raises:
            NotFoundError: "Workspace not found or access denied"
        """
        return await self._load_for_member(workspace_id, user)

    async def get_selected_workspace(self, workspace_id: str | None, user: User) -> Workspace | None:
        """
        Resolve the ``X-Workspace-Id`` header.

        Soft failure: a missing, malformed or foreign id yields None and the
        request proceeds without workspace context.
        """
        if not workspace_id:
            return None
        parsed = self._parse_id(workspace_id)
        if parsed is None:
            logger.debug(f"Ignoring malformed workspace header: {workspace_id!r}")
            return None
        workspace = await self.workspace_repo.get_for_member(parsed, user.id)
        if workspace is None:
            logger.debug(f"Ignoring workspace header {parsed}: user {user.id} is not a member")
        return workspace

    # -------------------------------------------------------------------------
    # Workspace lifecycle
    # -------------------------------------------------------------------------

    async def create_workspace(self, name: str, user: User, commit: bool = True) -> Workspace:
        """
        Create a workspace owned by the caller.

        The new workspace has exactly one member: the caller, role owner,
        accepted, every permission flag set.

        Args:
            name: Workspace name
            user: Creator and owner
            commit: False when the caller commits as part of a larger unit
        """
        workspace = await self.workspace_repo.create_with_owner(name, user)
        if commit:
            await self.session.commit()
        logger.info(f"Workspace created: {workspace.id} ({name}) by {user.id}")
        return workspace

    async def create_default_workspace(self, user: User) -> Workspace:
        """Create "My Workspace" for a new account and make it the default."""
        workspace = await self.create_workspace(DEFAULT_WORKSPACE_NAME, user, commit=False)
        user.default_workspace_id = workspace.id
        return workspace

    async def rename_workspace(self, workspace_id: str, name: str, user: User) -> Workspace:
        """
        Rename a workspace (owner only).

        Raises:
            NotFoundError: Caller not a member
            InsufficientPermissionsError: Caller is not the owner
        """
        workspace = await self._load_for_member(workspace_id, user)
        self._require_owner(workspace, user)

        workspace.name = name
        await self.workspace_repo.update(workspace)
        await self.session.commit()
        logger.info(f"Workspace {workspace.id} renamed by {user.id}")
        return await self.workspace_repo.reload(workspace)

    async def delete_workspace(self, workspace_id: str, user: User) -> None:
        """
        Delete a workspace and its members (owner only).

        Raises:
            NotFoundError: Caller not a member
            InsufficientPermissionsError: Caller is not the owner
        """
        workspace = await self._load_for_member(workspace_id, user)
        self._require_owner(workspace, user)

        await self.workspace_repo.delete(workspace)
        await self.session.commit()
        logger.info(f"Workspace {workspace_id} deleted by {user.id}")

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    async def invite_member(
        self,
        workspace_id: str,
        data: InviteRequest,
        user: User,
    ) -> tuple[Workspace, WorkspaceMember]:
        """
        Invite an e-mail to a workspace.

        A pending member row is inserted; the unique (workspace, email)
        constraint settles concurrent duplicates. The invitation e-mail is
        sent after commit and its failure never fails the invite.

        Args:
            workspace_id: Target workspace
            data: Validated invite (e-mail already lowercased)
            user: Inviting member (owner or admin)

        Returns:
            Tuple of (workspace with members, new member row)

        Raises:
            NotFoundError: Caller not a member
            InsufficientPermissionsError: Caller is not owner/admin
            AlreadyMemberError: E-mail already a member or invited
        """
        workspace = await self._load_for_member(workspace_id, user)
        self._require_manager(workspace, user)

        if await self.member_repo.get_by_email(workspace.id, data.email) is not None:
            raise AlreadyMemberError()

        permissions = default_invite_permissions()
        permissions.update(data.permissions or {})

        member = WorkspaceMember(
            workspace_id=workspace.id,
            email=data.email,
            role=data.role.value,
            status=MemberStatus.pending.value,
            permissions=permissions,
        )
        try:
            await self.member_repo.add(member)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info(f"Concurrent duplicate invite for {data.email} in {workspace_id}: {e}")
            raise AlreadyMemberError() from e

        logger.info(f"Invited {data.email} to workspace {workspace.id} as {data.role.value}")

        workspace = await self.workspace_repo.reload(workspace)
        await self._send_invitation_email(workspace, member, user)
        return workspace, member

    async def _send_invitation_email(
        self,
        workspace: Workspace,
        member: WorkspaceMember,
        inviter: User,
    ) -> None:
        try:
            result = await self.email_service.send_invitation(
                to=member.email,
                token=str(member.id),
                workspace_name=workspace.name,
                inviter_name=inviter.full_name or inviter.email,
                role=member.role,
            )
        except Exception as e:
            logger.error(f"Invitation e-mail to {member.email} failed: {e}")
            return

        if not result.sent:
            logger.warning(
                f"Invitation e-mail to {member.email} not sent: {result.message or result.error}"
            )

    def _find_member(self, workspace: Workspace, member_id: str | None) -> WorkspaceMember:
        if not member_id:
            raise InvalidInputError(field="memberId", message="Member ID required")
        member = workspace.get_member(member_id)
        if member is None:
            raise NotFoundError(message="Member not found")
        return member

    async def update_member(
        self,
        workspace_id: str,
        member_id: str | None,
        data: MemberUpdate,
        user: User,
    ) -> Workspace:
        """
        Change a member's role and/or permissions (owner or admin).

        Raises:
            InvalidInputError: Missing member id
            NotFoundError: Caller not a member, or member not found
            InsufficientPermissionsError: Caller is not owner/admin
            ForbiddenError: Target is the owner member
        """
        workspace = await self._load_for_member(workspace_id, user)
        self._require_manager(workspace, user)
        member = self._find_member(workspace, member_id)

        if member.role == MemberRole.owner.value:
            raise ForbiddenError(message="The workspace owner's role and permissions cannot be changed")

        if data.role is not None:
            member.role = data.role.value
        if data.permissions is not None:
            member.permissions = {**(member.permissions or {}), **data.permissions}

        await self.member_repo.update(member)
        await self.session.commit()
        logger.info(f"Member {member.id} of workspace {workspace.id} updated by {user.id}")
        return await self.workspace_repo.reload(workspace)

    async def remove_member(
        self,
        workspace_id: str,
        member_id: str | None,
        user: User,
    ) -> Workspace:
        """
        Remove a member (owner/admin, or the member themself).

        Raises:
            InvalidInputError: Missing member id, or target is the owner member
            NotFoundError: Caller not a member, or member not found
            InsufficientPermissionsError: Caller may not remove this member
        """
        workspace = await self._load_for_member(workspace_id, user)
        member = self._find_member(workspace, member_id)

        if member.role == MemberRole.owner.value:
            raise InvalidInputError(
                field="memberId",
                message="The workspace owner cannot be removed; delete the workspace instead",
            )

        if member.user_id != user.id:
            self._require_manager(workspace, user)

        await self.member_repo.delete(member)
        await self.session.commit()
        logger.info(f"Member {member_id} removed from workspace {workspace.id} by {user.id}")
        return await self.workspace_repo.reload(workspace)
