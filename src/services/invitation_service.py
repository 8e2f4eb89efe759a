"""
Public invitation lookup.

The invitation token is the id of a pending workspace member row (or, for
invitations created before workspaces existed, of a SharedUser record).
Only pending invitations are shown; acceptance happens at Google sign-in.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import InvalidInputError, NotFoundError
from src.models.enums import MemberRole, MemberStatus
from src.repositories.shared_user_repository import SharedUserRepository
from src.repositories.user_repository import UserRepository
from src.repositories.workspace_repository import WorkspaceMemberRepository
from src.schemas.workspace import InvitationResponse

logger = logging.getLogger(__name__)


class InvitationService:
    """Resolve invitation tokens for the unauthenticated invitation page."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.member_repo = WorkspaceMemberRepository(session)
        self.shared_user_repo = SharedUserRepository(session)
        self.user_repo = UserRepository(session)

    async def get_invitation(self, token: str | None) -> InvitationResponse:
        """
        Look up a pending invitation.

        Args:
            token: Member id (or legacy SharedUser id)

        Returns:
            Invitation details safe to show without authentication

        Raises:
            InvalidInputError: Missing token, or invitation no longer pending
            NotFoundError: Unknown or malformed token
        """
        if not token:
            raise InvalidInputError(field="token", message="Invitation token is required")

        try:
            token_id = uuid.UUID(token)
        except ValueError:
            raise NotFoundError(message="Invitation not found")

        member = await self.member_repo.get_with_workspace(token_id)
        if member is not None:
            self._require_pending(member.status)
            workspace = member.workspace
            owner = await self.user_repo.get_by_id(workspace.owner_id)
            return InvitationResponse(
                id=str(member.id),
                workspace_id=str(workspace.id),
                workspace_name=workspace.name,
                invited_email=member.email,
                role=member.role,
                permissions=member.permissions or {},
                invited_by=owner.owner_key if owner else None,
                created_date=member.created_date,
            )

        shared = await self.shared_user_repo.get_by_id(token_id)
        if shared is not None:
            self._require_pending(shared.status)
            return InvitationResponse(
                id=str(shared.id),
                workspace_id=None,
                workspace_name=shared.display_name or shared.created_by,
                invited_email=shared.invited_email,
                role=MemberRole.viewer.value,
                permissions=shared.permissions or {},
                invited_by=shared.created_by,
                created_date=shared.created_date,
            )

        logger.info(f"Invitation lookup for unknown token {token_id}")
        raise NotFoundError(message="Invitation not found")

    @staticmethod
    def _require_pending(status: str) -> None:
        if status != MemberStatus.pending.value:
            raise InvalidInputError(
                field="status",
                message=f"Invitation has already been {status}",
            )
