"""
Ownership resolution.

Decides whose data a request operates on. Every financial record is
stamped with and filtered by an *owner key* in ``created_by``; this service
computes that key for the current caller. There are two kinds of key:

    - a lowercase e-mail for personal data
    - ``workspace:<uuid>`` for data that belongs to a workspace

Resolution order:
    1. The sharing-mapping collection itself (``shared-users``) always
       belongs to the caller. Resolving it through a sharing record would
       recurse, and an invitee must never manage the inviter's shares.
    2. With a workspace selected, the owner key is the workspace key and the
       grant is the caller's member row (none for the workspace owner).
    3. Otherwise, an accepted legacy SharedUser record for the caller's
       e-mail redirects to its inviter (``created_by``), with that record
       as the grant.
    4. Otherwise, or when the lookup fails, the caller's own e-mail with
       no grant.
"""

import logging
import uuid
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.shared_user import SharedUser
from src.models.user import User
from src.models.workspace import Workspace, WorkspaceMember
from src.repositories.shared_user_repository import SharedUserRepository

logger = logging.getLogger(__name__)

SHARING_COLLECTION = "shared-users"
WORKSPACE_KEY_PREFIX = "workspace:"


def workspace_owner_key(workspace_id: uuid.UUID) -> str:
    """Owner key under which a workspace's records are stored."""
    return f"{WORKSPACE_KEY_PREFIX}{workspace_id}"


@dataclass
class OwnerContext:
    """
    Result of ownership resolution.

    Attributes:
        owner_key: Value used as ``created_by`` filter and stamp
        grant: Member row or sharing record that delegates access, None
            when the caller acts with full rights
        workspace: Selected workspace, if any
    """

    owner_key: str
    grant: WorkspaceMember | SharedUser | None = None
    workspace: Workspace | None = field(default=None, repr=False)

    @property
    def is_delegated(self) -> bool:
        return self.grant is not None


class OwnershipService:
    """
    Resolve the effective owner for a caller and a target collection.

    Usage:
        context = await OwnershipService(session).resolve(user, "notes", workspace)
        records = await repo.find([Note.created_by == context.owner_key])
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.shared_user_repo = SharedUserRepository(session)

    async def resolve(
        self,
        user: User,
        collection: str | None = None,
        workspace: Workspace | None = None,
    ) -> OwnerContext:
        """
        Compute the owner context.

        Args:
            user: Authenticated caller
            collection: Target collection name (e.g. ``"notes"``), or None
                for collection-independent checks such as ``/auth/permissions``
            workspace: Workspace selected by the ``X-Workspace-Id`` header,
                already verified to contain the caller as a member

        Returns:
            OwnerContext with owner key and grant
        """
        own_key = user.owner_key

        if collection == SHARING_COLLECTION:
            return OwnerContext(owner_key=own_key)

        if workspace is not None:
            return self._resolve_workspace(user, workspace)

        shared = await self._find_accepted_share(user)
        if shared is None or not shared.created_by:
            return OwnerContext(owner_key=own_key)

        logger.debug(f"Delegated access: {own_key} acts for {shared.created_by}")
        return OwnerContext(owner_key=shared.created_by.strip().lower(), grant=shared)

    async def _find_accepted_share(self, user: User) -> SharedUser | None:
        # Savepoint: a failed lookup must not abort the request's transaction
        try:
            async with self.session.begin_nested():
                return await self.shared_user_repo.find_accepted_for_email(user.email)
        except SQLAlchemyError as e:
            logger.error(
                f"Sharing lookup failed for {user.owner_key}, falling back to own data: {e}"
            )
            return None

    @staticmethod
    def _resolve_workspace(user: User, workspace: Workspace) -> OwnerContext:
        is_owner = workspace.owner_id == user.id
        member = workspace.member_for_user(user.id)
        if member is None and not is_owner:
            logger.warning(
                f"User {user.id} is not a member of workspace {workspace.id}; using own data"
            )
            return OwnerContext(owner_key=user.owner_key)

        return OwnerContext(
            owner_key=workspace_owner_key(workspace.id),
            grant=None if is_owner else member,
            workspace=workspace,
        )
