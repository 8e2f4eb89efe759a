"""
User profile service.

This module provides:
- Profile update limited to preferences and display name
- Effective permission map for the current request context
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.models.user import User
from src.repositories.user_repository import UserRepository
from src.schemas.user import UserUpdate
from src.services.ownership_service import OwnerContext
from src.services.permission_service import PermissionService

logger = logging.getLogger(__name__)


class UserService:
    """
    Service class for the caller's own profile.

    All methods require an active database session.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize UserService with database session.

        Args:
            session: Async database session
        """
        self.session = session
        self.user_repo = UserRepository(session)

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        """
        Update the caller's profile.

        Only fields present in the request body change; e-mail, password,
        provider and workspace fields are not updatable here.

        Args:
            user: Authenticated user
            data: Whitelisted profile fields

        Returns:
            Updated user
        """
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None and field != "full_name":
                continue
            setattr(user, field, value)

        if changes:
            user = await self.user_repo.update(user)
            await self.session.commit()
            logger.info(f"Profile updated for {user.id}: {sorted(changes)}")

        return user

    @staticmethod
    def permissions_for(context: OwnerContext) -> dict[str, bool]:
        """Effective permission map for the resolved request context."""
        return PermissionService.effective_permissions(context.grant)
