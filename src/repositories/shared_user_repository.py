"""
Repository for legacy sharing records.
"""

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.enums import MemberStatus
from src.models.shared_user import SharedUser
from src.repositories.base import BaseRepository


class SharedUserRepository(BaseRepository[SharedUser]):
    """Repository for SharedUser model operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(SharedUser, session)

    async def find_accepted_for_email(self, email: str) -> SharedUser | None:
        """
        Find the accepted sharing record for an invited e-mail.

        Stored e-mails are not guaranteed to be lowercase, so a row matches
        when its lowercased value equals the normalized e-mail or when it
        equals the e-mail exactly. Several accepted rows may exist; the
        oldest one wins.

        Args:
            email: E-mail of the caller

        Returns:
            The oldest accepted SharedUser, or None
        """
        normalized = email.strip().lower()
        records = await self.find(
            [
                SharedUser.status == MemberStatus.accepted.value,
                or_(
                    func.lower(SharedUser.invited_email) == normalized,
                    SharedUser.invited_email == email,
                ),
            ],
            order_by=[SharedUser.created_date.asc(), SharedUser.id.asc()],
            limit=1,
        )
        return records[0] if records else None

    async def accept_pending_for_email(self, email: str) -> int:
        """
        Accept every pending share addressed to a verified e-mail.

        Called only from Google sign-in, where Google has proven ownership
        of the address. Returns the number of shares accepted.
        """
        normalized = email.strip().lower()
        stmt = (
            update(SharedUser)
            .where(
                func.lower(SharedUser.invited_email) == normalized,
                SharedUser.status == MemberStatus.pending.value,
            )
            .values(status=MemberStatus.accepted.value)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount or 0
