"""Account lookups for sign-in, registration and invitation binding."""

from datetime import UTC, datetime

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.user import User
from src.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> User | None:
        """
        Case-insensitive lookup.

        New rows are stored lowercase; lowering the column too keeps rows
        imported with mixed case reachable.
        """
        return await self.find_one([func.lower(User.email) == normalize_email(email)])

    async def email_exists(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def create(self, **fields) -> User:
        fields["email"] = normalize_email(fields["email"])
        return await self.add(User(**fields))

    async def update_last_login(self, user: User) -> User:
        user.last_login = datetime.now(UTC)
        return await self.update(user)
