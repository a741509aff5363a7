"""UserDAO — users table operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from userapi.dao.base import BaseDAO
from userapi.models.user import User


class UserDAO(BaseDAO[User]):
    model = User

    async def save(self, session: AsyncSession, user: User) -> User:
        """Insert *user*; the id is assigned on insert if not already set."""
        return await self.add(session, user)

    async def find_by_id(self, session: AsyncSession, user_id: str) -> User | None:
        return await self.get_by_id(session, user_id)

    async def find_by_username(self, session: AsyncSession, username: str) -> User | None:
        """Look up a user by username (login flow). Exact match."""
        return await self.get_by_field(session, username=username)

    async def username_taken(self, session: AsyncSession, username: str) -> bool:
        return await self.count(session, username=username) > 0
