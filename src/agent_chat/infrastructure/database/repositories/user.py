# src/agent_chat/infrastructure/database/repositories/user.py
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.infrastructure.database.models import User
from agent_chat.infrastructure.database.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str, include_inactive: bool = False) -> User | None:
        query = select(User).where(User.email == email.lower())
        query = self._exclude_inactive(query, include_inactive)
        return await self.first(query)
