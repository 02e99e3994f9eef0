# src/agent_chat/infrastructure/database/repositories/agent_category.py
from typing import Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.infrastructure.database.models import AgentCategory
from agent_chat.infrastructure.database.repositories.base import BaseRepository


class AgentCategoryRepository(BaseRepository[AgentCategory]):

    def __init__(self, session: AsyncSession):
        super().__init__(AgentCategory, session)

    async def get_by_name(self, name: str, exclude_id: str | None = None) -> AgentCategory | None:
        """Find an active category by case-insensitive name."""
        query = select(AgentCategory).where(func.lower(AgentCategory.name) == name.lower())
        query = self._exclude_inactive(query)
        if exclude_id:
            query = query.where(AgentCategory.id != exclude_id)
        return await self.first(query)

    async def list_active(self) -> Sequence[AgentCategory]:
        query = self._exclude_inactive(select(AgentCategory))
        query = query.order_by(AgentCategory.display_order, AgentCategory.name)
        result = await self.session.execute(query)
        return result.scalars().all()
