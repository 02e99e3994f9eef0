# src/agent_chat/infrastructure/database/repositories/agent.py
from typing import Literal, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.infrastructure.database.models import Agent
from agent_chat.infrastructure.database.repositories.base import BaseRepository, PaginatedResult


class AgentRepository(BaseRepository[Agent]):

    def __init__(self, session: AsyncSession):
        super().__init__(Agent, session)

    async def get_by_name_in_category(
        self,
        name: str,
        category_id: str,
        exclude_id: str | None = None,
    ) -> Agent | None:
        query = select(Agent).where(
            func.lower(Agent.name) == name.lower(),
            Agent.category_id == category_id,
        )
        query = self._exclude_inactive(query)
        if exclude_id:
            query = query.where(Agent.id != exclude_id)
        return await self.first(query)

    async def list_agents(
        self,
        page: int = 1,
        page_size: int = 20,
        category_id: str | None = None,
        is_free: bool | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        sort_by: str = "name",
        order: Literal["asc", "desc"] = "asc",
    ) -> PaginatedResult:
        query = self._exclude_inactive(select(Agent))
        query = self.apply_filters(query, {
            "category_id__eq": category_id,
            "is_free__eq": is_free,
            "price__gte": min_price,
            "price__lte": max_price,
        })
        query = self.apply_sorting(query, sort_by, order)
        return await self.paginate(query, page, page_size)

    async def search_by_name(self, prefix: str, limit: int = 20) -> Sequence[Agent]:
        """Case-insensitive name prefix search over active agents."""
        escaped = prefix.replace("%", r"\%").replace("_", r"\_")
        query = select(Agent).where(Agent.name.ilike(f"{escaped}%", escape="\\"))
        query = self._exclude_inactive(query).order_by(Agent.name).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def list_by_ids(self, ids: Sequence[str]) -> Sequence[Agent]:
        if not ids:
            return []
        query = self._exclude_inactive(select(Agent).where(Agent.id.in_(list(ids))))
        result = await self.session.execute(query)
        return result.scalars().all()
