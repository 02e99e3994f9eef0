"""
Agent catalog administration: categories and agents.

Names are unique among active rows (categories globally, agents within
their category). Agents referenced by active chats cannot be deleted.
"""

from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.domain.exceptions import (
    AlreadyExists,
    InvalidReference,
    NotFound,
    ResourceInUse,
    ValidationError,
)
from agent_chat.infrastructure.database.models import Agent, AgentCategory
from agent_chat.infrastructure.database.repositories import (
    AgentCategoryRepository,
    AgentRepository,
    ChatRepository,
    PaginatedResult,
)
from agent_chat.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class CatalogService:

    def __init__(self, session: AsyncSession):
        self.categories = AgentCategoryRepository(session)
        self.agents = AgentRepository(session)
        self.chats = ChatRepository(session)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> Sequence[AgentCategory]:
        return await self.categories.list_active()

    async def get_category(self, category_id: str) -> AgentCategory:
        category = await self.categories.get(category_id)
        if category is None:
            raise NotFound("Category not found", details={"category_id": category_id})
        return category

    async def _ensure_category_name_free(self, name: str, exclude_id: str | None = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required", details={"field": "name"})
        if await self.categories.get_by_name(name, exclude_id=exclude_id):
            raise AlreadyExists("A category with this name already exists", details={"name": name})
        return name

    async def create_category(self, name: str, **fields: Any) -> AgentCategory:
        name = await self._ensure_category_name_free(name)
        category = await self.categories.create(AgentCategory(name=name, **fields))
        logger.info("Category created", category_id=category.id, name=name)
        return category

    async def update_category(self, category_id: str, **fields: Any) -> AgentCategory:
        category = await self.get_category(category_id)
        if fields.get("name") is not None:
            fields["name"] = await self._ensure_category_name_free(fields["name"], exclude_id=category.id)
        values = {key: value for key, value in fields.items() if value is not None}
        return await self.categories.save(category, **values)

    async def deactivate_category(self, category_id: str) -> None:
        if not await self.categories.deactivate(category_id):
            raise NotFound("Category not found", details={"category_id": category_id})

    # ------------------------------------------------------------------
    # Agents
    # ------------------------------------------------------------------

    async def list_agents(self, page: int = 1, limit: int = 20, **filters: Any) -> PaginatedResult:
        return await self.agents.list_agents(page=page, page_size=limit, **filters)

    async def search_agents(self, term: str, limit: int = 20) -> Sequence[Agent]:
        term = (term or "").strip()
        if not term:
            raise ValidationError("Search term is required", details={"field": "q"})
        return await self.agents.search_by_name(term, limit)

    async def get_agent(self, agent_id: str) -> Agent:
        agent = await self.agents.get(agent_id)
        if agent is None:
            raise NotFound("Agent not found", details={"agent_id": agent_id})
        return agent

    async def _validate_agent(
        self,
        name: str,
        category_id: str,
        price: float,
        exclude_id: str | None = None,
    ) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Agent name is required", details={"field": "name"})
        if price is not None and price < 0:
            raise ValidationError("Price cannot be negative", details={"field": "price", "value": price})
        if await self.categories.get(category_id) is None:
            raise InvalidReference("Category not found or inactive", details={"category_id": category_id})
        if await self.agents.get_by_name_in_category(name, category_id, exclude_id=exclude_id):
            raise AlreadyExists(
                "An agent with this name already exists in this category",
                details={"name": name, "category_id": category_id},
            )
        return name

    async def create_agent(self, name: str, category_id: str, price: float = 0.0, **fields: Any) -> Agent:
        name = await self._validate_agent(name, category_id, price)
        agent = await self.agents.create(
            Agent(name=name, category_id=category_id, price=price, **fields)
        )
        logger.info("Agent created", agent_id=agent.id, category_id=category_id, model=agent.model)
        return agent

    async def update_agent(self, agent_id: str, **fields: Any) -> Agent:
        agent = await self.get_agent(agent_id)
        values = {key: value for key, value in fields.items() if value is not None}

        if {"name", "category_id", "price"} & values.keys():
            values["name"] = await self._validate_agent(
                values.get("name", agent.name),
                values.get("category_id", agent.category_id),
                values.get("price", agent.price),
                exclude_id=agent.id,
            )
        return await self.agents.save(agent, **values)

    async def deactivate_agent(self, agent_id: str) -> None:
        """Raises ResourceInUse while active chats reference the agent."""
        agent = await self.get_agent(agent_id)
        active_chats = await self.chats.count_active_for_agent(agent.id)
        if active_chats:
            raise ResourceInUse(
                "Cannot delete agent with active chats",
                details={"agent_id": agent_id, "active_chats": active_chats},
            )
        await self.agents.save(agent, is_active=False)
        logger.info("Agent deactivated", agent_id=agent_id)
