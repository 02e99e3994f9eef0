# src/agent_chat/infrastructure/database/repositories/user_agent.py
from datetime import datetime
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.infrastructure.database.base_model import utcnow
from agent_chat.infrastructure.database.models import UserAgent
from agent_chat.infrastructure.database.repositories.base import BaseRepository


class UserAgentRepository(BaseRepository[UserAgent]):
    """Entitlement rows. Reads here never apply expiry; callers decide."""

    def __init__(self, session: AsyncSession):
        super().__init__(UserAgent, session)

    async def get_active(self, user_id: str, agent_id: str) -> UserAgent | None:
        """Most recent active grant for the pair, expired or not."""
        query = select(UserAgent).where(
            UserAgent.user_id == user_id,
            UserAgent.agent_id == agent_id,
        )
        query = self._exclude_inactive(query).order_by(UserAgent.purchased_at.desc())
        return await self.first(query)

    async def list_active_for_user(self, user_id: str) -> Sequence[UserAgent]:
        query = self._exclude_inactive(select(UserAgent).where(UserAgent.user_id == user_id))
        query = query.order_by(UserAgent.purchased_at.desc())
        result = await self.session.execute(query)
        return result.scalars().all()

    async def record_usage(self, entitlement_id: str, at: datetime) -> None:
        """Increment the message counter in a single UPDATE."""
        await self.session.execute(
            update(UserAgent)
            .where(UserAgent.id == entitlement_id)
            .values(
                message_count=UserAgent.message_count + 1,
                last_used_at=at,
                updated_at=utcnow(),
            )
        )
        await self.session.flush()
