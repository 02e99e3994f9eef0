# src/agent_chat/infrastructure/database/repositories/chat.py
from datetime import datetime
from typing import Sequence

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.infrastructure.database.base_model import utcnow
from agent_chat.infrastructure.database.models import Chat
from agent_chat.infrastructure.database.repositories.base import BaseRepository, PaginatedResult


class ChatRepository(BaseRepository[Chat]):

    def __init__(self, session: AsyncSession):
        super().__init__(Chat, session)

    async def get_owned(self, chat_id: str, user_id: str) -> Chat | None:
        """Active chat belonging to user_id, else None."""
        chat = await self.get(chat_id)
        if chat is None or chat.user_id != user_id:
            return None
        return chat

    def _for_user(self, user_id: str):
        query = select(Chat).where(Chat.user_id == user_id)
        return self._exclude_inactive(query)

    async def list_for_user(self, user_id: str, page: int = 1, page_size: int = 20) -> PaginatedResult:
        """Newest activity first; chats without messages sort by creation time."""
        query = self._for_user(user_id).order_by(
            func.coalesce(Chat.last_message_at, Chat.created_at).desc()
        )
        return await self.paginate(query, page, page_size)

    async def search_by_title(
        self,
        user_id: str,
        prefix: str,
        page: int = 1,
        page_size: int = 20,
    ) -> PaginatedResult:
        escaped = prefix.replace("%", r"\%").replace("_", r"\_")
        query = self._for_user(user_id).where(Chat.title.ilike(f"{escaped}%", escape="\\"))
        query = query.order_by(func.coalesce(Chat.last_message_at, Chat.created_at).desc())
        return await self.paginate(query, page, page_size)

    async def list_all_for_user(self, user_id: str) -> Sequence[Chat]:
        result = await self.session.execute(self._for_user(user_id))
        return result.scalars().all()

    async def list_for_user_and_agent(self, user_id: str, agent_id: str) -> Sequence[Chat]:
        query = self._for_user(user_id).where(Chat.agent_id == agent_id).order_by(Chat.created_at.desc())
        result = await self.session.execute(query)
        return result.scalars().all()

    async def count_active_for_agent(self, agent_id: str) -> int:
        query = self._exclude_inactive(select(Chat).where(Chat.agent_id == agent_id))
        return await self.count(query)

    async def bump_activity(self, chat: Chat, at: datetime) -> Chat:
        """Increment message_count and set last_message_at in one UPDATE."""
        await self.session.execute(
            update(Chat)
            .where(Chat.id == chat.id)
            .values(
                message_count=Chat.message_count + 1,
                last_message_at=at,
                updated_at=utcnow(),
            )
        )
        await self.session.flush()
        await self.session.refresh(chat)
        return chat
