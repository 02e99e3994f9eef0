# src/agent_chat/infrastructure/database/repositories/message.py
from typing import Literal, Sequence

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.infrastructure.database.models import Message
from agent_chat.infrastructure.database.repositories.base import BaseRepository, PaginatedResult


class MessageRepository(BaseRepository[Message]):

    def __init__(self, session: AsyncSession):
        super().__init__(Message, session)

    def _for_chat(self, chat_id: str):
        return self._exclude_inactive(select(Message).where(Message.chat_id == chat_id))

    async def list_for_chat(
        self,
        chat_id: str,
        page: int = 1,
        page_size: int = 50,
        order_by: str = "created_at",
        direction: Literal["asc", "desc"] = "asc",
    ) -> PaginatedResult:
        query = self.apply_sorting(self._for_chat(chat_id), order_by, direction)
        return await self.paginate(query, page, page_size)

    async def history(self, chat_id: str) -> Sequence[Message]:
        """All active messages of a chat, oldest first."""
        query = self._for_chat(chat_id).order_by(Message.created_at.asc(), Message.id)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def recent(self, chat_id: str, limit: int = 20) -> list[Message]:
        """Latest ``limit`` messages, returned oldest first."""
        query = self._for_chat(chat_id).order_by(Message.created_at.desc()).limit(limit)
        result = await self.session.execute(query)
        return list(reversed(result.scalars().all()))

    async def first_user_message(self, chat_id: str) -> Message | None:
        query = self._for_chat(chat_id).where(Message.role == "user")
        return await self.first(query.order_by(Message.created_at.asc()))

    async def list_for_chats(self, chat_ids: Sequence[str]) -> Sequence[Message]:
        """Active messages of several chats, newest first."""
        query = self._exclude_inactive(select(Message).where(Message.chat_id.in_(list(chat_ids))))
        result = await self.session.execute(query.order_by(Message.created_at.desc()))
        return result.scalars().all()

    async def count_by_role(self, user_id: str) -> dict[str, int]:
        query = (
            select(Message.role, func.count())
            .where(Message.user_id == user_id, Message.is_active.is_(True))
            .group_by(Message.role)
        )
        result = await self.session.execute(query)
        return {role: count for role, count in result.all()}
