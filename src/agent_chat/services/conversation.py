"""
Conversation store: chats and their messages.

Ownership is checked on every read and write. A chat that is missing,
inactive or owned by someone else is reported the same way
(NotFoundOrForbidden) so callers cannot discover other users' chats.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Literal, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.config.settings import Settings
from agent_chat.domain.exceptions import (
    EntitlementDenied,
    InvalidReference,
    InvalidUser,
    NotFound,
    NotFoundOrForbidden,
    ValidationError,
)
from agent_chat.infrastructure.database.base_model import utcnow
from agent_chat.infrastructure.database.models import Agent, Chat, Message, MessageRole
from agent_chat.infrastructure.database.repositories import (
    AgentRepository,
    ChatRepository,
    MessageRepository,
    PaginatedResult,
    UserRepository,
    paginate_in_memory,
)
from agent_chat.infrastructure.observability.logging import get_logger
from agent_chat.services.entitlements import EntitlementService

logger = get_logger(__name__)

CHAT_NOT_FOUND = "Chat not found"
MESSAGE_NOT_FOUND = "Message not found"


@dataclass
class MessageSearchHit:
    message: Message
    chat_title: str


@dataclass
class AgentMessages:
    """A page of a user's messages with one agent, plus the agent and its chats."""
    agent: Agent
    chats: Sequence[Chat]
    page: PaginatedResult


@dataclass
class ChatStats:
    total_chats: int
    total_messages: int
    chats_this_month: int
    most_used_agent_id: Optional[str]


def clean_content(content: str | None) -> str:
    """Trim message content, rejecting blank text."""
    text = (content or "").strip()
    if not text:
        raise ValidationError("Content cannot be empty", details={"field": "content"})
    return text


def parse_role(role: str | MessageRole) -> MessageRole:
    try:
        return MessageRole(role)
    except ValueError:
        raise ValidationError(
            "Role must be one of: user, assistant, system",
            details={"field": "role", "value": str(role)},
        ) from None


class ConversationService:

    def __init__(self, session: AsyncSession, settings: Settings):
        self.settings = settings
        self.chats = ChatRepository(session)
        self.messages = MessageRepository(session)
        self.users = UserRepository(session)
        self.agents = AgentRepository(session)
        self.entitlements = EntitlementService(session)

    # ------------------------------------------------------------------
    # Chats
    # ------------------------------------------------------------------

    async def create_chat(self, user_id: str, agent_id: str, title: str | None = None) -> Chat:
        """
        Start a chat with an agent.

        Raises:
            InvalidUser: the user is missing or inactive
            InvalidReference: the agent is missing or inactive
            EntitlementDenied: no active, non-expired grant for the agent
        """
        if await self.users.get(user_id) is None:
            raise InvalidUser(details={"user_id": user_id})

        if await self.agents.get(agent_id) is None:
            raise InvalidReference("Agent not found or inactive", details={"agent_id": agent_id})

        access = await self.entitlements.check_access(user_id, agent_id)
        if not access.has_access:
            raise EntitlementDenied(access.reason, details={"agent_id": agent_id})

        chat = await self.chats.create(
            Chat(
                user_id=user_id,
                agent_id=agent_id,
                title=(title or "").strip() or self.settings.default_chat_title,
            )
        )
        logger.info("Chat created", chat_id=chat.id, user_id=user_id, agent_id=agent_id)
        return chat

    async def get_chat(self, chat_id: str, user_id: str) -> Chat:
        chat = await self.chats.get_owned(chat_id, user_id)
        if chat is None:
            raise NotFoundOrForbidden(CHAT_NOT_FOUND, details={"chat_id": chat_id})
        return chat

    async def list_chats(self, user_id: str, page: int = 1, limit: int = 20) -> PaginatedResult:
        return await self.chats.list_for_user(user_id, page, limit)

    async def search_chats(self, user_id: str, term: str, page: int = 1, limit: int = 20) -> PaginatedResult:
        term = (term or "").strip()
        if not term:
            raise ValidationError("Search term is required", details={"field": "q"})
        return await self.chats.search_by_title(user_id, term, page, limit)

    async def rename_chat(self, chat_id: str, user_id: str, title: str | None) -> Chat:
        """A blank title falls back to the untitled placeholder."""
        chat = await self.get_chat(chat_id, user_id)
        title = (title or "").strip() or self.settings.untitled_chat_title
        return await self.chats.save(chat, title=title)

    async def deactivate_chat(self, chat_id: str, user_id: str) -> None:
        chat = await self.get_chat(chat_id, user_id)
        await self.chats.save(chat, is_active=False)
        logger.info("Chat deactivated", chat_id=chat_id, user_id=user_id)

    async def chat_stats(self, user_id: str) -> ChatStats:
        chats = await self.chats.list_all_for_user(user_id)
        now = utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        agent_usage = Counter(chat.agent_id for chat in chats)

        return ChatStats(
            total_chats=len(chats),
            total_messages=sum(chat.message_count for chat in chats),
            chats_this_month=sum(1 for chat in chats if chat.created_at >= month_start),
            most_used_agent_id=agent_usage.most_common(1)[0][0] if agent_usage else None,
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def create_message(
        self,
        chat_id: str,
        user_id: str,
        role: str | MessageRole,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> Message:
        """
        Persist a message and bump the chat's counters.

        The message insert and the counter update share the caller's
        session and commit together.

        Raises:
            ValidationError: blank content or unknown role
            NotFoundOrForbidden: chat missing, inactive or not owned by user_id
        """
        text = clean_content(content)
        role = parse_role(role)
        chat = await self.get_chat(chat_id, user_id)

        message = await self.messages.create(
            Message(
                chat_id=chat.id,
                user_id=user_id,
                role=role.value,
                content=text,
                message_metadata=metadata or None,
            )
        )
        await self.chats.bump_activity(chat, message.created_at)

        logger.debug(
            "Message created",
            chat_id=chat.id,
            message_id=message.id,
            role=role.value,
            message_count=chat.message_count,
        )
        return message

    async def get_message(self, message_id: str, user_id: str) -> Message:
        message = await self.messages.get(message_id)
        if message is None or message.user_id != user_id:
            raise NotFoundOrForbidden(MESSAGE_NOT_FOUND, details={"message_id": message_id})
        return message

    async def list_messages(
        self,
        chat_id: str,
        user_id: str,
        page: int = 1,
        limit: int | None = None,
        order_by: str = "created_at",
        direction: Literal["asc", "desc"] = "asc",
    ) -> PaginatedResult:
        chat = await self.get_chat(chat_id, user_id)
        return await self.messages.list_for_chat(
            chat.id,
            page=page,
            page_size=limit or self.settings.message_page_size,
            order_by=order_by,
            direction=direction,
        )

    async def recent_messages(self, chat_id: str, user_id: str, limit: int | None = None) -> list[Message]:
        chat = await self.get_chat(chat_id, user_id)
        return await self.messages.recent(chat.id, limit or self.settings.recent_message_limit)

    async def history(self, chat_id: str) -> Sequence[Message]:
        """All active messages of a chat, oldest first. No ownership check."""
        return await self.messages.history(chat_id)

    async def update_message(
        self,
        message_id: str,
        user_id: str,
        content: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Message:
        message = await self.get_message(message_id, user_id)
        values: dict[str, Any] = {}
        if content is not None:
            values["content"] = clean_content(content)
        if metadata is not None:
            values["message_metadata"] = {**(message.message_metadata or {}), **metadata}
        if not values:
            return message
        return await self.messages.save(message, **values)

    async def deactivate_message(self, message_id: str, user_id: str) -> None:
        message = await self.get_message(message_id, user_id)
        await self.messages.save(message, is_active=False)

    async def search_messages(
        self,
        user_id: str,
        term: str,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResult:
        """
        Case-insensitive substring search over all of a user's chats.

        Chat ids are queried in batches of ``search_batch_size`` and the
        matches are paginated in memory, newest first.
        """
        needle = (term or "").strip().lower()
        if not needle:
            raise ValidationError("Search term is required", details={"field": "q"})

        chats = await self.chats.list_all_for_user(user_id)
        titles = {chat.id: chat.title for chat in chats}
        chat_ids = list(titles)
        batch_size = self.settings.search_batch_size

        hits: list[MessageSearchHit] = []
        for start in range(0, len(chat_ids), batch_size):
            batch = chat_ids[start:start + batch_size]
            for message in await self.messages.list_for_chats(batch):
                if needle in message.content.lower():
                    hits.append(MessageSearchHit(message=message, chat_title=titles[message.chat_id]))

        hits.sort(key=lambda hit: hit.message.created_at, reverse=True)
        return paginate_in_memory(hits, page, limit)

    async def messages_for_agent(
        self,
        user_id: str,
        agent_id: str,
        page: int = 1,
        limit: int | None = None,
        order_by: Literal["created_at", "updated_at"] = "created_at",
        direction: Literal["asc", "desc"] = "desc",
    ) -> AgentMessages:
        """
        Every active message in the user's active chats with one agent.

        Unlike the per-chat reads this requires a current entitlement.

        Raises:
            EntitlementDenied: no active, non-expired grant; carries the reason
            NotFound: the agent is missing or inactive
        """
        access = await self.entitlements.check_access(user_id, agent_id)
        if not access.has_access:
            raise EntitlementDenied(access.reason, details={"agent_id": agent_id})

        agent = await self.agents.get(agent_id)
        if agent is None:
            raise NotFound("Agent not found", details={"agent_id": agent_id})

        chats = await self.chats.list_for_user_and_agent(user_id, agent_id)
        chat_ids = [chat.id for chat in chats]
        batch_size = self.settings.search_batch_size

        messages: list[Message] = []
        for start in range(0, len(chat_ids), batch_size):
            messages.extend(await self.messages.list_for_chats(chat_ids[start:start + batch_size]))

        messages.sort(key=lambda message: getattr(message, order_by), reverse=direction == "desc")
        return AgentMessages(
            agent=agent,
            chats=chats,
            page=paginate_in_memory(messages, page, limit or self.settings.message_page_size),
        )

    async def message_stats(self, user_id: str) -> dict[str, int]:
        by_role = await self.messages.count_by_role(user_id)
        stats = {role.value: by_role.get(role.value, 0) for role in MessageRole}
        stats["total"] = sum(by_role.values())
        return stats
