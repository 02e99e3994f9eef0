"""
Message orchestration: the request-scoped path from a user's message to
a persisted assistant reply.

Per message: validate, persist the user turn, resolve the chat's agent,
load history, call the provider, persist the assistant turn. Entitlement
is checked when a chat is created, not on every message.

The two entry points fail differently. ``send_message`` degrades to a
user-turn-only result when the provider fails. ``start_stream`` lets
provider errors end the stream.
"""

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.config.settings import Settings
from agent_chat.domain.exceptions import MissingCredential, MissingField, ProviderError, ValidationError
from agent_chat.infrastructure.database.models import Agent, Message, MessageRole
from agent_chat.infrastructure.database.repositories import MessageRepository
from agent_chat.infrastructure.observability.logging import get_logger
from agent_chat.interfaces import ChatTurn, ILLMClient
from agent_chat.providers import LLMClientFactory
from agent_chat.services.agent_directory import AgentDirectory
from agent_chat.services.conversation import ConversationService
from agent_chat.services.entitlements import EntitlementService

logger = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

TITLE_PROMPT = (
    "You are a helpful assistant that generates concise, descriptive titles for chat "
    "conversations. Generate a title that captures the essence of the first message "
    "in 3 short words or less."
)

PROMPT_ROLES = (MessageRole.USER.value, MessageRole.ASSISTANT.value)


@dataclass
class SendResult:
    message: Message
    ai_response: Optional[Message] = None


@dataclass
class StreamSession:
    """A persisted user turn plus the reply chunks still to be relayed."""
    user_message: Message
    model: str
    provider: str
    chunks: AsyncIterator[str]


def format_prompt(system_prompt: str, history: Sequence[Message], latest: Message) -> list[ChatTurn]:
    """
    Leading system turn, then the stored user/assistant turns in order.

    ``latest`` is appended unless history already contains it.
    """
    turns = list(history)
    if all(message.id != latest.id for message in turns):
        turns.append(latest)

    prompt: list[ChatTurn] = [{"role": "system", "content": system_prompt}]
    prompt.extend(
        {"role": message.role, "content": message.content}
        for message in turns
        if message.role in PROMPT_ROLES
    )
    return prompt


def clean_title(text: str) -> str:
    return text.strip().strip("\"'`").strip().rstrip(".").strip()


class MessageOrchestrator:

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        client_factory: LLMClientFactory,
        session_factory: SessionFactory,
    ):
        self.session = session
        self.settings = settings
        self.client_factory = client_factory
        self.session_factory = session_factory
        self.conversation = ConversationService(session, settings)
        self.directory = AgentDirectory(session, settings)
        self.entitlements = EntitlementService(session)
        self.messages = MessageRepository(session)

    def _client_for(self, agent: Agent | None) -> ILLMClient:
        return self.client_factory.create(
            self.directory.model_for(agent),
            temperature=agent.temperature if agent else None,
            max_tokens=agent.max_tokens if agent else None,
        )

    async def _persist_user_turn(
        self,
        chat_id: str,
        user_id: str,
        content: str,
        metadata: dict[str, Any] | None,
    ) -> tuple[Message, Agent | None]:
        if not chat_id:
            raise MissingField("chatId")

        message = await self.conversation.create_message(
            chat_id, user_id, MessageRole.USER, content, metadata
        )
        chat = await self.conversation.get_chat(chat_id, user_id)
        await self.entitlements.record_usage(user_id, chat.agent_id)

        agent = await self.directory.get_agent_for_chat(chat_id, user_id)
        return message, agent

    async def _prompt_for(self, chat_id: str, latest: Message, agent: Agent | None) -> list[ChatTurn]:
        history = await self.conversation.history(chat_id)
        return format_prompt(self.directory.system_prompt_for(agent), history, latest)

    async def send_message(
        self,
        chat_id: str,
        user_id: str,
        content: str,
        role: str | MessageRole = MessageRole.USER,
        metadata: dict[str, Any] | None = None,
    ) -> SendResult:
        """
        Persist a message and, for user turns, a single-shot reply.

        Provider failures are logged and leave only the user turn.

        Raises:
            ValidationError: missing chat id, blank content or bad role
            NotFoundOrForbidden: chat missing or not owned by user_id
        """
        if role != MessageRole.USER:
            if not chat_id:
                raise MissingField("chatId")
            message = await self.conversation.create_message(chat_id, user_id, role, content, metadata)
            return SendResult(message=message)

        message, agent = await self._persist_user_turn(chat_id, user_id, content, metadata)
        prompt = await self._prompt_for(chat_id, message, agent)

        try:
            client = self._client_for(agent)
            completion = await client.complete(prompt)
        except (ProviderError, MissingCredential) as e:
            logger.warning(
                "Reply generation failed, returning user message only",
                chat_id=chat_id,
                model=self.directory.model_for(agent),
                error_code=e.error_code.value,
                error=e.message,
            )
            return SendResult(message=message)

        text = completion.text.strip()
        if not text:
            logger.warning("Provider returned an empty reply", chat_id=chat_id, model=client.model)
            return SendResult(message=message)

        metadata = {
            "model": client.model,
            "provider": client.provider,
            "generatedBy": client.provider,
        }
        if completion.prompt_tokens is not None:
            metadata["promptTokens"] = completion.prompt_tokens
        if completion.completion_tokens is not None:
            metadata["completionTokens"] = completion.completion_tokens

        reply = await self.conversation.create_message(
            chat_id, user_id, MessageRole.ASSISTANT, text, metadata
        )
        return SendResult(message=message, ai_response=reply)

    async def start_stream(
        self,
        chat_id: str,
        user_id: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> StreamSession:
        """
        Persist the user turn and prepare the provider stream.

        The user turn is committed before the provider client is built,
        so it survives a missing credential as well as a failed stream.
        The assistant turn is written through a fresh session once the
        stream has finished.

        Raises:
            ValidationError, NotFoundOrForbidden: as for send_message
            MissingCredential: the resolved provider has no API key
        """
        message, agent = await self._persist_user_turn(chat_id, user_id, content, metadata)
        prompt = await self._prompt_for(chat_id, message, agent)
        await self.session.commit()
        client = self._client_for(agent)

        return StreamSession(
            user_message=message,
            model=client.model,
            provider=client.provider,
            chunks=self._relay(client, prompt, chat_id, user_id),
        )

    async def _relay(
        self,
        client: ILLMClient,
        prompt: list[ChatTurn],
        chat_id: str,
        user_id: str,
    ) -> AsyncIterator[str]:
        parts: list[str] = []
        try:
            async for chunk in client.stream(prompt):
                parts.append(chunk)
                yield chunk
        except ProviderError as e:
            logger.error("Stream aborted by provider error", chat_id=chat_id, model=client.model, error=e.message)
            raise

        text = "".join(parts).strip()
        if not text:
            logger.warning("Stream produced no text, assistant message not saved", chat_id=chat_id)
            return

        async with self.session_factory() as session:
            reply = await ConversationService(session, self.settings).create_message(
                chat_id,
                user_id,
                MessageRole.ASSISTANT,
                text,
                {"model": client.model, "provider": client.provider, "streaming": True},
            )
        logger.info("Streamed reply saved", chat_id=chat_id, message_id=reply.id, length=len(text))

    async def generate_title(self, chat_id: str, user_id: str) -> str:
        """
        Title a chat from its first user message and save it.

        Raises:
            NotFoundOrForbidden: chat missing or not owned by user_id
            ValidationError: the chat has no user message yet
            ProviderError, MissingCredential: generation failed; title unchanged
        """
        chat = await self.conversation.get_chat(chat_id, user_id)
        first = await self.messages.first_user_message(chat.id)
        if first is None:
            raise ValidationError("Chat has no messages to generate a title from", details={"chat_id": chat_id})

        agent = await self.directory.get_agent_for_chat(chat_id, user_id)
        client = self.client_factory.create(self.directory.model_for(agent))
        completion = await client.complete([
            {"role": "system", "content": TITLE_PROMPT},
            {"role": "user", "content": first.content},
        ])

        title = clean_title(completion.text)
        if not title:
            raise ProviderError("Provider returned an empty title", details={"model": client.model})

        await self.conversation.chats.save(chat, title=title)
        logger.info("Chat title generated", chat_id=chat_id, title=title)
        return title
