"""Read-only agent lookup for chats."""

from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.config.settings import Settings
from agent_chat.infrastructure.database.models import Agent
from agent_chat.infrastructure.database.repositories import AgentRepository, ChatRepository


class AgentDirectory:

    def __init__(self, session: AsyncSession, settings: Settings):
        self.settings = settings
        self.chats = ChatRepository(session)
        self.agents = AgentRepository(session)

    async def get_agent_for_chat(self, chat_id: str, user_id: str) -> Agent | None:
        """
        The active agent behind an active chat owned by ``user_id``.

        Returns None when the chat is missing, inactive or not owned by
        the user, or when its agent is missing or inactive.
        """
        chat = await self.chats.get_owned(chat_id, user_id)
        if chat is None:
            return None
        return await self.agents.get(chat.agent_id)

    def system_prompt_for(self, agent: Agent | None) -> str:
        if agent is not None and agent.system_prompt and agent.system_prompt.strip():
            return agent.system_prompt
        return self.settings.default_system_prompt

    def model_for(self, agent: Agent | None) -> str:
        if agent is not None and agent.model and agent.model.strip():
            return agent.model.strip()
        return self.settings.default_model
