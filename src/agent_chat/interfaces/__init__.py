"""Abstract interfaces for data access and LLM providers."""

from agent_chat.interfaces.llm import ChatTurn, Completion, ILLMClient
from agent_chat.interfaces.repository import IRepository

__all__ = [
    "ChatTurn",
    "Completion",
    "ILLMClient",
    "IRepository",
]
