# src/agent_chat/interfaces/llm.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import AsyncIterator, Literal, TypedDict
from dataclasses import dataclass


class ChatTurn(TypedDict):
    """One entry of the prompt sent to a provider."""
    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class Completion:
    """Result of a single-shot generation."""
    text: str
    model: str
    prompt_tokens: int | None = None
    completion_tokens: int | None = None


class ILLMClient(ABC):
    """
    Interface for an LLM backend bound to one model.

    Example:
        class OpenAICompatibleClient(ILLMClient):
            async def complete(self, messages):
                ...
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model id sent to the provider."""
        pass

    @property
    @abstractmethod
    def provider(self) -> str:
        """Provider name recorded in message metadata."""
        pass

    @abstractmethod
    async def complete(self, messages: list[ChatTurn]) -> Completion:
        """
        Generate a full reply.

        Raises:
            ProviderError: upstream failure of any kind
        """
        pass

    @abstractmethod
    def stream(self, messages: list[ChatTurn]) -> AsyncIterator[str]:
        """
        Generate a reply as text chunks, in arrival order.

        Raises:
            ProviderError: upstream failure, possibly after some chunks
        """
        pass
