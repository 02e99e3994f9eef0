"""LLM provider selection and clients."""

from agent_chat.providers.resolver import ProviderKind, resolve_provider, build_client
from agent_chat.providers.openai_compatible import OpenAICompatibleClient
from agent_chat.providers.factory import LLMClientFactory

__all__ = [
    "ProviderKind",
    "resolve_provider",
    "build_client",
    "OpenAICompatibleClient",
    "LLMClientFactory",
]
