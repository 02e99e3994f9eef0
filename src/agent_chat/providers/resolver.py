"""
Model-name based provider classification.

``resolve_provider`` is total: every string maps to exactly one
ProviderKind, with LOCAL as the default. ``build_client`` is a plain
factory and performs no I/O.
"""

from enum import Enum

from agent_chat.domain.exceptions import MissingCredential
from agent_chat.interfaces import ILLMClient
from agent_chat.providers.openai_compatible import OpenAICompatibleClient

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
OLLAMA_BASE_URL = "http://localhost:11434/v1"

# Ollama ignores the key but the OpenAI SDK requires one
OLLAMA_API_KEY = "ollama"

GROQ_MARKERS = ("groq", "llama3-", "mixtral", "gemma")
LOCAL_MARKERS = ("llama", "mistral", "codellama")


class ProviderKind(str, Enum):
    OPENAI = "openai"
    GROQ = "groq"
    LOCAL = "ollama"


def resolve_provider(model: str) -> ProviderKind:
    """
    Classify a model id, first match wins:

    1. starts with "gpt-" or contains "openai" -> OPENAI
    2. contains groq, llama3-, mixtral or gemma -> GROQ
    3. anything else -> LOCAL
    """
    name = (model or "").lower()

    if name.startswith("gpt-") or "openai" in name:
        return ProviderKind.OPENAI
    if any(marker in name for marker in GROQ_MARKERS):
        return ProviderKind.GROQ
    return ProviderKind.LOCAL


def is_local_model(model: str) -> bool:
    """True when the model id names a model the local runtime serves."""
    name = (model or "").lower()
    return any(marker in name for marker in LOCAL_MARKERS)


def build_client(
    kind: ProviderKind,
    model: str,
    api_key: str | None = None,
    base_url: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> ILLMClient:
    """
    Instantiate the client for a provider kind.

    Raises:
        MissingCredential: OPENAI or GROQ without an API key
    """
    if kind is ProviderKind.OPENAI:
        if not api_key:
            raise MissingCredential(
                "OpenAI API key is not configured",
                details={"provider": kind.value, "model": model},
            )
        return OpenAICompatibleClient(
            model=model,
            provider=kind.value,
            api_key=api_key,
            base_url=base_url,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    if kind is ProviderKind.GROQ:
        if not api_key:
            raise MissingCredential(
                "Groq API key is not configured",
                details={"provider": kind.value, "model": model},
            )
        return OpenAICompatibleClient(
            model=model,
            provider=kind.value,
            api_key=api_key,
            base_url=base_url or GROQ_BASE_URL,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    return OpenAICompatibleClient(
        model=model,
        provider=kind.value,
        api_key=api_key or OLLAMA_API_KEY,
        base_url=base_url or OLLAMA_BASE_URL,
        temperature=temperature,
        max_tokens=max_tokens,
    )
