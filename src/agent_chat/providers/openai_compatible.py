"""Client for any OpenAI-protocol endpoint (OpenAI, Groq, Ollama)."""

from typing import AsyncIterator

from openai import AsyncOpenAI, OpenAIError

from agent_chat.domain.exceptions import ProviderError
from agent_chat.infrastructure.observability.logging import get_logger
from agent_chat.interfaces import ChatTurn, Completion, ILLMClient

logger = get_logger(__name__)


class OpenAICompatibleClient(ILLMClient):
    """
    Chat-completions client bound to one model.

    SDK failures of any kind surface as ProviderError.
    """

    def __init__(
        self,
        model: str,
        provider: str,
        api_key: str,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ):
        self._model = model
        self._provider = provider
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider(self) -> str:
        return self._provider

    def _request_options(self) -> dict:
        options = {}
        if self._temperature is not None:
            options["temperature"] = self._temperature
        if self._max_tokens is not None:
            options["max_tokens"] = self._max_tokens
        return options

    def _provider_error(self, exc: Exception) -> ProviderError:
        logger.warning(
            "Provider request failed",
            provider=self._provider,
            model=self._model,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return ProviderError(
            f"{self._provider} request failed: {exc}",
            details={"provider": self._provider, "model": self._model},
        )

    async def complete(self, messages: list[ChatTurn]) -> Completion:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                **self._request_options(),
            )
        except OpenAIError as e:
            raise self._provider_error(e) from e

        if not response.choices:
            raise ProviderError(
                f"{self._provider} returned no choices",
                details={"provider": self._provider, "model": self._model},
            )

        usage = response.usage
        return Completion(
            text=response.choices[0].message.content or "",
            model=self._model,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
        )

    async def stream(self, messages: list[ChatTurn]) -> AsyncIterator[str]:
        try:
            stream = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                stream=True,
                **self._request_options(),
            )
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except OpenAIError as e:
            raise self._provider_error(e) from e
