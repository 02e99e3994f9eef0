# tests/unit/test_openai_client.py
"""Unit tests for the OpenAI-protocol client with the SDK mocked out."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from openai import OpenAIError

from agent_chat.domain.exceptions import ProviderError
from agent_chat.providers import OpenAICompatibleClient


def _completion(content, prompt_tokens=10, completion_tokens=4):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


def _chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class _Stream:
    def __init__(self, chunks, error=None):
        self._chunks = chunks
        self._error = error

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for chunk in self._chunks:
            yield chunk
        if self._error:
            raise self._error


@pytest.fixture
def client():
    return OpenAICompatibleClient(
        model="llama3.2",
        provider="ollama",
        api_key="ollama",
        base_url="http://localhost:11434/v1",
        temperature=0.3,
    )


@pytest.mark.unit
class TestComplete:

    async def test_returns_text_and_usage(self, client):
        create = AsyncMock(return_value=_completion("Hi there"))
        client._client.chat.completions.create = create

        completion = await client.complete([{"role": "user", "content": "Hello"}])

        assert completion.text == "Hi there"
        assert completion.prompt_tokens == 10
        assert completion.completion_tokens == 4
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "llama3.2"
        assert kwargs["temperature"] == 0.3
        assert "max_tokens" not in kwargs

    async def test_sdk_error_becomes_provider_error(self, client):
        client._client.chat.completions.create = AsyncMock(side_effect=OpenAIError("connection refused"))

        with pytest.raises(ProviderError) as exc_info:
            await client.complete([{"role": "user", "content": "Hello"}])

        assert exc_info.value.details == {"provider": "ollama", "model": "llama3.2"}

    async def test_no_choices(self, client):
        client._client.chat.completions.create = AsyncMock(
            return_value=SimpleNamespace(choices=[], usage=None)
        )

        with pytest.raises(ProviderError):
            await client.complete([{"role": "user", "content": "Hello"}])


@pytest.mark.unit
class TestStream:

    async def test_yields_non_empty_deltas(self, client):
        client._client.chat.completions.create = AsyncMock(
            return_value=_Stream([_chunk("Hel"), _chunk(None), _chunk("lo")])
        )

        chunks = [chunk async for chunk in client.stream([{"role": "user", "content": "Hi"}])]

        assert chunks == ["Hel", "lo"]

    async def test_error_mid_stream(self, client):
        client._client.chat.completions.create = AsyncMock(
            return_value=_Stream([_chunk("partial")], error=OpenAIError("reset"))
        )

        received = []
        with pytest.raises(ProviderError):
            async for chunk in client.stream([{"role": "user", "content": "Hi"}]):
                received.append(chunk)

        assert received == ["partial"]
