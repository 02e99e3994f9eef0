# tests/unit/test_provider_resolver.py
"""Unit tests for model classification and client construction."""

import pytest
from pydantic import SecretStr

from agent_chat.config.settings import Settings
from agent_chat.domain.exceptions import MissingCredential
from agent_chat.providers import LLMClientFactory, OpenAICompatibleClient, ProviderKind, build_client, resolve_provider
from agent_chat.providers.resolver import is_local_model


@pytest.mark.unit
class TestResolveProvider:

    @pytest.mark.parametrize(
        "model, expected",
        [
            ("gpt-4o-mini", ProviderKind.OPENAI),
            ("gpt-3.5-turbo", ProviderKind.OPENAI),
            ("azure-openai-deployment", ProviderKind.OPENAI),
            ("llama3-70b-8192", ProviderKind.GROQ),
            ("mixtral-8x7b-32768", ProviderKind.GROQ),
            ("gemma-7b-it", ProviderKind.GROQ),
            ("groq/custom", ProviderKind.GROQ),
            ("llama3.2", ProviderKind.LOCAL),
            ("mistral", ProviderKind.LOCAL),
            ("unknown-model-xyz", ProviderKind.LOCAL),
            ("", ProviderKind.LOCAL),
        ],
    )
    def test_classification(self, model, expected):
        assert resolve_provider(model) is expected

    def test_openai_rule_wins_over_groq_markers(self):
        """First matching rule decides."""
        assert resolve_provider("gpt-gemma-hybrid") is ProviderKind.OPENAI

    def test_case_insensitive(self):
        assert resolve_provider("GPT-4o") is ProviderKind.OPENAI
        assert resolve_provider("Mixtral-8x7B") is ProviderKind.GROQ

    def test_local_model_detection(self):
        assert is_local_model("llama3.2")
        assert is_local_model("codellama:7b")
        assert not is_local_model("unknown-model-xyz")


@pytest.mark.unit
class TestBuildClient:

    def test_openai_requires_key(self):
        with pytest.raises(MissingCredential) as exc_info:
            build_client(ProviderKind.OPENAI, "gpt-4o-mini")

        assert exc_info.value.status_code == 503
        assert exc_info.value.details["provider"] == "openai"

    def test_groq_requires_key(self):
        with pytest.raises(MissingCredential):
            build_client(ProviderKind.GROQ, "llama3-70b-8192", api_key=None)

    def test_local_needs_no_key(self):
        client = build_client(ProviderKind.LOCAL, "llama3.2")

        assert isinstance(client, OpenAICompatibleClient)
        assert client.provider == "ollama"
        assert client.model == "llama3.2"

    def test_openai_with_key(self):
        client = build_client(ProviderKind.OPENAI, "gpt-4o-mini", api_key="sk-test")
        assert client.provider == "openai"


@pytest.mark.unit
class TestLLMClientFactory:

    def test_unknown_model_falls_back_to_local_default(self):
        factory = LLMClientFactory(Settings(ollama_model="llama3.2"))

        client = factory.create("unknown-model-xyz")

        assert client.provider == "ollama"
        assert client.model == "llama3.2"

    def test_local_model_is_kept(self):
        factory = LLMClientFactory(Settings(ollama_model="llama3.2"))
        assert factory.create("mistral").model == "mistral"

    def test_missing_openai_key(self):
        factory = LLMClientFactory(Settings(openai_api_key=None))
        with pytest.raises(MissingCredential):
            factory.create("gpt-4o-mini")

    def test_configured_groq_key(self):
        factory = LLMClientFactory(Settings(groq_api_key=SecretStr("gsk_test")))

        client = factory.create("llama3-70b-8192", temperature=0.2, max_tokens=256)

        assert client.provider == "groq"
        assert client.model == "llama3-70b-8192"
