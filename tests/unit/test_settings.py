"""
Tests for settings loading and the CORS configuration derived from them.
"""
import pytest
from pydantic import ValidationError

from agent_chat.api.middleware.cors import DEFAULT_DEV_ORIGINS, get_cors_middleware_config
from agent_chat.config.settings import Settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


# ============================================================================
# Settings
# ============================================================================


@pytest.mark.unit
class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = make_settings()

        assert settings.environment == "local"
        assert settings.is_production is False
        assert settings.default_chat_title == "New Chat"
        assert settings.ollama_model == "llama3.2"
        assert settings.openai_api_key is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "prod")
        monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
        monkeypatch.setenv("SEARCH_BATCH_SIZE", "5")

        settings = make_settings()

        assert settings.is_production is True
        assert settings.groq_api_key.get_secret_value() == "gsk-test"
        assert settings.search_batch_size == 5

    def test_secrets_are_masked(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-live-123")

        settings = make_settings()

        assert "sk-live-123" not in repr(settings)

    def test_rejects_unknown_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "qa")

        with pytest.raises(ValidationError):
            make_settings()


# ============================================================================
# CORS
# ============================================================================


@pytest.mark.unit
class TestCorsConfig:

    def test_configured_origins(self):
        config = get_cors_middleware_config(make_settings(cors_origins=["https://chat.example.com"]))

        assert config["allow_origins"] == ["https://chat.example.com"]
        assert config["allow_credentials"] is True
        assert "X-User-Message-Id" in config["expose_headers"]

    def test_local_falls_back_to_dev_origins(self):
        config = get_cors_middleware_config(make_settings(environment="local", cors_origins=[]))

        assert config["allow_origins"] == DEFAULT_DEV_ORIGINS

    def test_prod_has_no_fallback(self):
        config = get_cors_middleware_config(make_settings(environment="prod", cors_origins=[]))

        assert config["allow_origins"] == []

    def test_wildcard_dropped_with_credentials(self):
        config = get_cors_middleware_config(
            make_settings(cors_origins=["*", "https://chat.example.com"], cors_allow_credentials=True)
        )

        assert config["allow_origins"] == ["https://chat.example.com"]

    def test_wildcard_kept_without_credentials(self):
        config = get_cors_middleware_config(make_settings(cors_origins=["*"], cors_allow_credentials=False))

        assert config["allow_origins"] == ["*"]

    def test_invalid_origin(self):
        with pytest.raises(ValueError, match="Invalid origin URL format"):
            get_cors_middleware_config(make_settings(cors_origins=["chat.example.com"]))
