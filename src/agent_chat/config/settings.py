from functools import lru_cache
from typing import Literal
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SYSTEM_PROMPT = "You are a helpful and friendly assistant. Respond clearly and concisely."


class Settings(BaseSettings):
    """
    Application settings loaded from environment.

    Provider credentials are optional: a missing key only fails when a
    request actually resolves to that provider.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Agent Chat Service"
    app_version: str = "0.1.0"
    environment: Literal["local", "dev", "staging", "prod"] = "local"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    api_prefix: str = "/api/v1"

    # Database
    database_url: SecretStr = SecretStr("sqlite+aiosqlite:///./agent_chat.db")
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo_sql: bool = False
    # Create missing tables at startup; deployments run alembic instead
    db_create_tables: bool = False

    # Observability
    log_level: int = 20  # INFO by default (DEBUG=10, INFO=20, WARNING=30, ERROR=40)
    log_format: Literal["json", "console"] = "json"
    log_pii_masking_enabled: bool = True

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
    )
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["*"])
    cors_max_age: int = 600

    # Identity propagation
    user_id_header: str = "x-user-id"
    agent_id_header: str = "x-agent-id"
    user_id_cookie: str = "user_id"

    # LLM providers
    openai_api_key: SecretStr | None = None
    groq_api_key: SecretStr | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    ollama_base_url: str = "http://localhost:11434/v1"
    ollama_model: str = "llama3.2"
    default_model: str = "llama3.2"
    default_system_prompt: str = DEFAULT_SYSTEM_PROMPT

    # Conversations
    default_chat_title: str = "New Chat"
    untitled_chat_title: str = "Untitled chat"
    message_page_size: int = 50
    recent_message_limit: int = 20
    search_batch_size: int = 10  # chat ids per IN clause

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
