# src/agent_chat/api/app.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_chat.config.settings import Settings, get_settings
from agent_chat.api.middleware.cors import get_cors_middleware_config
from agent_chat.api.middleware.request_id import RequestIDMiddleware
from agent_chat.api.middleware.logging import RequestLoggingMiddleware
from agent_chat.api.middleware.errors import register_error_handlers
from agent_chat.api.routes import health
from agent_chat.api import v1
from agent_chat.infrastructure.database import DatabaseManager, db
from agent_chat.infrastructure.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings: Settings = app.state.settings
    database: DatabaseManager = app.state.db

    configure_logging()

    # Tests hand over an already connected manager
    owns_connection = not database.is_connected
    if owns_connection:
        await database.connect(
            url=settings.database_url.get_secret_value(),
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
            pool_pre_ping=True,
            echo_sql=settings.db_echo_sql,
        )
        if settings.db_create_tables:
            await database.create_tables()

    logger.info("Application started", environment=settings.environment, version=settings.app_version)

    yield

    if owns_connection:
        await database.disconnect()
    logger.info("Application stopped")


def create_app(settings: Optional[Settings] = None, database: Optional[DatabaseManager] = None) -> FastAPI:
    """
    Application factory.

    Register new versioned routers in api/v1/router.py.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
# Agent Chat API

Multi-tenant chat backend for catalog AI agents.

- **Catalog**: agent categories and agents, each bound to a model
- **Entitlements**: per-user agent access with optional expiry
- **Chats**: conversations with a single agent, searchable history
- **Replies**: single-shot or streamed, from OpenAI, Groq or a local Ollama model

## Identity

Requests identify the caller with the `x-user-id` header, or with the
`user_id` cookie set by `POST /api/v1/users`. The agent of a new chat may be
passed in the `x-agent-id` header.

## Responses

Every JSON response uses the envelope `{success, message, data, error}`.
        """,
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Liveness and readiness checks."},
            {"name": "Users", "description": "OAuth upsert and profile management."},
            {"name": "Agent Categories", "description": "Catalog categories."},
            {"name": "Agents", "description": "Catalog agents and their model configuration."},
            {"name": "Entitlements", "description": "Agent access grants of the caller."},
            {"name": "Chats", "description": "Conversations, streamed replies and title generation."},
            {"name": "Messages", "description": "Messages and single-shot assistant replies."},
        ],
    )
    app.state.settings = settings
    app.state.db = database or db

    # Middleware (added in reverse order of execution)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(CORSMiddleware, **get_cors_middleware_config(settings))

    register_error_handlers(app)

    # Health routes (no versioning - kept at root level)
    app.include_router(health.router, tags=["Health"])

    app.include_router(v1.router, prefix=settings.api_prefix)

    return app


app = create_app()
