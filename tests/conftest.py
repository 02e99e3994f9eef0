# tests/conftest.py
"""
Shared fixtures.

- Settings pinned to a quiet local environment
- A fresh SQLite file database per test, tables created from the models
- Factory-built user, category, agent and entitlement
- The FastAPI app wired to the test database and a scripted LLM factory
- Async HTTP client over ASGITransport
"""

import os
from types import SimpleNamespace
from typing import AsyncGenerator

# Must be set before the application reads its settings
os.environ.update({
    "ENVIRONMENT": "local",
    "LOG_LEVEL": "40",
    "LOG_FORMAT": "console",
})
for _key in ("OPENAI_API_KEY", "GROQ_API_KEY", "DATABASE_URL"):
    os.environ.pop(_key, None)

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.api.app import create_app
from agent_chat.api.dependencies import get_llm_client_factory
from agent_chat.config.settings import Settings, get_settings
from agent_chat.infrastructure.database.connection import DatabaseManager
from agent_chat.infrastructure.observability.logging import configure_logging
from tests.factories import (
    AgentCategoryFactory,
    AgentFactory,
    UserAgentFactory,
    UserFactory,
)
from tests.fakes import FakeClientFactory


# ============================================================================
# Settings
# ============================================================================

@pytest.fixture(scope="session")
def test_settings() -> Settings:
    get_settings.cache_clear()
    settings = get_settings()
    configure_logging()
    return settings


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
async def db_manager(tmp_path, test_settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    """Connected DatabaseManager on a throwaway SQLite file."""
    manager = DatabaseManager()
    await manager.connect(url=f"sqlite+aiosqlite:///{tmp_path / 'agent_chat_test.db'}")

    await manager.create_tables()

    yield manager

    await manager.disconnect()


@pytest.fixture
async def db_session(db_manager: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for arranging data and calling services directly.

    Factories commit, so rows they create are visible to the app's own
    request sessions.
    """
    async with db_manager.session() as session:
        yield session


# ============================================================================
# Seed data
# ============================================================================

@pytest.fixture
async def user(db_session: AsyncSession):
    return await UserFactory.create_async(session=db_session, email="ada@example.com", name="Ada")


@pytest.fixture
async def other_user(db_session: AsyncSession):
    return await UserFactory.create_async(session=db_session, email="grace@example.com", name="Grace")


@pytest.fixture
async def category(db_session: AsyncSession):
    return await AgentCategoryFactory.create_async(session=db_session, name="Writing")


@pytest.fixture
async def agent(db_session: AsyncSession, category):
    return await AgentFactory.create_async(
        session=db_session,
        name="Editor",
        category_id=category.id,
        model="llama3.2",
        system_prompt="You are a meticulous editor.",
    )


@pytest.fixture
async def entitlement(db_session: AsyncSession, user, agent):
    return await UserAgentFactory.create_async(session=db_session, user_id=user.id, agent_id=agent.id)


@pytest.fixture
async def seeded(user, other_user, category, agent, entitlement) -> SimpleNamespace:
    return SimpleNamespace(
        user=user,
        other_user=other_user,
        category=category,
        agent=agent,
        entitlement=entitlement,
    )


# ============================================================================
# LLM
# ============================================================================

@pytest.fixture
def llm_factory() -> FakeClientFactory:
    return FakeClientFactory()


# ============================================================================
# FastAPI Application and Client
# ============================================================================

@pytest.fixture
def app(test_settings: Settings, db_manager: DatabaseManager, llm_factory: FakeClientFactory) -> FastAPI:
    application = create_app(settings=test_settings, database=db_manager)
    application.dependency_overrides[get_llm_client_factory] = lambda: llm_factory
    return application


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for the app.

    Unhandled exceptions come back as 500 responses instead of being
    re-raised into the test.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_headers(user) -> dict:
    return {"x-user-id": user.id}
