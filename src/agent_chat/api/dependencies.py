# src/agent_chat/api/dependencies.py
from typing import Annotated, AsyncGenerator, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.config.settings import Settings, get_settings
from agent_chat.domain.exceptions import MissingIdentity
from agent_chat.infrastructure.database.connection import DatabaseManager
from agent_chat.providers import LLMClientFactory
from agent_chat.services import (
    AgentDirectory,
    CatalogService,
    ConversationService,
    EntitlementService,
    MessageOrchestrator,
    UserService,
)
from agent_chat.services.orchestrator import SessionFactory


AppSettings = Annotated[Settings, Depends(get_settings)]


def get_database(request: Request) -> DatabaseManager:
    """The DatabaseManager the application was created with."""
    return request.app.state.db


Database = Annotated[DatabaseManager, Depends(get_database)]


async def get_db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits when the endpoint succeeds."""
    async with database.session() as session:
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_session_factory(database: Database) -> SessionFactory:
    return database.session


def get_llm_client_factory(settings: AppSettings) -> LLMClientFactory:
    return LLMClientFactory(settings)


def get_current_user_id(request: Request, settings: AppSettings) -> str:
    """
    Caller identity from the x-user-id header, falling back to the cookie
    set at OAuth callback time.

    Raises:
        MissingIdentity: neither is present
    """
    user_id = request.headers.get(settings.user_id_header) or request.cookies.get(settings.user_id_cookie)
    if not user_id or not user_id.strip():
        raise MissingIdentity()
    return user_id.strip()


def get_agent_id_header(request: Request, settings: AppSettings) -> Optional[str]:
    agent_id = request.headers.get(settings.agent_id_header)
    return agent_id.strip() if agent_id and agent_id.strip() else None


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
AgentIdHeader = Annotated[Optional[str], Depends(get_agent_id_header)]


def get_user_service(session: DbSession) -> UserService:
    return UserService(session)


def get_catalog_service(session: DbSession) -> CatalogService:
    return CatalogService(session)


def get_entitlement_service(session: DbSession) -> EntitlementService:
    return EntitlementService(session)


def get_agent_directory(session: DbSession, settings: AppSettings) -> AgentDirectory:
    return AgentDirectory(session, settings)


def get_conversation_service(session: DbSession, settings: AppSettings) -> ConversationService:
    return ConversationService(session, settings)


def get_orchestrator(
    session: DbSession,
    settings: AppSettings,
    client_factory: Annotated[LLMClientFactory, Depends(get_llm_client_factory)],
    session_factory: Annotated[SessionFactory, Depends(get_session_factory)],
) -> MessageOrchestrator:
    return MessageOrchestrator(session, settings, client_factory, session_factory)


Users = Annotated[UserService, Depends(get_user_service)]
Catalog = Annotated[CatalogService, Depends(get_catalog_service)]
Entitlements = Annotated[EntitlementService, Depends(get_entitlement_service)]
Directory = Annotated[AgentDirectory, Depends(get_agent_directory)]
Conversations = Annotated[ConversationService, Depends(get_conversation_service)]
Orchestrator = Annotated[MessageOrchestrator, Depends(get_orchestrator)]
