"""Application services: business rules over the repositories."""

from agent_chat.services.entitlements import AccessCheck, EntitlementService, is_expired
from agent_chat.services.agent_directory import AgentDirectory
from agent_chat.services.conversation import ConversationService
from agent_chat.services.orchestrator import MessageOrchestrator, SendResult, StreamSession
from agent_chat.services.users import UserService
from agent_chat.services.catalog import CatalogService

__all__ = [
    "AccessCheck",
    "EntitlementService",
    "is_expired",
    "AgentDirectory",
    "ConversationService",
    "MessageOrchestrator",
    "SendResult",
    "StreamSession",
    "UserService",
    "CatalogService",
]
