"""
API v1 router aggregator.

Mounted at ``settings.api_prefix`` (``/api/v1``) by the application factory.

Routes included in v1:
    - /users - OAuth upsert and profile
    - /agent-categories - Category catalog
    - /agents - Agent catalog
    - /user-agents - Entitlements of the caller
    - /chats - Conversations, streaming and title generation
    - /messages - Messages and single-shot replies

Routes NOT versioned (kept at root level):
    - /health, /health/ready
"""

from fastapi import APIRouter

from agent_chat.api.routes import agent_categories, agents, chats, messages, user_agents, users


router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(agent_categories.router, prefix="/agent-categories", tags=["Agent Categories"])
router.include_router(agents.router, prefix="/agents", tags=["Agents"])
router.include_router(user_agents.router, prefix="/user-agents", tags=["Entitlements"])
router.include_router(chats.router, prefix="/chats", tags=["Chats"])
router.include_router(messages.router, prefix="/messages", tags=["Messages"])


__all__ = ["router"]
