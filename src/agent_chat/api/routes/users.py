# src/agent_chat/api/routes/users.py
from typing import Literal

from fastapi import APIRouter, Query, Response, status

from agent_chat.api.dependencies import AppSettings, Conversations, CurrentUserId, Users
from agent_chat.api.schemas.base import ApiResponse
from agent_chat.api.schemas.messages import (
    AgentMessagesRead,
    AgentMessagesResponse,
    AgentSummary,
    ChatSummary,
    MessageRead,
)
from agent_chat.api.schemas.pagination import PaginationMeta
from agent_chat.api.schemas.users import UserLogin, UserRead, UserUpdate
from agent_chat.domain.exceptions import AccessDenied

router = APIRouter()


def _require_self(user_id: str, caller_id: str) -> None:
    if user_id != caller_id:
        raise AccessDenied("You can only access your own account", details={"user_id": user_id})


@router.post("", response_model=ApiResponse[UserRead])
async def login(body: UserLogin, response: Response, users: Users, settings: AppSettings):
    """
    Create or refresh the user reported by the OAuth callback and set the
    identity cookie used by later requests.
    """
    user, created = await users.upsert_from_login(
        email=body.email,
        name=body.name,
        avatar_url=body.avatar_url,
        provider=body.provider,
        user_id=body.id,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    response.set_cookie(
        settings.user_id_cookie,
        user.id,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return ApiResponse(
        message="User created" if created else "User updated",
        data=UserRead.model_validate(user),
    )


@router.get("/me", response_model=ApiResponse[UserRead])
async def get_me(user_id: CurrentUserId, users: Users):
    return ApiResponse(data=UserRead.model_validate(await users.get(user_id)))


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
async def get_user(user_id: str, caller_id: CurrentUserId, users: Users):
    _require_self(user_id, caller_id)
    return ApiResponse(data=UserRead.model_validate(await users.get(user_id)))


@router.patch("/{user_id}", response_model=ApiResponse[UserRead])
async def update_user(user_id: str, body: UserUpdate, caller_id: CurrentUserId, users: Users):
    _require_self(user_id, caller_id)
    user = await users.update(user_id, body.name, body.avatar_url)
    return ApiResponse(message="User updated", data=UserRead.model_validate(user))


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def deactivate_user(user_id: str, caller_id: CurrentUserId, users: Users):
    _require_self(user_id, caller_id)
    await users.deactivate(user_id)
    return ApiResponse(message="User deactivated")


@router.get("/{user_id}/agent/{agent_id}/messages", response_model=AgentMessagesResponse)
async def messages_with_agent(
    user_id: str,
    agent_id: str,
    caller_id: CurrentUserId,
    conversations: Conversations,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    order_by: Literal["created_at", "updated_at"] = Query("created_at", alias="orderBy"),
    direction: Literal["asc", "desc"] = Query("desc"),
):
    """
    The caller's messages with one agent across all their active chats.

    Requires a current entitlement; a denied check answers 403 with the
    reason in ``error.message``.
    """
    _require_self(user_id, caller_id)
    result = await conversations.messages_for_agent(user_id, agent_id, page, limit, order_by, direction)
    return AgentMessagesResponse(
        data=AgentMessagesRead(
            messages=[MessageRead.model_validate(message) for message in result.page.items],
            agent=AgentSummary.model_validate(result.agent),
            chats=[ChatSummary.model_validate(chat) for chat in result.chats],
        ),
        pagination=PaginationMeta.from_result(result.page),
    )
