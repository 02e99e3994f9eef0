# src/agent_chat/api/routes/chats.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse

from agent_chat.api.dependencies import AgentIdHeader, Conversations, CurrentUserId, Orchestrator
from agent_chat.api.schemas.base import ApiResponse
from agent_chat.api.schemas.chats import (
    ChatCreate,
    ChatRead,
    ChatStatsRead,
    ChatUpdate,
    StreamRequest,
    TitleRead,
)
from agent_chat.api.schemas.pagination import PaginatedResponse, PaginationMeta, PaginationParams, pagination_params
from agent_chat.domain.exceptions import MissingField
from agent_chat.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

Pagination = Annotated[PaginationParams, Depends(pagination_params)]


@router.post("", response_model=ApiResponse[ChatRead], status_code=status.HTTP_201_CREATED)
async def create_chat(
    body: ChatCreate,
    user_id: CurrentUserId,
    header_agent_id: AgentIdHeader,
    conversations: Conversations,
):
    """Start a chat with an agent the caller holds an active entitlement for."""
    agent_id = body.agent_id or header_agent_id
    if not agent_id:
        raise MissingField("agentId")

    chat = await conversations.create_chat(user_id, agent_id, body.title)
    return ApiResponse(message="Chat created", data=ChatRead.model_validate(chat))


@router.get("", response_model=PaginatedResponse[ChatRead])
async def list_chats(user_id: CurrentUserId, pagination: Pagination, conversations: Conversations):
    result = await conversations.list_chats(user_id, pagination.page, pagination.limit)
    return PaginatedResponse[ChatRead](
        data=[ChatRead.model_validate(chat) for chat in result.items],
        pagination=PaginationMeta.from_result(result),
    )


@router.get("/search", response_model=PaginatedResponse[ChatRead])
async def search_chats(
    user_id: CurrentUserId,
    pagination: Pagination,
    conversations: Conversations,
    q: str = Query(..., description="Title prefix"),
):
    result = await conversations.search_chats(user_id, q, pagination.page, pagination.limit)
    return PaginatedResponse[ChatRead](
        data=[ChatRead.model_validate(chat) for chat in result.items],
        pagination=PaginationMeta.from_result(result),
    )


@router.get("/stats", response_model=ApiResponse[ChatStatsRead])
async def chat_stats(user_id: CurrentUserId, conversations: Conversations):
    stats = await conversations.chat_stats(user_id)
    return ApiResponse(data=ChatStatsRead.model_validate(stats))


@router.get("/{chat_id}", response_model=ApiResponse[ChatRead])
async def get_chat(chat_id: str, user_id: CurrentUserId, conversations: Conversations):
    chat = await conversations.get_chat(chat_id, user_id)
    return ApiResponse(data=ChatRead.model_validate(chat))


@router.patch("/{chat_id}", response_model=ApiResponse[ChatRead])
async def rename_chat(chat_id: str, body: ChatUpdate, user_id: CurrentUserId, conversations: Conversations):
    chat = await conversations.rename_chat(chat_id, user_id, body.title)
    return ApiResponse(message="Chat updated", data=ChatRead.model_validate(chat))


@router.delete("/{chat_id}", response_model=ApiResponse[None])
async def delete_chat(chat_id: str, user_id: CurrentUserId, conversations: Conversations):
    await conversations.deactivate_chat(chat_id, user_id)
    return ApiResponse(message="Chat deleted")


@router.post("/{chat_id}/stream")
async def stream_reply(
    chat_id: str,
    body: StreamRequest,
    user_id: CurrentUserId,
    agent_id: AgentIdHeader,
    orchestrator: Orchestrator,
):
    """
    Send a user message and stream the assistant reply as plain text.

    The reply is saved as one assistant message after the stream ends,
    unless it is blank. Provider errors terminate the stream.
    """
    stream = await orchestrator.start_stream(chat_id, user_id, body.content, body.metadata)
    logger.info(
        "Streaming reply",
        chat_id=chat_id,
        agent_id=agent_id,
        model=stream.model,
        provider=stream.provider,
    )
    return StreamingResponse(
        stream.chunks,
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-User-Message-Id": stream.user_message.id,
        },
    )


@router.post("/{chat_id}/generate-title", response_model=ApiResponse[TitleRead])
async def generate_title(chat_id: str, user_id: CurrentUserId, orchestrator: Orchestrator):
    title = await orchestrator.generate_title(chat_id, user_id)
    return ApiResponse(message="Title generated", data=TitleRead(title=title))
