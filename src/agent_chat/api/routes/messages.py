# src/agent_chat/api/routes/messages.py
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, status

from agent_chat.api.dependencies import Conversations, CurrentUserId, Orchestrator
from agent_chat.api.schemas.base import ApiResponse
from agent_chat.api.schemas.messages import (
    MessageCreate,
    MessageRead,
    MessageSearchRead,
    MessageSendResponse,
    MessageUpdate,
)
from agent_chat.api.schemas.pagination import PaginatedResponse, PaginationMeta, PaginationParams, pagination_params
from agent_chat.domain.exceptions import MissingField

router = APIRouter()

Pagination = Annotated[PaginationParams, Depends(pagination_params)]


@router.post("", response_model=MessageSendResponse, status_code=status.HTTP_201_CREATED)
async def send_message(body: MessageCreate, user_id: CurrentUserId, orchestrator: Orchestrator):
    """
    Store a message. User messages also get a single-shot assistant reply
    in ``aiResponse``; when generation fails the reply is simply absent.
    """
    if not body.chat_id:
        raise MissingField("chatId")
    if body.content is None:
        raise MissingField("content")

    result = await orchestrator.send_message(
        body.chat_id, user_id, body.content, role=body.role, metadata=body.metadata
    )
    return MessageSendResponse(
        message="Message created",
        data=MessageRead.model_validate(result.message),
        ai_response=MessageRead.model_validate(result.ai_response) if result.ai_response else None,
    )


@router.get("", response_model=PaginatedResponse[MessageRead])
async def list_messages(
    user_id: CurrentUserId,
    conversations: Conversations,
    chat_id: str = Query(..., alias="chatId"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    order_by: Literal["created_at", "updated_at"] = Query("created_at", alias="orderBy"),
    direction: Literal["asc", "desc"] = Query("asc"),
):
    result = await conversations.list_messages(chat_id, user_id, page, limit, order_by, direction)
    return PaginatedResponse[MessageRead](
        data=[MessageRead.model_validate(message) for message in result.items],
        pagination=PaginationMeta.from_result(result),
    )


@router.get("/recent", response_model=ApiResponse[list[MessageRead]])
async def recent_messages(
    user_id: CurrentUserId,
    conversations: Conversations,
    chat_id: str = Query(..., alias="chatId"),
    limit: int = Query(20, ge=1, le=100),
):
    messages = await conversations.recent_messages(chat_id, user_id, limit)
    return ApiResponse(data=[MessageRead.model_validate(message) for message in messages])


@router.get("/search", response_model=PaginatedResponse[MessageSearchRead])
async def search_messages(
    user_id: CurrentUserId,
    pagination: Pagination,
    conversations: Conversations,
    q: str = Query(..., description="Case-insensitive substring"),
):
    result = await conversations.search_messages(user_id, q, pagination.page, pagination.limit)
    return PaginatedResponse[MessageSearchRead](
        data=[
            MessageSearchRead.model_validate(
                {**MessageRead.model_validate(hit.message).model_dump(), "chat_title": hit.chat_title}
            )
            for hit in result.items
        ],
        pagination=PaginationMeta.from_result(result),
    )


@router.get("/stats", response_model=ApiResponse[dict[str, int]])
async def message_stats(user_id: CurrentUserId, conversations: Conversations):
    return ApiResponse(data=await conversations.message_stats(user_id))


@router.get("/{message_id}", response_model=ApiResponse[MessageRead])
async def get_message(message_id: str, user_id: CurrentUserId, conversations: Conversations):
    message = await conversations.get_message(message_id, user_id)
    return ApiResponse(data=MessageRead.model_validate(message))


@router.patch("/{message_id}", response_model=ApiResponse[MessageRead])
async def update_message(
    message_id: str,
    body: MessageUpdate,
    user_id: CurrentUserId,
    conversations: Conversations,
):
    message = await conversations.update_message(message_id, user_id, body.content, body.metadata)
    return ApiResponse(message="Message updated", data=MessageRead.model_validate(message))


@router.delete("/{message_id}", response_model=ApiResponse[None])
async def delete_message(message_id: str, user_id: CurrentUserId, conversations: Conversations):
    await conversations.deactivate_message(message_id, user_id)
    return ApiResponse(message="Message deleted")
