"""Message schemas."""
from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field

from agent_chat.api.schemas.base import ApiResponse, CamelModel
from agent_chat.api.schemas.pagination import PaginationMeta


class MessageCreate(CamelModel):
    chat_id: Optional[str] = None
    content: Optional[str] = None
    role: str = Field(default="user", examples=["user", "assistant", "system"])
    metadata: Optional[dict[str, Any]] = None


class MessageUpdate(CamelModel):
    content: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class MessageRead(CamelModel):
    id: str
    chat_id: str
    user_id: str
    role: str
    content: str
    metadata: Optional[dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("message_metadata", "metadata"),
        serialization_alias="metadata",
    )
    is_active: bool
    created_at: datetime


class MessageSearchRead(MessageRead):
    chat_title: str


class MessageSendResponse(ApiResponse[MessageRead]):
    """Envelope for POST /messages: the stored message plus any reply."""

    ai_response: Optional[MessageRead] = None


class AgentSummary(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    model: Optional[str] = None
    is_free: bool


class ChatSummary(CamelModel):
    id: str
    title: str
    message_count: int


class AgentMessagesRead(CamelModel):
    messages: list[MessageRead]
    agent: AgentSummary
    chats: list[ChatSummary]


class AgentMessagesResponse(ApiResponse[AgentMessagesRead]):
    """Envelope for a user's messages with one agent, across all their chats."""

    pagination: PaginationMeta
