"""Chat schemas."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from agent_chat.api.schemas.base import CamelModel


class ChatCreate(CamelModel):
    agent_id: Optional[str] = Field(default=None, description="Falls back to the x-agent-id header")
    title: Optional[str] = Field(default=None, max_length=255)


class ChatUpdate(CamelModel):
    title: Optional[str] = Field(default=None, max_length=255)


class ChatRead(CamelModel):
    id: str
    title: str
    user_id: str
    agent_id: str
    message_count: int
    last_message_at: Optional[datetime] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class StreamRequest(CamelModel):
    content: str = Field(..., description="User message text")
    metadata: Optional[dict] = None


class TitleRead(CamelModel):
    title: str


class ChatStatsRead(CamelModel):
    total_chats: int
    total_messages: int
    chats_this_month: int
    most_used_agent_id: Optional[str] = None
