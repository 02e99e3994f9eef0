"""Chat messages (one turn each)."""

from enum import Enum
from typing import Any, Optional

from sqlalchemy import Column, JSON, Text, Index
from sqlmodel import Field

from agent_chat.infrastructure.database.base_model import BaseModel, SoftDeleteMixin


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel, SoftDeleteMixin, table=True):
    """
    Attributes:
        chat_id: Owning chat
        user_id: Owner of the chat (also on assistant turns)
        role: One of MessageRole, stored as its value
        content: Trimmed, non-empty text
        message_metadata: Model, provider, token counts, streaming flag
    """

    __tablename__ = "messages"

    chat_id: str = Field(nullable=False, index=True, max_length=64)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    role: str = Field(nullable=False, max_length=20)
    content: str = Field(sa_column=Column(Text, nullable=False))
    message_metadata: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    __table_args__ = (
        Index('ix_messages_chat_id_created_at', 'chat_id', 'created_at'),
    )
