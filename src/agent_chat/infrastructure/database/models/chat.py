"""Chat threads between one user and one agent."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Index
from sqlmodel import Field

from agent_chat.infrastructure.database.base_model import BaseModel, SoftDeleteMixin, UTCDateTime


class Chat(BaseModel, SoftDeleteMixin, table=True):
    """
    ``message_count`` and ``last_message_at`` are denormalised from the
    chat's messages and bumped on every message write.
    """

    __tablename__ = "chats"

    title: str = Field(default="New Chat", nullable=False, max_length=255)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    agent_id: str = Field(nullable=False, index=True, max_length=64)
    message_count: int = Field(default=0, nullable=False)
    last_message_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime, index=True)

    __table_args__ = (
        Index('ix_chats_user_id_is_active', 'user_id', 'is_active'),
    )
