"""
Entitlements: a user's (optionally time-bounded) right to use an agent.

At most one active, non-expired row exists per (user_id, agent_id).
Expired rows stay active until something checks them.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Index
from sqlmodel import Field

from agent_chat.infrastructure.database.base_model import BaseModel, SoftDeleteMixin, UTCDateTime, utcnow


class UserAgent(BaseModel, SoftDeleteMixin, table=True):
    __tablename__ = "user_agents"

    user_id: str = Field(nullable=False, index=True, max_length=64)
    agent_id: str = Field(nullable=False, index=True, max_length=64)

    purchased_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
    expires_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    payment_ref: Optional[str] = Field(default=None, max_length=255)

    # Usage counters
    message_count: int = Field(default=0, nullable=False)
    last_used_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    __table_args__ = (
        Index('ix_user_agents_user_agent_active', 'user_id', 'agent_id', 'is_active'),
    )
