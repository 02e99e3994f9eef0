"""Entitlement (UserAgent) schemas."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from agent_chat.api.schemas.base import CamelModel
from agent_chat.api.schemas.catalog import AgentRead


class GrantCreate(CamelModel):
    agent_id: str
    user_id: Optional[str] = Field(default=None, description="Grantee; defaults to the caller")
    payment_ref: Optional[str] = Field(default=None, max_length=255)
    expires_at: Optional[datetime] = None


class GrantExtend(CamelModel):
    expires_at: datetime


class EntitlementRead(CamelModel):
    id: str
    user_id: str
    agent_id: str
    purchased_at: datetime
    expires_at: Optional[datetime] = None
    payment_ref: Optional[str] = None
    message_count: int
    last_used_at: Optional[datetime] = None
    is_active: bool


class AccessRead(CamelModel):
    has_access: bool
    reason: Optional[str] = None
    expires_at: Optional[datetime] = None


class CategoryEntitlements(CamelModel):
    category_id: Optional[str]
    category_name: Optional[str]
    agents: list[AgentRead]
