"""User request/response schemas."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from agent_chat.api.schemas.base import CamelModel


class UserLogin(CamelModel):
    """Profile reported by the OAuth callback."""

    id: Optional[str] = Field(default=None, max_length=64, description="Identity provider user id")
    email: str = Field(..., max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: str = Field(..., min_length=1, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)
    provider: str = Field(default="google", max_length=50)


class UserUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=1024)


class UserRead(CamelModel):
    id: str
    email: str
    name: str
    avatar_url: Optional[str] = None
    provider: str
    subscription: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
