"""Agent and category schemas."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from agent_chat.api.schemas.base import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    icon: Optional[str] = Field(default=None, max_length=255)
    display_order: int = Field(default=0, ge=0)


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    icon: Optional[str] = Field(default=None, max_length=255)
    display_order: Optional[int] = Field(default=None, ge=0)


class CategoryRead(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    display_order: int
    is_active: bool
    created_at: datetime


class AgentFields(CamelModel):
    description: Optional[str] = Field(default=None, max_length=2000)
    model: Optional[str] = Field(default=None, max_length=255, examples=["gpt-4o-mini", "llama3.2"])
    capabilities: Optional[list[str]] = None
    system_prompt: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0, le=2)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    is_free: Optional[bool] = None
    icon: Optional[str] = Field(default=None, max_length=255)
    tags: Optional[list[str]] = None


class AgentCreate(AgentFields):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: str
    price: float = Field(default=0.0, ge=0)


class AgentUpdate(AgentFields):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category_id: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)


class AgentRead(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    category_id: str
    model: Optional[str] = None
    capabilities: list[str] = Field(default_factory=list)
    system_prompt: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    is_free: bool
    icon: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
