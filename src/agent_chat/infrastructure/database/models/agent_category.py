"""Agent categories used to group agents in listings."""

from typing import Optional

from sqlmodel import Field

from agent_chat.infrastructure.database.base_model import BaseModel, SoftDeleteMixin


class AgentCategory(BaseModel, SoftDeleteMixin, table=True):
    """Category name is unique among active categories (enforced by the service)."""

    __tablename__ = "agent_categories"

    name: str = Field(nullable=False, index=True, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    icon: Optional[str] = Field(default=None, max_length=255)
    display_order: int = Field(default=0, nullable=False)
