"""
Agent personas.

The ``model`` column is a free-form provider model id, interpreted by
the provider resolver.
"""

from typing import List, Optional

from sqlalchemy import Column, JSON, Text, Index
from sqlmodel import Field

from agent_chat.infrastructure.database.base_model import BaseModel, SoftDeleteMixin


class Agent(BaseModel, SoftDeleteMixin, table=True):
    """
    Attributes:
        name: Display name, unique within its category among active agents
        price: Non-negative price; 0 for free agents
        category_id: Owning AgentCategory id
        model: Provider model id; the configured default applies when empty
        capabilities: Capability tags
        system_prompt: Persona instruction sent as the leading system turn
        temperature, max_tokens: Optional generation hints
        is_free: Free-tier flag
    """

    __tablename__ = "agents"

    name: str = Field(nullable=False, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    price: float = Field(default=0.0, nullable=False, ge=0)
    category_id: str = Field(nullable=False, index=True, max_length=64)

    model: Optional[str] = Field(default=None, max_length=255)
    capabilities: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    system_prompt: Optional[str] = Field(default=None, sa_column=Column(Text))
    temperature: Optional[float] = Field(default=None)
    max_tokens: Optional[int] = Field(default=None)

    is_free: bool = Field(default=False, nullable=False)
    icon: Optional[str] = Field(default=None, max_length=255)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    __table_args__ = (
        Index('ix_agents_category_id_name', 'category_id', 'name'),
    )
