# tests/factories/__init__.py
"""Factory Boy factories for creating test data."""

from tests.factories.base import AsyncSQLModelFactory
from tests.factories.models import (
    AgentCategoryFactory,
    AgentFactory,
    ChatFactory,
    MessageFactory,
    UserAgentFactory,
    UserFactory,
)

__all__ = [
    "AsyncSQLModelFactory",
    "AgentCategoryFactory",
    "AgentFactory",
    "ChatFactory",
    "MessageFactory",
    "UserAgentFactory",
    "UserFactory",
]
