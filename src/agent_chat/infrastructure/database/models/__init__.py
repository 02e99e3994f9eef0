"""
Database models for the agent chat service.

Importing this package registers every table on ``SQLModel.metadata``.
"""

from .user import User, SubscriptionPlan
from .agent_category import AgentCategory
from .agent import Agent
from .user_agent import UserAgent
from .chat import Chat
from .message import Message, MessageRole

__all__ = [
    "User",
    "SubscriptionPlan",
    "AgentCategory",
    "Agent",
    "UserAgent",
    "Chat",
    "Message",
    "MessageRole",
]
