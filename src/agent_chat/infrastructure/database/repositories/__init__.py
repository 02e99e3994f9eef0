"""Repository pattern implementations."""
from .base import BaseRepository, PaginatedResult, paginate_in_memory
from .user import UserRepository
from .agent_category import AgentCategoryRepository
from .agent import AgentRepository
from .user_agent import UserAgentRepository
from .chat import ChatRepository
from .message import MessageRepository

__all__ = [
    "BaseRepository",
    "PaginatedResult",
    "paginate_in_memory",
    "UserRepository",
    "AgentCategoryRepository",
    "AgentRepository",
    "UserAgentRepository",
    "ChatRepository",
    "MessageRepository",
]
