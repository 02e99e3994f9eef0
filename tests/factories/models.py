# tests/factories/models.py
"""Factories for the chat service tables."""

from datetime import timedelta

import factory

from agent_chat.infrastructure.database.base_model import utcnow
from agent_chat.infrastructure.database.models import (
    Agent,
    AgentCategory,
    Chat,
    Message,
    User,
    UserAgent,
)
from tests.factories.base import AsyncSQLModelFactory


class UserFactory(AsyncSQLModelFactory):
    class Meta:
        model = User

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    name = factory.Faker("name")
    provider = "google"


class AgentCategoryFactory(AsyncSQLModelFactory):
    class Meta:
        model = AgentCategory

    name = factory.Sequence(lambda n: f"Category {n}")
    description = factory.Faker("sentence")
    display_order = factory.Sequence(lambda n: n)


class AgentFactory(AsyncSQLModelFactory):
    """Agents default to a local model so no credentials are needed."""

    class Meta:
        model = Agent

    name = factory.Sequence(lambda n: f"Agent {n}")
    description = factory.Faker("sentence")
    price = 0.0
    is_free = True
    category_id = factory.LazyFunction(lambda: "unassigned")
    model = "llama3.2"
    system_prompt = "You are a concise writing assistant."


class UserAgentFactory(AsyncSQLModelFactory):
    class Meta:
        model = UserAgent

    user_id = None
    agent_id = None
    purchased_at = factory.LazyFunction(utcnow)
    expires_at = factory.LazyFunction(lambda: utcnow() + timedelta(days=30))


class ChatFactory(AsyncSQLModelFactory):
    class Meta:
        model = Chat

    title = "New Chat"
    user_id = None
    agent_id = None


class MessageFactory(AsyncSQLModelFactory):
    class Meta:
        model = Message

    chat_id = None
    user_id = None
    role = "user"
    content = factory.Faker("sentence")
