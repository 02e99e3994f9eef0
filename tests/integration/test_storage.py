# tests/integration/test_storage.py
"""Timestamps keep aware UTC through a database round trip."""

from datetime import datetime, timedelta, timezone

import pytest

from agent_chat.infrastructure.database import utcnow
from agent_chat.infrastructure.database.models import Chat, UserAgent
from tests.factories import ChatFactory, UserAgentFactory


@pytest.mark.integration
class TestTimestampRoundTrip:

    async def test_defaults_are_aware(self, db_session, user, agent):
        chat = await ChatFactory.create_async(session=db_session, user_id=user.id, agent_id=agent.id)

        assert chat.created_at.tzinfo is not None
        assert chat.updated_at.utcoffset() == timedelta(0)

    async def test_reloaded_values_are_aware_utc(self, db_manager, db_session, user, agent):
        expires_at = datetime(2031, 3, 4, 9, 30, tzinfo=timezone(timedelta(hours=-5)))
        grant = await UserAgentFactory.create_async(
            session=db_session, user_id=user.id, agent_id=agent.id, expires_at=expires_at
        )
        chat = await ChatFactory.create_async(
            session=db_session, user_id=user.id, agent_id=agent.id, last_message_at=utcnow()
        )

        async with db_manager.session() as session:
            stored_grant = await session.get(UserAgent, grant.id)
            stored_chat = await session.get(Chat, chat.id)

        assert stored_grant.expires_at == datetime(2031, 3, 4, 14, 30, tzinfo=timezone.utc)
        assert stored_grant.expires_at.utcoffset() == timedelta(0)
        assert stored_grant.purchased_at.tzinfo is not None
        assert stored_chat.last_message_at.tzinfo is not None
        assert stored_chat.created_at <= utcnow()

    async def test_naive_input_stored_as_utc(self, db_manager, db_session, user, agent):
        grant = await UserAgentFactory.create_async(
            session=db_session, user_id=user.id, agent_id=agent.id, expires_at=datetime(2031, 1, 1, 8)
        )

        async with db_manager.session() as session:
            stored = await session.get(UserAgent, grant.id)

        assert stored.expires_at == datetime(2031, 1, 1, 8, tzinfo=timezone.utc)
