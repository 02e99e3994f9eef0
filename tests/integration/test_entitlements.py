# tests/integration/test_entitlements.py
"""Integration tests for the entitlement store."""

from datetime import timedelta

import pytest

from agent_chat.domain.exceptions import DuplicateEntitlement, InvalidReference, NotFound, ValidationError
from agent_chat.infrastructure.database.base_model import utcnow
from agent_chat.infrastructure.database.models import UserAgent
from agent_chat.services import EntitlementService
from agent_chat.services.entitlements import NO_SUBSCRIPTION, SUBSCRIPTION_EXPIRED
from tests.factories import AgentCategoryFactory, AgentFactory, UserAgentFactory


@pytest.fixture
def service(db_session) -> EntitlementService:
    return EntitlementService(db_session)


@pytest.mark.integration
class TestGrantAndCheck:

    async def test_grant_then_access(self, service, user, agent):
        """A fresh grant is immediately usable."""
        grant = await service.grant(user.id, agent.id, payment_ref="pay_123")

        access = await service.check_access(user.id, agent.id)

        assert access.has_access is True
        assert access.entitlement.id == grant.id
        assert grant.payment_ref == "pay_123"
        assert grant.expires_at is None

    async def test_second_grant_is_duplicate(self, service, user, agent):
        await service.grant(user.id, agent.id)

        with pytest.raises(DuplicateEntitlement):
            await service.grant(user.id, agent.id)

    async def test_no_grant(self, service, user, agent):
        access = await service.check_access(user.id, agent.id)

        assert access.has_access is False
        assert access.reason == NO_SUBSCRIPTION

    async def test_past_expiry_rejected(self, service, user, agent):
        with pytest.raises(ValidationError):
            await service.grant(user.id, agent.id, expires_at=utcnow() - timedelta(minutes=1))

    async def test_unknown_agent(self, service, user):
        with pytest.raises(InvalidReference):
            await service.grant(user.id, "missing-agent")

    async def test_regrant_after_expiry(self, db_session, service, user, agent):
        """An expired grant is retired and a new one created in its place."""
        expired = await UserAgentFactory.create_async(
            session=db_session,
            user_id=user.id,
            agent_id=agent.id,
            expires_at=utcnow() - timedelta(days=1),
        )

        fresh = await service.grant(user.id, agent.id)

        assert fresh.id != expired.id
        await db_session.refresh(expired)
        assert expired.is_active is False


@pytest.mark.integration
class TestLazyExpiry:

    async def test_expired_grant_deactivated_on_check(self, db_session, service, user, agent):
        grant = await UserAgentFactory.create_async(
            session=db_session,
            user_id=user.id,
            agent_id=agent.id,
            expires_at=utcnow() - timedelta(seconds=5),
        )

        access = await service.check_access(user.id, agent.id)

        assert access.has_access is False
        assert access.reason == SUBSCRIPTION_EXPIRED
        stored = await db_session.get(UserAgent, grant.id)
        await db_session.refresh(stored)
        assert stored.is_active is False

    async def test_listing_skips_and_retires_expired(self, db_session, service, user, agent, category):
        other_agent = await AgentFactory.create_async(session=db_session, category_id=category.id)
        active = await UserAgentFactory.create_async(session=db_session, user_id=user.id, agent_id=agent.id)
        await UserAgentFactory.create_async(
            session=db_session,
            user_id=user.id,
            agent_id=other_agent.id,
            expires_at=utcnow() - timedelta(hours=1),
        )

        grants = await service.list_for_user(user.id)

        assert [grant.id for grant in grants] == [active.id]


@pytest.mark.integration
class TestRevokeExtendUsage:

    async def test_revoke(self, service, entitlement, user, agent):
        await service.revoke(user.id, agent.id)

        access = await service.check_access(user.id, agent.id)
        assert access.has_access is False

    async def test_revoke_without_grant(self, service, user, agent):
        with pytest.raises(NotFound):
            await service.revoke(user.id, agent.id)

    async def test_extend(self, service, entitlement, user, agent):
        new_expiry = utcnow() + timedelta(days=90)

        extended = await service.extend(user.id, agent.id, new_expiry)

        assert extended.expires_at == new_expiry

    async def test_extend_into_past(self, service, entitlement, user, agent):
        with pytest.raises(ValidationError):
            await service.extend(user.id, agent.id, utcnow() - timedelta(days=1))

    async def test_record_usage(self, db_session, service, entitlement, user, agent):
        await service.record_usage(user.id, agent.id)
        await service.record_usage(user.id, agent.id)

        await db_session.refresh(entitlement)
        assert entitlement.message_count == 2
        assert entitlement.last_used_at is not None


@pytest.mark.integration
async def test_agents_grouped_by_category(db_session, service, user, agent, entitlement, category):
    """Categories follow display order; agents within a category sort by name."""
    first = await AgentCategoryFactory.create_async(session=db_session, name="Coding", display_order=-1)
    coder = await AgentFactory.create_async(session=db_session, name="Coder", category_id=first.id)
    await UserAgentFactory.create_async(session=db_session, user_id=user.id, agent_id=coder.id)

    groups = await service.agents_by_category(user.id)

    assert [(group.name, [a.name for a in agents]) for group, agents in groups] == [
        ("Coding", ["Coder"]),
        ("Writing", ["Editor"]),
    ]
