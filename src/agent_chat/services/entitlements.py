"""
Entitlement store: which user may use which agent, and until when.

Expiry is lazy. Nothing sweeps expired grants; a grant is flipped to
inactive the first time an access check (or a new grant) finds it
expired. The decision itself is the pure ``is_expired`` function.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.domain.exceptions import (
    DuplicateEntitlement,
    InvalidReference,
    NotFound,
    ValidationError,
)
from agent_chat.infrastructure.database.base_model import as_utc, utcnow
from agent_chat.infrastructure.database.models import Agent, AgentCategory, UserAgent
from agent_chat.infrastructure.database.repositories import (
    AgentCategoryRepository,
    AgentRepository,
    UserAgentRepository,
    UserRepository,
)
from agent_chat.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

NO_SUBSCRIPTION = "No active subscription found for this agent"
SUBSCRIPTION_EXPIRED = "The subscription for this agent has expired"


def is_expired(entitlement: UserAgent, now: datetime) -> bool:
    """A grant is expired when it has an expiry at or before ``now``."""
    return entitlement.expires_at is not None and as_utc(entitlement.expires_at) <= as_utc(now)


@dataclass
class AccessCheck:
    has_access: bool
    reason: Optional[str] = None
    entitlement: Optional[UserAgent] = None


class EntitlementService:
    """
    Grant, revoke, extend and check UserAgent entitlements.

    Invariant: at most one active, non-expired grant per (user, agent).
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_agents = UserAgentRepository(session)
        self.users = UserRepository(session)
        self.agents = AgentRepository(session)
        self.categories = AgentCategoryRepository(session)

    async def deactivate_if_expired(self, entitlement: UserAgent, now: datetime) -> bool:
        """Flip an expired grant to inactive. Returns True if it was expired."""
        if not is_expired(entitlement, now):
            return False

        await self.user_agents.save(entitlement, is_active=False)
        logger.info(
            "Entitlement expired",
            user_id=entitlement.user_id,
            agent_id=entitlement.agent_id,
            expires_at=entitlement.expires_at.isoformat(),
        )
        return True

    async def check_access(self, user_id: str, agent_id: str) -> AccessCheck:
        entitlement = await self.user_agents.get_active(user_id, agent_id)
        if entitlement is None:
            return AccessCheck(has_access=False, reason=NO_SUBSCRIPTION)

        if await self.deactivate_if_expired(entitlement, utcnow()):
            return AccessCheck(has_access=False, reason=SUBSCRIPTION_EXPIRED)

        return AccessCheck(has_access=True, entitlement=entitlement)

    async def grant(
        self,
        user_id: str,
        agent_id: str,
        payment_ref: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserAgent:
        """
        Create an active grant for the pair.

        Raises:
            ValidationError: expires_at is not in the future
            InvalidReference: user or agent missing or inactive
            DuplicateEntitlement: an active, non-expired grant exists
        """
        now = utcnow()
        expires_at = as_utc(expires_at)
        if expires_at is not None and expires_at <= now:
            raise ValidationError(
                "Expiration date must be in the future",
                details={"expires_at": expires_at.isoformat()},
            )

        if await self.users.get(user_id) is None:
            raise InvalidReference("User not found or inactive", details={"user_id": user_id})
        if await self.agents.get(agent_id) is None:
            raise InvalidReference("Agent not found or inactive", details={"agent_id": agent_id})

        existing = await self.user_agents.get_active(user_id, agent_id)
        if existing is not None and not await self.deactivate_if_expired(existing, now):
            raise DuplicateEntitlement(details={"user_id": user_id, "agent_id": agent_id})

        entitlement = await self.user_agents.create(
            UserAgent(
                user_id=user_id,
                agent_id=agent_id,
                purchased_at=now,
                expires_at=expires_at,
                payment_ref=payment_ref,
            )
        )
        logger.info("Entitlement granted", user_id=user_id, agent_id=agent_id)
        return entitlement

    async def _require_active(self, user_id: str, agent_id: str) -> UserAgent:
        entitlement = await self.user_agents.get_active(user_id, agent_id)
        if entitlement is None:
            raise NotFound(
                "No active subscription found for this agent",
                details={"user_id": user_id, "agent_id": agent_id},
            )
        return entitlement

    async def revoke(self, user_id: str, agent_id: str) -> UserAgent:
        """Raises NotFound when no active grant exists."""
        entitlement = await self._require_active(user_id, agent_id)
        await self.user_agents.save(entitlement, is_active=False)
        logger.info("Entitlement revoked", user_id=user_id, agent_id=agent_id)
        return entitlement

    async def extend(self, user_id: str, agent_id: str, new_expiry: datetime | None) -> UserAgent:
        """
        Replace the expiry of the active grant; None removes the expiry.

        Raises:
            NotFound: no active grant
            ValidationError: new_expiry is not in the future
        """
        new_expiry = as_utc(new_expiry)
        if new_expiry is not None and new_expiry <= utcnow():
            raise ValidationError(
                "Expiration date must be in the future",
                details={"expires_at": new_expiry.isoformat()},
            )

        entitlement = await self._require_active(user_id, agent_id)
        return await self.user_agents.save(entitlement, expires_at=new_expiry)

    async def record_usage(self, user_id: str, agent_id: str) -> bool:
        """
        Bump usage counters of the active grant. Returns False when there
        is none; an expired grant found here is deactivated, not counted.
        """
        now = utcnow()
        entitlement = await self.user_agents.get_active(user_id, agent_id)
        if entitlement is None or await self.deactivate_if_expired(entitlement, now):
            return False
        await self.user_agents.record_usage(entitlement.id, now)
        return True

    async def list_for_user(self, user_id: str) -> Sequence[UserAgent]:
        """Active, non-expired grants; expired ones found here are deactivated."""
        now = utcnow()
        grants = []
        for entitlement in await self.user_agents.list_active_for_user(user_id):
            if not await self.deactivate_if_expired(entitlement, now):
                grants.append(entitlement)
        return grants

    async def agents_by_category(self, user_id: str) -> list[tuple[AgentCategory | None, list[Agent]]]:
        """Agents the user can currently use, grouped by category display order."""
        grants = await self.list_for_user(user_id)
        agents = await self.agents.list_by_ids([grant.agent_id for grant in grants])

        grouped: dict[str, list[Agent]] = {}
        for agent in sorted(agents, key=lambda a: a.name.lower()):
            grouped.setdefault(agent.category_id, []).append(agent)

        categories = {category.id: category for category in await self.categories.list_active()}
        ordered = sorted(
            grouped.items(),
            key=lambda item: (
                categories[item[0]].display_order if item[0] in categories else float("inf"),
                categories[item[0]].name if item[0] in categories else "",
            ),
        )
        return [(categories.get(category_id), group) for category_id, group in ordered]
