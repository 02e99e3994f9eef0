"""User accounts created and refreshed by OAuth logins."""

from sqlalchemy.ext.asyncio import AsyncSession

from agent_chat.domain.exceptions import NotFound, ValidationError
from agent_chat.infrastructure.database.models import User
from agent_chat.infrastructure.database.repositories import UserRepository
from agent_chat.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

PROFILE_FIELDS = ("name", "avatar_url", "provider")


class UserService:

    def __init__(self, session: AsyncSession):
        self.users = UserRepository(session)

    async def upsert_from_login(
        self,
        email: str,
        name: str,
        avatar_url: str | None = None,
        provider: str = "google",
        user_id: str | None = None,
    ) -> tuple[User, bool]:
        """
        Create the user on first login, otherwise refresh changed profile
        fields and reactivate. Returns ``(user, created)``.
        """
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError("Email is required", details={"field": "email"})

        profile = {"name": name, "avatar_url": avatar_url, "provider": provider}
        user = await self.users.get_by_email(email, include_inactive=True)

        if user is None:
            values = {"email": email, **profile}
            if user_id:
                values["id"] = user_id
            user = await self.users.create(User(**values))
            logger.info("User created", user_id=user.id, provider=provider)
            return user, True

        changes = {
            field: value
            for field, value in profile.items()
            if value is not None and getattr(user, field) != value
        }
        if not user.is_active:
            changes["is_active"] = True
        if changes:
            user = await self.users.save(user, **changes)
            logger.info("User updated on login", user_id=user.id, fields=sorted(changes))
        return user, False

    async def get(self, user_id: str) -> User:
        user = await self.users.get(user_id)
        if user is None:
            raise NotFound("User not found", details={"user_id": user_id})
        return user

    async def update(
        self,
        user_id: str,
        name: str | None = None,
        avatar_url: str | None = None,
    ) -> User:
        """Profile fields only; the subscription tier is not user-editable."""
        user = await self.get(user_id)
        values = {"name": name, "avatar_url": avatar_url}
        return await self.users.save(user, **{k: v for k, v in values.items() if v is not None})

    async def deactivate(self, user_id: str) -> None:
        if not await self.users.deactivate(user_id):
            raise NotFound("User not found", details={"user_id": user_id})
        logger.info("User deactivated", user_id=user_id)
