"""
User accounts.

Rows are created on the first OAuth login and refreshed on later logins
when profile fields change. Users are only ever deactivated.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import Index
from sqlmodel import Field

from agent_chat.infrastructure.database.base_model import BaseModel, SoftDeleteMixin


class SubscriptionPlan(str, Enum):
    FREE = "free"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class User(BaseModel, SoftDeleteMixin, table=True):
    """
    A person signed in through an OAuth provider.

    Attributes:
        id: Stable identifier, issued by the identity provider or generated
        email: Unique email address, the upsert key on login
        name: Display name
        avatar_url: Profile picture URL
        provider: OAuth provider the account came from (e.g. "google")
        subscription: Plan tier, one of SubscriptionPlan
    """

    __tablename__ = "users"

    email: str = Field(
        nullable=False,
        unique=True,
        index=True,
        max_length=255,
        sa_column_kwargs={"comment": "User email address - unique"}
    )

    name: str = Field(nullable=False, max_length=255)

    avatar_url: Optional[str] = Field(default=None, max_length=1024)

    provider: str = Field(
        default="google",
        nullable=False,
        max_length=50,
        sa_column_kwargs={"comment": "Originating OAuth provider"}
    )

    subscription: str = Field(
        default=SubscriptionPlan.FREE.value,
        nullable=False,
        max_length=20,
    )

    __table_args__ = (
        Index('ix_users_email_is_active', 'email', 'is_active'),
    )
