# src/agent_chat/infrastructure/database/base_model.py
from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp, the form every table stores."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Convert to aware UTC; naive values are assumed to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class UTCDateTime(TypeDecorator):
    """
    Timestamp column that always binds and loads aware UTC datetimes.

    PostgreSQL stores a ``timestamptz``. SQLite has no timezone support
    and hands back naive values, which are tagged as UTC on load.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return as_utc(value)

    def process_result_value(self, value, dialect):
        return as_utc(value)


class BaseModel(SQLModel):
    """
    Base for all database models.

    Ids are opaque strings; relations between tables are plain id
    columns checked in application code.

    Example:
        class Chat(BaseModel, SoftDeleteMixin, table=True):
            __tablename__ = "chats"
            user_id: str = Field(index=True)
    """
    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime, nullable=False)
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=UTCDateTime,
        nullable=False,
        sa_column_kwargs={"onupdate": utcnow},
    )


class SoftDeleteMixin(SQLModel):
    """Soft delete through an active flag; rows are never removed."""
    is_active: bool = Field(default=True, index=True)

    @property
    def is_deleted(self) -> bool:
        return not self.is_active
