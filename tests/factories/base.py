# tests/factories/base.py
"""
Base factory integrating Factory Boy with SQLModel and async sessions.

Factory Boy only knows synchronous sessions, so instances are built with
``build()`` and persisted through the async session explicitly.
"""

from typing import Any

from factory import alchemy
from sqlalchemy.ext.asyncio import AsyncSession


class AsyncSQLModelFactory(alchemy.SQLAlchemyModelFactory):
    """
    Usage:
        class UserFactory(AsyncSQLModelFactory):
            class Meta:
                model = User

            email = factory.Sequence(lambda n: f"user{n}@example.com")

        # In tests:
        async def test_user(db_session):
            user = await UserFactory.create_async(session=db_session)
            assert user.id is not None
    """

    class Meta:
        abstract = True
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"

    @classmethod
    async def create_async(cls, session: AsyncSession, **kwargs: Any):
        """Build an instance, commit it and return it refreshed."""
        instance = cls.build(**kwargs)
        session.add(instance)
        await session.commit()
        await session.refresh(instance)
        return instance

    @classmethod
    async def create_batch_async(cls, session: AsyncSession, size: int, **kwargs: Any):
        instances = [cls.build(**kwargs) for _ in range(size)]
        session.add_all(instances)
        await session.commit()
        for instance in instances:
            await session.refresh(instance)
        return instances
