# src/agent_chat/infrastructure/database/repositories/base.py
from typing import TypeVar, Generic, Sequence, Any, Literal, NamedTuple

from sqlalchemy import select, Select, func, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from agent_chat.infrastructure.database.base_model import utcnow
from agent_chat.infrastructure.observability.logging import get_logger
from agent_chat.interfaces import IRepository

T = TypeVar("T", bound=SQLModel)

logger = get_logger(__name__)


class PaginatedResult(NamedTuple):
    """Result of a paginated query."""
    items: Sequence[Any]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_prev: bool


def paginate_in_memory(items: Sequence[Any], page: int = 1, page_size: int = 20) -> PaginatedResult:
    """Paginate an already materialised sequence."""
    page = max(1, page)
    total = len(items)
    total_pages = (total + page_size - 1) // page_size
    offset = (page - 1) * page_size

    return PaginatedResult(
        items=list(items[offset:offset + page_size]),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


class BaseRepository(IRepository[T], Generic[T]):
    """
    Base repository with soft delete, filtering, sorting and pagination.

    Queries skip inactive rows unless ``include_inactive=True``.

    Example:
        class ChatRepository(BaseRepository[Chat]):
            def __init__(self, session: AsyncSession):
                super().__init__(Chat, session)

            async def list_for_user(self, user_id: str) -> Sequence[Chat]:
                query = select(self.model).where(self.model.user_id == user_id)
                query = self._exclude_inactive(query)
                result = await self.session.execute(query)
                return result.scalars().all()
    """

    def __init__(self, model: type[T], session: AsyncSession, enable_query_logging: bool = False):
        self.model = model
        self.session = session
        self.enable_query_logging = enable_query_logging

    def _has_soft_delete(self) -> bool:
        return hasattr(self.model, "is_active")

    def _exclude_inactive(self, query: Select, include_inactive: bool = False) -> Select:
        if not include_inactive and self._has_soft_delete():
            query = query.where(self.model.is_active.is_(True))
        return query

    def _log_query(self, query: Select, params: dict = None) -> None:
        if self.enable_query_logging:
            logger.debug("Query", sql=str(query), params=params)

    async def get(self, id: str, include_inactive: bool = False) -> T | None:
        """Get entity by ID, or None when missing or soft-deleted."""
        entity = await self.session.get(self.model, id)
        if entity and not include_inactive and self._has_soft_delete():
            if not entity.is_active:
                return None
        return entity

    async def first(self, query: Select) -> T | None:
        result = await self.session.execute(query.limit(1))
        return result.scalars().first()

    async def count(self, query: Select) -> int:
        count_query = select(func.count()).select_from(query.subquery())
        result = await self.session.execute(count_query)
        return result.scalar_one()

    async def create(self, entity: T) -> T:
        """Create new entity; returns it with generated ID and timestamps."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def save(self, entity: T, **values) -> T:
        """Apply values to an already loaded entity and flush."""
        for key, value in values.items():
            setattr(entity, key, value)
        if hasattr(entity, "updated_at"):
            entity.updated_at = utcnow()
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def deactivate(self, id: str) -> bool:
        """
        Soft delete entity by ID.

        Returns:
            True if deactivated, False if not found or already inactive
        """
        entity = await self.get(id)
        if not entity:
            return False

        await self.save(entity, is_active=False)
        return True

    def apply_filters(self, query: Select, filters: dict) -> Select:
        """
        Apply filters with operator suffixes.

        Supported operators: eq, ne, gt, gte, lt, lte, ilike, in.

        Example:
            query = apply_filters(query, {
                "price__gte": 0,
                "name__ilike": "writ%",
                "category_id__eq": "cat-1",
            })
        """
        for key, value in filters.items():
            if value is None:
                continue

            if "__" in key:
                field_name, operator = key.rsplit("__", 1)
            else:
                field_name, operator = key, "eq"

            if not hasattr(self.model, field_name):
                continue

            field = getattr(self.model, field_name)

            if operator == "eq":
                query = query.where(field == value)
            elif operator == "ne":
                query = query.where(field != value)
            elif operator == "gt":
                query = query.where(field > value)
            elif operator == "gte":
                query = query.where(field >= value)
            elif operator == "lt":
                query = query.where(field < value)
            elif operator == "lte":
                query = query.where(field <= value)
            elif operator == "ilike":
                query = query.where(field.ilike(value))
            elif operator == "in":
                query = query.where(field.in_(value))

        return query

    def apply_sorting(
        self,
        query: Select,
        sort_by: str = "created_at",
        order: Literal["asc", "desc"] = "desc"
    ) -> Select:
        """Order by a model field; unknown fields fall back to created_at."""
        if hasattr(self.model, sort_by):
            field = getattr(self.model, sort_by)
        else:
            field = self.model.created_at

        if order == "asc":
            query = query.order_by(asc(field))
        else:
            query = query.order_by(desc(field))

        return query

    async def paginate(
        self,
        query: Select,
        page: int = 1,
        page_size: int = 20
    ) -> PaginatedResult:
        """
        Paginate query results with metadata.

        Example:
            query = select(Chat).where(Chat.user_id == user_id)
            result = await repo.paginate(query, page=2, page_size=10)
        """
        page = max(1, page)

        total = await self.count(query)

        total_pages = (total + page_size - 1) // page_size  # Ceiling division
        has_next = page < total_pages
        has_prev = page > 1

        offset = (page - 1) * page_size
        paginated_query = query.offset(offset).limit(page_size)

        self._log_query(paginated_query, {"page": page, "page_size": page_size})

        result = await self.session.execute(paginated_query)
        items = result.scalars().all()

        return PaginatedResult(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=has_next,
            has_prev=has_prev,
        )

