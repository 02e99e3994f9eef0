"""Pagination parameters and metadata."""

from typing import Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

from agent_chat.api.schemas.base import ApiResponse, CamelModel
from agent_chat.infrastructure.database.repositories import PaginatedResult

T = TypeVar("T")


class PaginationParams(BaseModel):
    """
    Page-based pagination query parameters.

    Example:
        ```python
        @router.get("/chats")
        async def list_chats(pagination: Annotated[PaginationParams, Depends(pagination_params)]):
            ...
        ```
    """

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(default=20, ge=1, le=100, description="Items per page")


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)


class PaginationMeta(CamelModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool

    @classmethod
    def from_result(cls, result: PaginatedResult) -> "PaginationMeta":
        return cls(
            page=result.page,
            limit=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_prev=result.has_prev,
        )


class PaginatedResponse(ApiResponse[list[T]], Generic[T]):
    """Envelope for list endpoints: ``data`` is a page, plus ``pagination``."""

    pagination: PaginationMeta
