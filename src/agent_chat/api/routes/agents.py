# src/agent_chat/api/routes/agents.py
from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from agent_chat.api.dependencies import Catalog, CurrentUserId
from agent_chat.api.schemas.base import ApiResponse
from agent_chat.api.schemas.catalog import AgentCreate, AgentRead, AgentUpdate
from agent_chat.api.schemas.pagination import PaginatedResponse, PaginationMeta, PaginationParams, pagination_params

router = APIRouter()


@router.get("", response_model=PaginatedResponse[AgentRead])
async def list_agents(
    catalog: Catalog,
    pagination: Annotated[PaginationParams, Depends(pagination_params)],
    category_id: Optional[str] = Query(None, alias="categoryId"),
    is_free: Optional[bool] = Query(None, alias="isFree"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    sort_by: Literal["name", "price", "created_at"] = Query("name", alias="sortBy"),
    order: Literal["asc", "desc"] = Query("asc"),
):
    result = await catalog.list_agents(
        page=pagination.page,
        limit=pagination.limit,
        category_id=category_id,
        is_free=is_free,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        order=order,
    )
    return PaginatedResponse[AgentRead](
        data=[AgentRead.model_validate(agent) for agent in result.items],
        pagination=PaginationMeta.from_result(result),
    )


@router.get("/search", response_model=ApiResponse[list[AgentRead]])
async def search_agents(
    catalog: Catalog,
    q: str = Query(..., description="Name prefix"),
    limit: int = Query(20, ge=1, le=100),
):
    agents = await catalog.search_agents(q, limit)
    return ApiResponse(data=[AgentRead.model_validate(agent) for agent in agents])


@router.get("/{agent_id}", response_model=ApiResponse[AgentRead])
async def get_agent(agent_id: str, catalog: Catalog):
    return ApiResponse(data=AgentRead.model_validate(await catalog.get_agent(agent_id)))


@router.post("", response_model=ApiResponse[AgentRead], status_code=status.HTTP_201_CREATED)
async def create_agent(body: AgentCreate, _: CurrentUserId, catalog: Catalog):
    fields = body.model_dump(exclude_none=True)
    agent = await catalog.create_agent(**fields)
    return ApiResponse(message="Agent created", data=AgentRead.model_validate(agent))


@router.patch("/{agent_id}", response_model=ApiResponse[AgentRead])
async def update_agent(agent_id: str, body: AgentUpdate, _: CurrentUserId, catalog: Catalog):
    agent = await catalog.update_agent(agent_id, **body.model_dump(exclude_unset=True))
    return ApiResponse(message="Agent updated", data=AgentRead.model_validate(agent))


@router.delete("/{agent_id}", response_model=ApiResponse[None])
async def delete_agent(agent_id: str, _: CurrentUserId, catalog: Catalog):
    """Soft delete; refused while active chats use the agent."""
    await catalog.deactivate_agent(agent_id)
    return ApiResponse(message="Agent deleted")
