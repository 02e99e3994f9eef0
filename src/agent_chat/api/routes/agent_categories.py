# src/agent_chat/api/routes/agent_categories.py
from fastapi import APIRouter, status

from agent_chat.api.dependencies import Catalog, CurrentUserId
from agent_chat.api.schemas.base import ApiResponse
from agent_chat.api.schemas.catalog import CategoryCreate, CategoryRead, CategoryUpdate

router = APIRouter()


@router.get("", response_model=ApiResponse[list[CategoryRead]])
async def list_categories(catalog: Catalog):
    categories = await catalog.list_categories()
    return ApiResponse(data=[CategoryRead.model_validate(category) for category in categories])


@router.post("", response_model=ApiResponse[CategoryRead], status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, _: CurrentUserId, catalog: Catalog):
    category = await catalog.create_category(**body.model_dump())
    return ApiResponse(message="Category created", data=CategoryRead.model_validate(category))


@router.get("/{category_id}", response_model=ApiResponse[CategoryRead])
async def get_category(category_id: str, catalog: Catalog):
    return ApiResponse(data=CategoryRead.model_validate(await catalog.get_category(category_id)))


@router.patch("/{category_id}", response_model=ApiResponse[CategoryRead])
async def update_category(category_id: str, body: CategoryUpdate, _: CurrentUserId, catalog: Catalog):
    category = await catalog.update_category(category_id, **body.model_dump(exclude_unset=True))
    return ApiResponse(message="Category updated", data=CategoryRead.model_validate(category))


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(category_id: str, _: CurrentUserId, catalog: Catalog):
    await catalog.deactivate_category(category_id)
    return ApiResponse(message="Category deleted")
