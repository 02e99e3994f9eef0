# src/agent_chat/api/routes/user_agents.py
from fastapi import APIRouter, status

from agent_chat.api.dependencies import CurrentUserId, Entitlements
from agent_chat.api.schemas.base import ApiResponse
from agent_chat.api.schemas.catalog import AgentRead
from agent_chat.api.schemas.entitlements import (
    AccessRead,
    CategoryEntitlements,
    EntitlementRead,
    GrantCreate,
    GrantExtend,
)

router = APIRouter()


@router.post("", response_model=ApiResponse[EntitlementRead], status_code=status.HTTP_201_CREATED)
async def grant(body: GrantCreate, user_id: CurrentUserId, entitlements: Entitlements):
    """Grant an agent to a user (the caller unless ``userId`` is given)."""
    entitlement = await entitlements.grant(
        body.user_id or user_id,
        body.agent_id,
        payment_ref=body.payment_ref,
        expires_at=body.expires_at,
    )
    return ApiResponse(message="Agent access granted", data=EntitlementRead.model_validate(entitlement))


@router.get("", response_model=ApiResponse[list[EntitlementRead]])
async def list_entitlements(user_id: CurrentUserId, entitlements: Entitlements):
    grants = await entitlements.list_for_user(user_id)
    return ApiResponse(data=[EntitlementRead.model_validate(grant) for grant in grants])


@router.get("/agents", response_model=ApiResponse[list[CategoryEntitlements]])
async def agents_by_category(user_id: CurrentUserId, entitlements: Entitlements):
    groups = await entitlements.agents_by_category(user_id)
    return ApiResponse(
        data=[
            CategoryEntitlements(
                category_id=category.id if category else None,
                category_name=category.name if category else None,
                agents=[AgentRead.model_validate(agent) for agent in agents],
            )
            for category, agents in groups
        ]
    )


@router.get("/{agent_id}/access", response_model=ApiResponse[AccessRead])
async def check_access(agent_id: str, user_id: CurrentUserId, entitlements: Entitlements):
    access = await entitlements.check_access(user_id, agent_id)
    return ApiResponse(
        data=AccessRead(
            has_access=access.has_access,
            reason=access.reason,
            expires_at=access.entitlement.expires_at if access.entitlement else None,
        )
    )


@router.patch("/{agent_id}", response_model=ApiResponse[EntitlementRead])
async def extend(agent_id: str, body: GrantExtend, user_id: CurrentUserId, entitlements: Entitlements):
    entitlement = await entitlements.extend(user_id, agent_id, body.expires_at)
    return ApiResponse(message="Subscription extended", data=EntitlementRead.model_validate(entitlement))


@router.delete("/{agent_id}", response_model=ApiResponse[None])
async def revoke(agent_id: str, user_id: CurrentUserId, entitlements: Entitlements):
    await entitlements.revoke(user_id, agent_id)
    return ApiResponse(message="Agent access revoked")
