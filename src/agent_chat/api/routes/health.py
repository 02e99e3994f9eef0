"""Health check endpoints for liveness and readiness checks."""
from datetime import datetime

from fastapi import APIRouter, Response, status
from pydantic import BaseModel, Field

from agent_chat.api.dependencies import AppSettings, Database
from agent_chat.infrastructure.database.base_model import utcnow

router = APIRouter()


class LivenessResponse(BaseModel):
    status: str = Field("alive", description="Liveness status")
    version: str
    timestamp: datetime = Field(default_factory=utcnow)


class ReadinessResponse(BaseModel):
    status: str = Field(..., description="ready or not_ready")
    database: bool
    timestamp: datetime = Field(default_factory=utcnow)


@router.get("/health", response_model=LivenessResponse)
async def liveness(settings: AppSettings):
    return LivenessResponse(version=settings.app_version)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(response: Response, database: Database):
    """503 until the database answers."""
    healthy = await database.health_check()
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status="ready" if healthy else "not_ready", database=healthy)
