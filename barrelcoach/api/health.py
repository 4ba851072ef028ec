"""Health related API routes."""

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings
from ..db import get_db_manager
from ..schemas.health import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def get_health(settings: Settings = Depends(get_settings)) -> HealthStatus:
    database_ok = await get_db_manager().health_check()
    return HealthStatus(
        status="healthy" if database_ok else "degraded",
        database="connected" if database_ok else "unavailable",
        version=settings.api_version,
    )
