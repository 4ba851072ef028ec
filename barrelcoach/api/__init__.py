"""API route definitions for the Barrel Coach FastAPI backend."""

from fastapi import APIRouter

from .content import router as content_router
from .email import router as email_router
from .health import router as health_router
from .messaging import router as messaging_router
from .sessions import router as sessions_router


def get_api_router() -> APIRouter:
    """Construct the application router with all included endpoints."""
    api_router = APIRouter()
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(sessions_router, tags=["sessions"])
    api_router.include_router(messaging_router, tags=["messaging"])
    api_router.include_router(content_router, tags=["content"])
    api_router.include_router(email_router, tags=["email"])
    return api_router
