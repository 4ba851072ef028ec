"""Dependency injection for services used by the API routes."""

from ..config import get_settings
from .services import (
    get_analysis_service,
    get_content_service,
    get_email_service,
    get_messaging_provider,
    get_notification_service,
    get_scheduling_service,
    get_scoring_engine,
    get_storage,
    get_tagging_llm,
    get_token_cache,
    get_transcriber,
    get_upload_service,
)

__all__ = [
    "get_analysis_service",
    "get_content_service",
    "get_email_service",
    "get_messaging_provider",
    "get_notification_service",
    "get_scheduling_service",
    "get_scoring_engine",
    "get_settings",
    "get_storage",
    "get_tagging_llm",
    "get_token_cache",
    "get_transcriber",
    "get_upload_service",
]
