"""Service dependency wiring for FastAPI routes."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config.settings import Settings, get_settings
from ..core.token_cache import OAuthTokenCache
from ..db.session import get_session
from ..services.analysis import AnalysisService
from ..services.content import ContentPipelineService, build_tagging_llm, build_transcriber
from ..services.email import EmailService, ResendClient
from ..services.messaging import MessagingProvider, TwilioProvider
from ..services.notifications import NotificationService
from ..services.scheduling import SchedulingService
from ..services.scoring import HttpScoringEngine, ScoringEngine
from ..services.storage import VideoStorage
from ..services.uploads import UploadService

# ============= Application-level singletons =============

_storage: VideoStorage | None = None
_token_cache: OAuthTokenCache | None = None
_scoring_engine: ScoringEngine | None = None
_messaging_provider: MessagingProvider | None = None
_tagging_llm: Optional[Any] = None
_transcriber: Optional[Any] = None


def get_storage() -> VideoStorage:
    global _storage
    if _storage is None:
        settings = get_settings()
        _storage = VideoStorage(settings.storage_root, settings.storage_public_url)
    return _storage


def get_token_cache() -> OAuthTokenCache:
    """Process-wide scoring-engine token cache."""
    global _token_cache
    if _token_cache is None:
        settings = get_settings()
        _token_cache = OAuthTokenCache(
            f"{settings.scoring_api_url.rstrip('/')}/oauth/token",
            settings.scoring_username,
            settings.scoring_password,
            expiry_buffer_seconds=settings.token_expiry_buffer_seconds,
        )
    return _token_cache


def get_scoring_engine() -> ScoringEngine:
    global _scoring_engine
    if _scoring_engine is None:
        settings = get_settings()
        _scoring_engine = HttpScoringEngine(
            settings.scoring_api_url,
            get_token_cache(),
            timeout=settings.scoring_timeout_seconds,
        )
    return _scoring_engine


def get_messaging_provider() -> MessagingProvider:
    global _messaging_provider
    if _messaging_provider is None:
        _messaging_provider = TwilioProvider.from_settings(get_settings())
    return _messaging_provider


def get_tagging_llm() -> Optional[Any]:
    global _tagging_llm
    if _tagging_llm is None:
        _tagging_llm = build_tagging_llm(get_settings())
    return _tagging_llm


def get_transcriber() -> Optional[Any]:
    global _transcriber
    if _transcriber is None:
        _transcriber = build_transcriber(get_settings())
    return _transcriber


# ============= Request-scoped services =============


def get_upload_service(
    session: AsyncSession = Depends(get_session),
    storage: VideoStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    return UploadService(session, storage, settings.swing_video_bucket)


def get_analysis_service(
    session: AsyncSession = Depends(get_session),
    engine: ScoringEngine = Depends(get_scoring_engine),
) -> AnalysisService:
    return AnalysisService(session, engine)


def get_notification_service(
    session: AsyncSession = Depends(get_session),
    provider: MessagingProvider = Depends(get_messaging_provider),
) -> NotificationService:
    return NotificationService(session, provider)


def get_scheduling_service(
    session: AsyncSession = Depends(get_session),
    provider: MessagingProvider = Depends(get_messaging_provider),
    settings: Settings = Depends(get_settings),
) -> SchedulingService:
    return SchedulingService(session, app_url=settings.app_url, provider=provider)


def get_email_service(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> EmailService:
    mailer = ResendClient(settings.resend_api_key, api_base=settings.resend_api_base)
    return EmailService(
        session,
        mailer=mailer,
        sender=settings.email_from,
        unsubscribe_base_url=settings.public_api_url,
    )


def get_content_service(
    session: AsyncSession = Depends(get_session),
    storage: VideoStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
    llm: Optional[Any] = Depends(get_tagging_llm),
    transcriber: Optional[Any] = Depends(get_transcriber),
) -> ContentPipelineService:
    return ContentPipelineService(
        session,
        storage,
        bucket=settings.drill_video_bucket,
        llm=llm,
        transcriber=transcriber,
        transcription_model=settings.transcription_model,
    )


__all__ = [
    "get_analysis_service",
    "get_content_service",
    "get_email_service",
    "get_messaging_provider",
    "get_notification_service",
    "get_scheduling_service",
    "get_scoring_engine",
    "get_storage",
    "get_tagging_llm",
    "get_token_cache",
    "get_transcriber",
    "get_upload_service",
]
