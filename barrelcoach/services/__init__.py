"""Service layer for Barrel Coach."""

from __future__ import annotations

from .analysis import AnalysisService
from .content import ContentPipelineService
from .email import EmailService, ResendClient
from .messaging import MessagingProvider, TwilioProvider
from .notifications import NotificationService
from .scheduling import SchedulingService
from .scoring import HttpScoringEngine
from .storage import VideoStorage
from .uploads import UploadService

__all__ = [
    "AnalysisService",
    "ContentPipelineService",
    "EmailService",
    "HttpScoringEngine",
    "MessagingProvider",
    "NotificationService",
    "ResendClient",
    "SchedulingService",
    "TwilioProvider",
    "UploadService",
    "VideoStorage",
]
