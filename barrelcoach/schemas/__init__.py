"""Pydantic models shared across API routes."""

from .content import DrillVideoUpdate, ImportOnformRequest, VideoPipelineRequest
from .health import HealthStatus
from .messaging import (
    BroadcastRequest,
    ScheduleSmsRequest,
    SendAnalysisCompleteRequest,
    SessionCompleteSmsRequest,
    TriggerRequest,
)
from .sessions import AnalyzeSessionRequest, SessionDetailResponse, UploadSwingResponse

__all__ = [
    "AnalyzeSessionRequest",
    "BroadcastRequest",
    "DrillVideoUpdate",
    "HealthStatus",
    "ImportOnformRequest",
    "ScheduleSmsRequest",
    "SendAnalysisCompleteRequest",
    "SessionCompleteSmsRequest",
    "SessionDetailResponse",
    "TriggerRequest",
    "UploadSwingResponse",
    "VideoPipelineRequest",
]
