"""Swing-session request and response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadSwingResponse(BaseModel):
    """Result of storing one swing video."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    swing_index: int = Field(alias="swingIndex")
    swings_uploaded: int = Field(alias="swingsUploaded")
    swings_required: int = Field(alias="swingsRequired")
    ready_for_payment: bool = Field(alias="readyForPayment")
    video_storage_path: str = Field(alias="videoStoragePath")
    video_url: str = Field(alias="videoUrl")


class SessionDetailResponse(BaseModel):
    """A session row with its uploaded swings."""

    session: Dict[str, Any]
    swings: List[Dict[str, Any]] = Field(default_factory=list)


class AnalyzeSessionRequest(BaseModel):
    """Request body for running (or reusing) a session analysis."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    force_recompute: bool = Field(default=False, alias="forceRecompute")
