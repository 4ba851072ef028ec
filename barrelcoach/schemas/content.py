"""Drill-video pipeline schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImportOnformRequest(BaseModel):
    """OnForm share links to import as drill videos."""

    model_config = ConfigDict(populate_by_name=True)

    urls: List[str] = Field(default_factory=list)
    auto_publish: bool = Field(default=False, alias="autoPublish")


class VideoPipelineRequest(BaseModel):
    """Body shared by transcription and auto-tagging."""

    video_id: Optional[str] = None
    auto_publish: bool = False


class DrillVideoUpdate(BaseModel):
    """Partial admin edit of a drill video; unset fields are left alone."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    video_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    transcript: Optional[str] = None
    four_b_category: Optional[str] = None
    problems_addressed: Optional[List[str]] = None
    drill_name: Optional[str] = None
    motor_profiles: Optional[List[str]] = None
    player_level: Optional[List[str]] = None
    video_type: Optional[str] = None
    tags: Optional[List[str]] = None
    access_level: Optional[str] = None
    status: Optional[str] = None
