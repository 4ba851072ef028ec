"""Drill video catalog model for the admin content pipeline."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import Field, SQLModel

# processing -> {draft | analyzing} -> {ready_for_review | published | processing_failed}
VIDEO_STATUSES = (
    "processing",
    "draft",
    "analyzing",
    "ready_for_review",
    "published",
    "processing_failed",
)


class DrillVideo(SQLModel, table=True):
    """Coaching drill video with transcript and AI-assigned taxonomy tags."""

    __tablename__ = "drill_videos"

    id: str = Field(primary_key=True, max_length=36)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    video_url: str = Field(max_length=1024)
    storage_path: Optional[str] = Field(default=None, max_length=512)
    thumbnail_url: Optional[str] = Field(default=None, max_length=1024)
    duration_seconds: Optional[int] = Field(default=None)

    transcript: Optional[str] = Field(default=None)

    # Taxonomy
    four_b_category: Optional[str] = Field(default=None, max_length=20)
    problems_addressed_json: str = Field(default="[]")
    drill_name: Optional[str] = Field(default=None, max_length=255)
    motor_profiles_json: str = Field(default="[]")
    player_level_json: str = Field(default="[]")
    video_type: Optional[str] = Field(default=None, max_length=20)
    tags_json: str = Field(default="[]")

    access_level: str = Field(default="paid", max_length=20)
    status: str = Field(default="processing", max_length=20, index=True)
    published_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: Optional[datetime] = Field(default=None)

    def to_api(self) -> Dict[str, Any]:
        """Shape the row for JSON responses, decoding list columns."""
        data = self.model_dump()
        for column in (
            "problems_addressed_json",
            "motor_profiles_json",
            "player_level_json",
            "tags_json",
        ):
            raw = data.pop(column)
            data[column[: -len("_json")]] = _load_list(raw)
        return data


def _load_list(raw: Optional[str]) -> List[Any]:
    if not raw:
        return []
    value = json.loads(raw)
    return value if isinstance(value, list) else []
