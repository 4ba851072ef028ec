"""Uploaded swing video model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


class Swing(SQLModel, table=True):
    """One uploaded swing video slot within a session."""

    __tablename__ = "swings"
    __table_args__ = (
        UniqueConstraint("session_id", "swing_index", name="uq_swings_session_index"),
    )

    id: str = Field(primary_key=True, max_length=36)
    session_id: str = Field(foreign_key="sessions.id", index=True, max_length=36)
    swing_index: int = Field(ge=0)

    video_storage_path: str = Field(max_length=512)
    video_url: str = Field(max_length=1024)
    video_filename: Optional[str] = Field(default=None, max_length=255)
    video_size_bytes: int = Field(default=0)
    validation_passed: bool = Field(default=True)
    status: str = Field(default="complete", max_length=20)  # complete, analyzed

    uploaded_at: datetime = Field(default_factory=datetime.utcnow)

    # Populated by analysis
    sequence_score: Optional[int] = Field(default=None)
    analysis_json: Optional[str] = Field(default=None)
