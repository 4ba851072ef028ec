"""Aggregated 4B scores and derived metrics for a session."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class SessionScores(SQLModel, table=True):
    """Session-level 4B scores; at most one row per session."""

    __tablename__ = "session_scores"

    id: str = Field(primary_key=True, max_length=36)
    session_id: str = Field(foreign_key="sessions.id", unique=True, index=True, max_length=36)

    brain: float = Field(default=0.0)
    body: float = Field(default=0.0)
    bat: float = Field(default=0.0)
    ball: float = Field(default=0.0)
    composite: float = Field(default=0.0)
    motor_profile: Optional[str] = Field(default=None, max_length=32)
    leaks_json: str = Field(default="[]")  # JSON list of leak codes

    # Kinematic sequence summary
    sequence_score: int = Field(default=0)
    sequence_match: bool = Field(default=False)
    sequence_order_json: str = Field(default="[]")
    sequence_errors_json: str = Field(default="[]")
    notes: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime = Field(default_factory=datetime.utcnow)


class SessionMetric(SQLModel, table=True):
    """Named numeric metric derived during session analysis."""

    __tablename__ = "session_metrics"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(foreign_key="sessions.id", index=True, max_length=36)
    metric_name: str = Field(max_length=64)
    metric_value: float
    metric_units: Optional[str] = Field(default=None, max_length=20)
    source: str = Field(default="sequence_analysis", max_length=64)
