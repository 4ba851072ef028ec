"""Athlete swing-session model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

# Forward order; ``failed`` is reachable from any non-terminal state.
SESSION_STATUS_ORDER = ("uploading", "pending_payment", "analyzing", "complete")


class SwingSession(SQLModel, table=True):
    """A paid analysis session that collects a fixed number of swing videos."""

    __tablename__ = "sessions"

    id: str = Field(primary_key=True, max_length=36)  # UUID string
    player_id: Optional[str] = Field(default=None, foreign_key="players.id", index=True)
    user_id: Optional[str] = Field(default=None, max_length=64, index=True)

    player_name: str = Field(max_length=255)
    player_email: str = Field(max_length=255, index=True)
    player_phone: Optional[str] = Field(default=None, max_length=32)

    swings_required: int = Field(default=5)
    swing_count: int = Field(default=0)
    # uploading, pending_payment, analyzing, complete, failed
    status: str = Field(default="uploading", max_length=20, index=True)

    composite_score: Optional[float] = Field(default=None)
    grade: Optional[str] = Field(default=None, max_length=20)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: Optional[datetime] = Field(default=None)
    analyzed_at: Optional[datetime] = Field(default=None)


def status_rank(status: str) -> int:
    """Position of a status on the forward path; unknown statuses rank first."""
    try:
        return SESSION_STATUS_ORDER.index(status)
    except ValueError:
        return -1
