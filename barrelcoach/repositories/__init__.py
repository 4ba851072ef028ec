"""Repository layer for database access."""

from __future__ import annotations

from .base import BaseRepository
from .drill_video import DrillVideoRepository
from .messaging import (
    ActivityLogRepository,
    MessageRepository,
    ScheduledMessageRepository,
    SmsTemplateRepository,
)
from .player import PlayerRepository
from .session_scores import SessionMetricRepository, SessionScoresRepository
from .swing_session import SwingRepository, SwingSessionRepository

__all__ = [
    "ActivityLogRepository",
    "BaseRepository",
    "DrillVideoRepository",
    "MessageRepository",
    "PlayerRepository",
    "ScheduledMessageRepository",
    "SessionMetricRepository",
    "SessionScoresRepository",
    "SmsTemplateRepository",
    "SwingRepository",
    "SwingSessionRepository",
]
