"""Database models for the Barrel Coach application."""

from __future__ import annotations

# Import order follows foreign-key dependencies
from .player import Player
from .swing_session import SESSION_STATUS_ORDER, SwingSession, status_rank
from .swing import Swing
from .session_scores import SessionMetric, SessionScores
from .messaging import ActivityLog, Message, ScheduledMessage, SmsTemplate
from .drill_video import VIDEO_STATUSES, DrillVideo

__all__ = [
    "ActivityLog",
    "DrillVideo",
    "Message",
    "Player",
    "SESSION_STATUS_ORDER",
    "ScheduledMessage",
    "SessionMetric",
    "SessionScores",
    "SmsTemplate",
    "Swing",
    "SwingSession",
    "VIDEO_STATUSES",
    "status_rank",
]
