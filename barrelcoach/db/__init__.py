"""Database package for Barrel Coach."""

from __future__ import annotations

from sqlmodel import SQLModel

from .models import (
    ActivityLog,
    DrillVideo,
    Message,
    Player,
    ScheduledMessage,
    SessionMetric,
    SessionScores,
    SmsTemplate,
    Swing,
    SwingSession,
)
from .session import DatabaseManager, get_db_manager, get_session, init_db

__all__ = [
    "ActivityLog",
    "DatabaseManager",
    "DrillVideo",
    "Message",
    "Player",
    "SQLModel",
    "ScheduledMessage",
    "SessionMetric",
    "SessionScores",
    "SmsTemplate",
    "Swing",
    "SwingSession",
    "get_db_manager",
    "get_session",
    "init_db",
]
