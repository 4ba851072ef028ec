"""SMS templates, scheduled messages and the outbound message log."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel


class SmsTemplate(SQLModel, table=True):
    """Message body and default delay for a named trigger."""

    __tablename__ = "sms_templates"

    id: Optional[int] = Field(default=None, primary_key=True)
    trigger_name: str = Field(max_length=64, unique=True, index=True)
    message_body: str = Field(max_length=1600)
    delay_minutes: Optional[int] = Field(default=None)
    is_active: bool = Field(default=True)


class ScheduledMessage(SQLModel, table=True):
    """A message queued for delivery by the external dispatcher."""

    __tablename__ = "sms_scheduled"

    id: str = Field(primary_key=True, max_length=36)
    session_id: str = Field(foreign_key="sessions.id", index=True, max_length=36)
    trigger_name: str = Field(max_length=64, index=True)
    scheduled_for: datetime = Field(index=True)
    status: str = Field(default="pending", max_length=20, index=True)  # pending, cancelled, sent, failed
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Message(SQLModel, table=True):
    """Log entry for every SMS/WhatsApp message sent or attempted."""

    __tablename__ = "messages"

    id: Optional[int] = Field(default=None, primary_key=True)
    player_id: Optional[str] = Field(default=None, index=True, max_length=36)
    session_id: Optional[str] = Field(default=None, index=True, max_length=36)
    phone_number: str = Field(max_length=32)
    channel: str = Field(default="sms", max_length=20)  # sms, whatsapp
    direction: str = Field(default="outbound", max_length=20)
    body: str
    provider_sid: Optional[str] = Field(default=None, max_length=64)
    status: str = Field(default="sent", max_length=20)
    trigger_type: Optional[str] = Field(default=None, max_length=64)
    metadata_json: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)


class ActivityLog(SQLModel, table=True):
    """Per-player activity feed entry."""

    __tablename__ = "activity_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    player_id: Optional[str] = Field(default=None, index=True, max_length=36)
    action: str = Field(max_length=64, index=True)
    description: Optional[str] = Field(default=None, max_length=1000)
    metadata_json: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
