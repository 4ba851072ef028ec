"""Notification and scheduled-messaging request schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..services.notifications import FourBScores


class SendAnalysisCompleteRequest(BaseModel):
    """Text a player their 4B scores."""

    player_id: Optional[str] = None
    phone: Optional[str] = None
    is_whatsapp: bool = False
    scores: Optional[FourBScores] = None
    session_id: Optional[str] = None


class SessionCompleteSmsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")


class TriggerRequest(BaseModel):
    """A (session, trigger) pair used by cancel and immediate send."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: Optional[str] = Field(default=None, alias="sessionId")
    trigger_name: Optional[str] = Field(default=None, alias="triggerName")


class ScheduleSmsRequest(TriggerRequest):
    delay_minutes: Optional[int] = Field(default=None, alias="delayMinutes")


class BroadcastRequest(BaseModel):
    subject: Optional[str] = None
    message: Optional[str] = None
