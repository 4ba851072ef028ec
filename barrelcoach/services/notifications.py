"""Athlete notifications: analysis results and the session-complete lab SMS."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import InvalidArgumentError, NotFoundError, UpstreamError
from ..db.models.messaging import ActivityLog, Message
from ..repositories.messaging import ActivityLogRepository, MessageRepository
from ..repositories.player import PlayerRepository
from ..repositories.session_scores import SessionScoresRepository
from ..repositories.swing_session import SwingSessionRepository
from .grading import grade_label
from .messaging import MessagingProvider, normalize_phone

logger = structlog.get_logger(__name__)

MAX_LEAKS_IN_MESSAGE = 3


class FourBScores(BaseModel):
    brain: float
    body: float
    bat: float
    ball: float
    composite: float
    motor_profile: Optional[str] = None
    leaks: List[str] = Field(default_factory=list)


def first_name(name: Optional[str]) -> str:
    parts = (name or "").split()
    return parts[0] if parts else "there"


def _fmt(score: float) -> str:
    return str(int(score)) if float(score).is_integer() else str(score)


def format_scores_message(name: Optional[str], scores: FourBScores) -> str:
    """Render the analysis-complete text message."""
    lines = [
        f"🔬 {first_name(name)}, your 3D analysis is ready!",
        "",
        "📊 4B Scores:",
    ]
    for label, value in (
        ("Brain", scores.brain),
        ("Body", scores.body),
        ("Bat", scores.bat),
        ("Ball", scores.ball),
    ):
        lines.append(f"• {label}: {_fmt(value)} ({grade_label(value)})")
    lines += ["", f"⚡ Composite: {_fmt(scores.composite)} ({grade_label(scores.composite)})"]

    if scores.motor_profile:
        lines += ["", f"🎯 Motor Profile: {scores.motor_profile}"]

    if scores.leaks:
        lines += ["", "⚠️ Energy Leaks Detected:"]
        lines += [f"• {leak.replace('_', ' ')}" for leak in scores.leaks[:MAX_LEAKS_IN_MESSAGE]]

    lines += ["", "Reply with any questions about your swing!"]
    return "\n".join(lines)


def format_session_complete_message(
    name: Optional[str], composite: Optional[float], grade: Optional[str], leak: Optional[str]
) -> str:
    score = str(round(composite)) if composite is not None else "--"
    lines = [
        "🔬 CATCHING BARRELS LAB RESULTS",
        "",
        f"Hey {first_name(name)}! Your swing analysis is complete.",
        "",
        f"📊 COMPOSITE SCORE: {score}/80" + (f" ({grade})" if grade else ""),
    ]
    if leak:
        lines.append(f"⚠️ LEAK DETECTED: {leak.replace('_', ' ')}")
    lines += ["", "Train smarter. Swing harder.", "- Coach Rick @ The Lab"]
    return "\n".join(lines)


class NotificationService:
    """Sends result messages to athletes and records them."""

    def __init__(self, session: AsyncSession, provider: MessagingProvider):
        self.session = session
        self.provider = provider
        self.players = PlayerRepository(session)
        self.sessions = SwingSessionRepository(session)
        self.scores = SessionScoresRepository(session)
        self.messages = MessageRepository(session)
        self.activity = ActivityLogRepository(session)

    async def send_analysis_results(
        self,
        *,
        player_id: str,
        scores: FourBScores,
        phone: Optional[str] = None,
        whatsapp: bool = False,
        session_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Text a player their 4B scores.

        Raises:
            NotFoundError: unknown player
            InvalidArgumentError: no phone number to send to
            UpstreamError: the provider refused the message (logged as failed)
        """
        player = await self.players.get(player_id)
        if player is None:
            raise NotFoundError("Player not found")

        target = phone or player.phone
        if not target:
            raise InvalidArgumentError("No phone number available")

        body = format_scores_message(player.name, scores)
        channel = "whatsapp" if whatsapp else "sms"
        metadata = {
            "type": "analysis_complete",
            "session_id": session_id,
            "scores": scores.model_dump(),
        }

        try:
            receipt = await self.provider.send(target, body, whatsapp=whatsapp)
        except UpstreamError:
            await self.messages.create(
                Message(
                    player_id=player_id,
                    session_id=session_id,
                    phone_number=target,
                    channel=channel,
                    body=body,
                    status="failed",
                    trigger_type="analysis_complete",
                    metadata_json=json.dumps(metadata),
                )
            )
            raise

        await self.messages.create(
            Message(
                player_id=player_id,
                session_id=session_id,
                phone_number=target,
                channel=channel,
                body=body,
                provider_sid=receipt.sid,
                status="sent",
                trigger_type="analysis_complete",
                metadata_json=json.dumps(metadata),
            )
        )
        await self.activity.create(
            ActivityLog(
                player_id=player_id,
                action="analysis_sent",
                description=f"3D analysis results sent via {'WhatsApp' if whatsapp else 'SMS'}",
                metadata_json=json.dumps({"session_id": session_id, "scores": metadata["scores"]}),
            )
        )
        logger.info("analysis_results_sent", player_id=player_id, channel=channel)
        return {"success": True, "message": "Analysis results sent", "sid": receipt.sid}

    async def send_session_complete_sms(self, session_id: str) -> Dict[str, Any]:
        """Send the lab-results SMS for a completed session.

        Missing phone numbers and SMS opt-outs are skipped with a ``reason``.
        """
        swing_session = await self.sessions.get(session_id)
        if swing_session is None:
            raise NotFoundError("Session not found")

        player = await self.players.get(swing_session.player_id) if swing_session.player_id else None
        phone = (player.phone if player else None) or swing_session.player_phone
        if not phone:
            logger.info("session_sms_skipped", session_id=session_id, reason="no_phone")
            return {"success": False, "reason": "no_phone"}
        if player is not None and not player.sms_opt_in:
            logger.info("session_sms_skipped", session_id=session_id, reason="opted_out")
            return {"success": False, "reason": "opted_out"}

        scores = await self.scores.get_for_session(session_id)
        leaks = json.loads(scores.leaks_json) if scores and scores.leaks_json else []
        name = player.name if player else swing_session.player_name
        body = format_session_complete_message(
            name,
            swing_session.composite_score,
            swing_session.grade,
            leaks[0] if leaks else None,
        )

        formatted = normalize_phone(phone)
        player_id = player.id if player else None
        try:
            receipt = await self.provider.send(formatted, body)
        except UpstreamError:
            await self.messages.create(
                Message(
                    player_id=player_id,
                    session_id=session_id,
                    phone_number=formatted,
                    body=body,
                    status="failed",
                    trigger_type="session_complete",
                )
            )
            logger.error("session_sms_failed", session_id=session_id)
            raise

        await self.messages.create(
            Message(
                player_id=player_id,
                session_id=session_id,
                phone_number=formatted,
                body=body,
                provider_sid=receipt.sid,
                status=receipt.status,
                trigger_type="session_complete",
            )
        )
        await self.activity.create(
            ActivityLog(
                player_id=player_id,
                action="sms_sent",
                description=f"Session complete SMS sent: Composite {swing_session.composite_score}",
                metadata_json=json.dumps({"session_id": session_id, "sid": receipt.sid}),
            )
        )
        logger.info("session_sms_sent", session_id=session_id, sid=receipt.sid)
        return {"success": True, "sid": receipt.sid}


__all__ = [
    "FourBScores",
    "NotificationService",
    "first_name",
    "format_scores_message",
    "format_session_complete_message",
]
