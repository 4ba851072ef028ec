"""Scheduled messaging queue and trigger-template SMS."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import InvalidArgumentError, NotFoundError, UpstreamError
from ..db.models.messaging import Message, ScheduledMessage
from ..db.models.swing_session import SwingSession
from ..repositories.messaging import (
    MessageRepository,
    ScheduledMessageRepository,
    SmsTemplateRepository,
)
from ..repositories.swing_session import SwingSessionRepository
from .messaging import MessagingProvider, normalize_phone
from .notifications import first_name

logger = structlog.get_logger(__name__)


def render_template(body: str, swing_session: SwingSession, app_url: str) -> str:
    """Substitute the ``{{...}}`` placeholders supported by SMS templates."""
    app_url = app_url.rstrip("/")
    session_link = f"{app_url}/analyze?session={swing_session.id}"
    replacements = {
        "{{first_name}}": first_name(swing_session.player_name),
        "{{upload_link}}": session_link,
        "{{results_link}}": session_link,
        "{{upgrade_link}}": f"{app_url}/upgrade/{swing_session.id}",
    }
    for placeholder, value in replacements.items():
        body = body.replace(placeholder, value)
    return body


class SchedulingService:
    """Queues trigger messages for the external dispatcher and sends template SMS."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        app_url: str,
        provider: Optional[MessagingProvider] = None,
    ):
        self.session = session
        self.app_url = app_url
        self.provider = provider
        self.sessions = SwingSessionRepository(session)
        self.templates = SmsTemplateRepository(session)
        self.queue = ScheduledMessageRepository(session)
        self.messages = MessageRepository(session)

    async def enqueue(
        self,
        session_id: Optional[str],
        trigger_name: Optional[str],
        delay_minutes: Optional[int] = None,
    ) -> ScheduledMessage:
        """Queue ``trigger_name`` for a session.

        The delay falls back to the active template's ``delay_minutes``, then 0.
        """
        if not session_id or not trigger_name:
            raise InvalidArgumentError("Missing sessionId or triggerName")
        if delay_minutes is not None and delay_minutes < 0:
            raise InvalidArgumentError("delayMinutes must not be negative")

        if await self.sessions.get(session_id) is None:
            raise NotFoundError("Session not found")

        if delay_minutes is None:
            template = await self.templates.get_active(trigger_name)
            delay_minutes = (template.delay_minutes or 0) if template else 0

        scheduled = ScheduledMessage(
            id=str(uuid.uuid4()),
            session_id=session_id,
            trigger_name=trigger_name,
            scheduled_for=datetime.utcnow() + timedelta(minutes=delay_minutes),
            status="pending",
        )
        scheduled = await self.queue.create(scheduled)
        logger.info(
            "sms_scheduled",
            session_id=session_id,
            trigger=trigger_name,
            delay_minutes=delay_minutes,
        )
        return scheduled

    async def cancel(self, session_id: Optional[str], trigger_name: Optional[str]) -> int:
        """Cancel pending messages for (session, trigger); returns how many."""
        if not session_id or not trigger_name:
            raise InvalidArgumentError("Missing sessionId or triggerName")
        cancelled = await self.queue.cancel_pending(session_id, trigger_name)
        logger.info("sms_cancelled", session_id=session_id, trigger=trigger_name, count=cancelled)
        return cancelled

    async def send_template_sms(self, session_id: Optional[str], trigger_name: Optional[str]) -> Dict[str, Any]:
        """Send the active template for ``trigger_name`` to the session's phone now."""
        if not session_id or not trigger_name:
            raise InvalidArgumentError("Missing sessionId or triggerName")
        if self.provider is None:
            raise UpstreamError("Messaging provider not configured")

        template = await self.templates.get_active(trigger_name)
        if template is None:
            return {"success": False, "message": "Template not found or inactive"}

        swing_session = await self.sessions.get(session_id)
        if swing_session is None:
            raise NotFoundError("Session not found")
        if not swing_session.player_phone:
            return {"success": False, "message": "No phone number"}

        body = render_template(template.message_body, swing_session, self.app_url)
        phone = normalize_phone(swing_session.player_phone)

        try:
            receipt = await self.provider.send(phone, body)
        except UpstreamError:
            await self.messages.create(
                Message(
                    player_id=swing_session.player_id,
                    session_id=session_id,
                    phone_number=phone,
                    body=body,
                    status="failed",
                    trigger_type=trigger_name,
                )
            )
            raise

        await self.messages.create(
            Message(
                player_id=swing_session.player_id,
                session_id=session_id,
                phone_number=phone,
                body=body,
                provider_sid=receipt.sid,
                status="sent",
                trigger_type=trigger_name,
            )
        )
        logger.info("template_sms_sent", session_id=session_id, trigger=trigger_name, sid=receipt.sid)
        return {"success": True, "sid": receipt.sid}


__all__ = ["SchedulingService", "render_template"]
