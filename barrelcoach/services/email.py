"""Admin e-mail broadcast and the public unsubscribe flow."""

from __future__ import annotations

import base64
import hmac
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import httpx
import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import InvalidArgumentError, UpstreamError
from ..db.models.messaging import ActivityLog
from ..db.models.player import Player
from ..repositories.messaging import ActivityLogRepository
from ..repositories.player import PlayerRepository
from .notifications import first_name

logger = structlog.get_logger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
)


def unsubscribe_token(player_id: str) -> str:
    """Base64 of the player id without ``=`` padding."""
    return base64.b64encode(player_id.encode()).decode().rstrip("=")


def verify_unsubscribe_token(player_id: str, token: Optional[str]) -> bool:
    if not token:
        return False
    return hmac.compare_digest(unsubscribe_token(player_id), token)


class ResendClient:
    """Minimal client for the Resend e-mail HTTP API."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        api_base: str = "https://api.resend.com",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._api_key = api_key
        self._api_base = api_base.rstrip("/")
        self._client = client

    async def send(self, *, sender: str, to: str, subject: str, html: str) -> Optional[str]:
        if not self._api_key:
            raise UpstreamError("RESEND_API_KEY not configured")

        url = f"{self._api_base}/emails"
        payload = {"from": sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            if self._client is not None:
                resp = await self._client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=10) as client:
                    resp = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Email send failed: {exc}") from exc

        if resp.status_code >= 400:
            raise UpstreamError(
                f"Email send failed: HTTP {resp.status_code}",
                details={"status": resp.status_code, "response": resp.text[:200]},
            )
        try:
            return resp.json().get("id")
        except ValueError:
            return None


@dataclass
class UnsubscribeOutcome:
    status_code: int
    success: bool
    message: str
    player_name: Optional[str] = None

    @property
    def first_name(self) -> str:
        return first_name(self.player_name)


class EmailService:
    """Broadcasts e-mail to opted-in players and handles unsubscribes."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        mailer: Optional[ResendClient] = None,
        sender: str = "Catching Barrels <onboarding@resend.dev>",
        unsubscribe_base_url: str = "",
    ):
        self.session = session
        self.mailer = mailer
        self.sender = sender
        self.unsubscribe_base_url = unsubscribe_base_url.rstrip("/")
        self.players = PlayerRepository(session)
        self.activity = ActivityLogRepository(session)

    def unsubscribe_url(self, player_id: str) -> str:
        query = urlencode({"player_id": player_id, "token": unsubscribe_token(player_id)})
        return f"{self.unsubscribe_base_url}/unsubscribe?{query}"

    def render_broadcast(self, player: Player, subject: str, message: str) -> str:
        template = _environment.get_template("broadcast_email.html")
        return template.render(
            subject=subject,
            message=message,
            first_name=first_name(player.name),
            unsubscribe_url=self.unsubscribe_url(player.id),
        )

    async def broadcast(self, subject: Optional[str], message: Optional[str]) -> Dict[str, Any]:
        """E-mail every opted-in player; failures are collected per recipient."""
        if not subject or not message:
            raise InvalidArgumentError("subject and message are required")
        if self.mailer is None:
            raise UpstreamError("Email provider not configured")

        players = await self.players.get_email_subscribers()
        logger.info("broadcast_started", recipients=len(players))

        sent = 0
        errors: List[str] = []
        for player in players:
            html = self.render_broadcast(player, subject, message)
            try:
                await self.mailer.send(sender=self.sender, to=player.email, subject=subject, html=html)
            except UpstreamError as exc:
                errors.append(f"{player.email}: {exc.message}")
                logger.warning("broadcast_recipient_failed", player_id=player.id, error=exc.message)
                continue

            await self.activity.create(
                ActivityLog(
                    player_id=player.id,
                    action="broadcast_email_sent",
                    description=f"Broadcast email: {subject}",
                    metadata_json=json.dumps({"subject": subject}),
                )
            )
            sent += 1

        logger.info("broadcast_complete", sent=sent, failed=len(errors))
        return {"success": True, "sent": sent, "failed": len(errors), "errors": errors}

    async def unsubscribe(self, player_id: Optional[str], token: Optional[str]) -> UnsubscribeOutcome:
        """Turn off e-mail for a player when the link token matches."""
        if not player_id:
            return UnsubscribeOutcome(400, False, "Missing player ID")
        if not verify_unsubscribe_token(player_id, token):
            logger.warning("unsubscribe_invalid_token", player_id=player_id)
            return UnsubscribeOutcome(400, False, "Invalid unsubscribe link")

        player = await self.players.get(player_id)
        if player is None:
            return UnsubscribeOutcome(404, False, "Player not found")

        await self.players.update(db_obj=player, obj_in={"email_opt_in": False})
        await self.activity.create(
            ActivityLog(
                player_id=player_id,
                action="email_unsubscribe",
                description="Player unsubscribed from email communications",
            )
        )
        logger.info("player_unsubscribed", player_id=player_id)
        return UnsubscribeOutcome(200, True, "You have been unsubscribed", player.name)


__all__ = [
    "EmailService",
    "ResendClient",
    "TEMPLATES_DIR",
    "UnsubscribeOutcome",
    "unsubscribe_token",
    "verify_unsubscribe_token",
]
