"""Outbound SMS / WhatsApp delivery providers."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from ..config import Settings
from ..core.errors import UpstreamError

logger = structlog.get_logger(__name__)

WHATSAPP_PREFIX = "whatsapp:"


@dataclass
class DeliveryReceipt:
    sid: Optional[str]
    status: str


def normalize_phone(phone: str) -> str:
    """Normalize a phone number to E.164, assuming US for bare 10-digit numbers."""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == 10:
        return f"+1{digits}"
    return f"+{digits}" if digits else phone


class MessagingProvider(ABC):
    """Text-message delivery channel."""

    @abstractmethod
    async def send(self, to: str, body: str, *, whatsapp: bool = False) -> DeliveryReceipt:
        """Send ``body`` to ``to``; raise UpstreamError when delivery is refused."""
        ...


class TwilioProvider(MessagingProvider):
    """Twilio Messages REST API."""

    def __init__(
        self,
        account_sid: Optional[str],
        auth_token: Optional[str],
        from_number: Optional[str],
        *,
        whatsapp_number: Optional[str] = None,
        api_base: str = "https://api.twilio.com",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number
        self._whatsapp_number = whatsapp_number or from_number
        self._api_base = api_base.rstrip("/")
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> "TwilioProvider":
        return cls(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            settings.twilio_phone_number,
            whatsapp_number=settings.twilio_whatsapp_number,
            api_base=settings.twilio_api_base,
            client=client,
        )

    async def send(self, to: str, body: str, *, whatsapp: bool = False) -> DeliveryReceipt:
        if not (self._account_sid and self._auth_token and self._from_number):
            raise UpstreamError("Twilio credentials not configured")

        from_number = self._whatsapp_number if whatsapp else self._from_number
        if whatsapp:
            to = f"{WHATSAPP_PREFIX}{to}"
            from_number = f"{WHATSAPP_PREFIX}{from_number}"

        url = f"{self._api_base}/2010-04-01/Accounts/{self._account_sid}/Messages.json"
        form = {"To": to, "From": from_number, "Body": body}
        auth = (self._account_sid, self._auth_token)

        try:
            if self._client is not None:
                resp = await self._client.post(url, data=form, auth=auth)
            else:
                async with httpx.AsyncClient(timeout=10) as client:
                    resp = await client.post(url, data=form, auth=auth)
        except httpx.HTTPError as exc:
            logger.error("twilio_send_error", error=str(exc))
            raise UpstreamError(f"Failed to send message: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.status_code >= 400:
            message = data.get("message") or f"HTTP {resp.status_code}"
            logger.warning("twilio_send_failed", status=resp.status_code, response=resp.text[:200])
            raise UpstreamError(
                f"Failed to send message: {message}",
                details={"status": resp.status_code},
            )

        logger.info("twilio_message_sent", sid=data.get("sid"), whatsapp=whatsapp)
        return DeliveryReceipt(sid=data.get("sid"), status=data.get("status") or "sent")


__all__ = [
    "DeliveryReceipt",
    "MessagingProvider",
    "TwilioProvider",
    "WHATSAPP_PREFIX",
    "normalize_phone",
]
