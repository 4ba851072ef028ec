"""Process-wide OAuth bearer token cache for the swing scoring engine."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Optional

import httpx
import structlog

from .errors import UpstreamError

logger = structlog.get_logger(__name__)


@dataclass
class CachedToken:
    access_token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class OAuthTokenCache:
    """Caches a password-grant access token and refreshes it single-flight.

    Concurrent callers that find the token expired wait on the same lock, so
    only the first one issues a token request; the rest reuse its result.
    Tokens are considered stale ``expiry_buffer_seconds`` before the
    provider-reported ``expires_in``.
    """

    def __init__(
        self,
        token_url: str,
        username: Optional[str],
        password: Optional[str],
        *,
        expiry_buffer_seconds: int = 3600,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.token_url = token_url
        self.username = username
        self.password = password
        self.expiry_buffer_seconds = expiry_buffer_seconds
        self._client = client
        self._clock = clock
        self._token: Optional[CachedToken] = None
        self._lock = asyncio.Lock()

    async def get_token(self) -> str:
        """Return a valid access token, refreshing it when needed."""
        cached = self._token
        if cached is not None and cached.is_valid(self._clock()):
            return cached.access_token

        async with self._lock:
            # Another caller may have refreshed while we waited.
            cached = self._token
            if cached is not None and cached.is_valid(self._clock()):
                return cached.access_token

            self._token = await self._fetch_token()
            return self._token.access_token

    def invalidate(self) -> None:
        self._token = None

    async def _fetch_token(self) -> CachedToken:
        if not self.username or not self.password:
            raise UpstreamError("Scoring engine credentials not configured")

        payload = {"username": self.username, "password": self.password}
        try:
            if self._client is not None:
                response = await self._client.post(self.token_url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=30) as client:
                    response = await client.post(self.token_url, json=payload)
        except httpx.HTTPError as exc:
            logger.error("token_request_failed", url=self.token_url, error=str(exc))
            raise UpstreamError(f"OAuth token request failed: {exc}") from exc

        if response.status_code != 200:
            logger.error("token_request_rejected", status=response.status_code)
            raise UpstreamError(
                f"OAuth error: {response.status_code}",
                details={"status": response.status_code},
            )

        data = response.json()
        lifetime = int(data.get("expires_in", 0)) - self.expiry_buffer_seconds
        logger.info("token_refreshed", lifetime_seconds=max(lifetime, 0))
        return CachedToken(
            access_token=data["access_token"],
            expires_at=self._clock() + lifetime,
        )


__all__ = ["CachedToken", "OAuthTokenCache"]
