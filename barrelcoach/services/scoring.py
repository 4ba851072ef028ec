"""HTTP client for the external swing scoring engine."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

import httpx
import structlog

from ..core.errors import ParseError, UpstreamError
from ..core.token_cache import OAuthTokenCache
from .sequencing import SwingResult, analyze_sequence

logger = structlog.get_logger(__name__)


class ScoringEngine(Protocol):
    async def score_swings(self, session_id: str, swings: List[Dict[str, Any]]) -> List[SwingResult]:
        ...


class HttpScoringEngine:
    """Scores every swing of a session in one request.

    The engine replies with ``{"swings": [{"swing_id", "brain", "body", "bat",
    "ball", "motor_profile", "leaks", "segment_peaks"}]}`` where
    ``segment_peaks`` maps each body segment to its peak time in ms.
    """

    score_path = "/v1/swing-analysis"

    def __init__(
        self,
        base_url: str,
        token_cache: OAuthTokenCache,
        *,
        timeout: float = 120.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token_cache = token_cache
        self.timeout = timeout
        self._client = client

    async def score_swings(self, session_id: str, swings: List[Dict[str, Any]]) -> List[SwingResult]:
        token = await self.token_cache.get_token()
        headers = {"Authorization": f"Bearer {token}"}
        payload = {"session_id": session_id, "swings": swings}
        url = f"{self.base_url}{self.score_path}"

        try:
            if self._client is not None:
                response = await self._client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("scoring_request_failed", session_id=session_id, error=str(exc))
            raise UpstreamError(f"Scoring engine unreachable: {exc}") from exc

        if response.status_code == 401:
            self.token_cache.invalidate()
        if response.status_code != 200:
            logger.error(
                "scoring_request_rejected",
                session_id=session_id,
                status=response.status_code,
            )
            raise UpstreamError(
                f"Scoring engine error: {response.status_code}",
                details={"status": response.status_code},
            )

        try:
            items = response.json()["swings"]
            results = [parse_swing_result(item) for item in items]
        except (ValueError, KeyError, TypeError) as exc:
            raise ParseError(f"Unexpected scoring engine response: {exc}") from exc

        logger.info("scoring_complete", session_id=session_id, swings=len(results))
        return results


def parse_swing_result(item: Dict[str, Any]) -> SwingResult:
    """Build a SwingResult from one engine item, scoring its sequence."""
    peaks = {segment: float(ms) for segment, ms in (item.get("segment_peaks") or {}).items()}
    return SwingResult(
        swing_id=str(item["swing_id"]),
        brain=float(item["brain"]),
        body=float(item["body"]),
        bat=float(item["bat"]),
        ball=float(item["ball"]),
        motor_profile=item.get("motor_profile") or None,
        leaks=[str(leak) for leak in item.get("leaks") or []],
        sequence=analyze_sequence(peaks) if peaks else None,
    )


__all__ = ["HttpScoringEngine", "ScoringEngine", "parse_swing_result"]
