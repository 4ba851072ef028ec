"""Unit tests for the HTTP scoring-engine client."""

import json

import httpx
import pytest

from barrelcoach.core.errors import ParseError, UpstreamError
from barrelcoach.services.scoring import HttpScoringEngine, parse_swing_result
from tests.conftest import ideal_peaks


class StaticTokenCache:
    def __init__(self) -> None:
        self.invalidated = 0

    async def get_token(self) -> str:
        return "cached-token"

    def invalidate(self) -> None:
        self.invalidated += 1


def _engine(handler) -> tuple[HttpScoringEngine, StaticTokenCache]:
    cache = StaticTokenCache()
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpScoringEngine("https://scoring.test/", cache, client=client), cache


SWINGS = [{"swing_id": "s1", "swing_index": 0, "video_url": "http://test/v.mp4"}]


@pytest.mark.asyncio
async def test_score_swings_parses_results():
    seen = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "swings": [
                    {
                        "swing_id": "s1",
                        "brain": 55,
                        "body": 62,
                        "bat": 58,
                        "ball": 49,
                        "motor_profile": "whipper",
                        "leaks": ["casting"],
                        "segment_peaks": ideal_peaks(),
                    }
                ]
            },
        )

    engine, _ = _engine(handler)
    results = await engine.score_swings("session-1", SWINGS)

    assert seen["url"] == "https://scoring.test/v1/swing-analysis"
    assert seen["auth"] == "Bearer cached-token"
    assert seen["body"] == {"session_id": "session-1", "swings": SWINGS}
    assert len(results) == 1
    assert results[0].body == 62.0
    assert results[0].motor_profile == "whipper"
    assert results[0].sequence.sequence_match is True


@pytest.mark.asyncio
async def test_unauthorized_response_invalidates_token():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "expired"})

    engine, cache = _engine(handler)

    with pytest.raises(UpstreamError, match="401"):
        await engine.score_swings("session-1", SWINGS)
    assert cache.invalidated == 1


@pytest.mark.asyncio
async def test_malformed_response_raises_parse_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    engine, _ = _engine(handler)

    with pytest.raises(ParseError):
        await engine.score_swings("session-1", SWINGS)


@pytest.mark.asyncio
async def test_transport_error_raises_upstream_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    engine, _ = _engine(handler)

    with pytest.raises(UpstreamError, match="unreachable"):
        await engine.score_swings("session-1", SWINGS)


def test_parse_swing_result_without_peaks_has_no_sequence():
    result = parse_swing_result({"swing_id": 7, "brain": 1, "body": 2, "bat": 3, "ball": 4})

    assert result.swing_id == "7"
    assert result.sequence is None
    assert result.leaks == []
