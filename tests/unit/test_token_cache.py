"""Unit tests for the scoring-engine OAuth token cache."""

import asyncio

import httpx
import pytest

from barrelcoach.core.errors import UpstreamError
from barrelcoach.core.token_cache import OAuthTokenCache

TOKEN_URL = "https://scoring.test/oauth/token"


class Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _token_client(requests: list, *, status_code: int = 200, delay: float = 0.0) -> httpx.AsyncClient:
    async def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if delay:
            await asyncio.sleep(delay)
        return httpx.Response(
            status_code,
            json={"access_token": f"token-{len(requests)}", "expires_in": 7200},
        )

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_token_is_reused_until_buffer_expires():
    requests: list = []
    clock = Clock()
    async with _token_client(requests) as client:
        cache = OAuthTokenCache(TOKEN_URL, "user", "secret", client=client, clock=clock)

        assert await cache.get_token() == "token-1"
        clock.now += 3599
        assert await cache.get_token() == "token-1"
        # 7200s lifetime minus the 3600s buffer
        clock.now += 1
        assert await cache.get_token() == "token-2"

    assert len(requests) == 2
    assert requests[0].method == "POST"
    assert b'"username"' in requests[0].content


@pytest.mark.asyncio
async def test_concurrent_refreshes_issue_one_request():
    requests: list = []
    async with _token_client(requests, delay=0.05) as client:
        cache = OAuthTokenCache(TOKEN_URL, "user", "secret", client=client)

        tokens = await asyncio.gather(*(cache.get_token() for _ in range(10)))

    assert set(tokens) == {"token-1"}
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_invalidate_forces_refresh():
    requests: list = []
    async with _token_client(requests) as client:
        cache = OAuthTokenCache(TOKEN_URL, "user", "secret", client=client)

        await cache.get_token()
        cache.invalidate()
        assert await cache.get_token() == "token-2"


@pytest.mark.asyncio
async def test_rejected_credentials_raise_upstream_error():
    requests: list = []
    async with _token_client(requests, status_code=401) as client:
        cache = OAuthTokenCache(TOKEN_URL, "user", "wrong", client=client)

        with pytest.raises(UpstreamError, match="401"):
            await cache.get_token()


@pytest.mark.asyncio
async def test_missing_credentials():
    cache = OAuthTokenCache(TOKEN_URL, None, None)

    with pytest.raises(UpstreamError, match="not configured"):
        await cache.get_token()
