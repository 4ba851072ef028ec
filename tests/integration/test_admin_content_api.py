"""Integration tests for the admin drill-video endpoints."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from barrelcoach.db.models import DrillVideo
from barrelcoach.dependencies import get_tagging_llm
from barrelcoach.main import app

pytestmark = pytest.mark.integration


async def _add_video(db_session, video_id="vid-1", **overrides):
    values = {
        "id": video_id,
        "title": "OnForm Import - abc",
        "video_url": "http://test/storage/videos/drills/a.mp4",
        "storage_path": "drills/a.mp4",
        "status": "ready_for_review",
        "transcript": "Stay connected through the turn.",
    }
    values.update(overrides)
    db_session.add(DrillVideo(**values))
    await db_session.commit()


@pytest.mark.asyncio
async def test_admin_routes_reject_athletes(app_client, athlete_headers):
    responses = [
        await app_client.get("/admin-videos", headers=athlete_headers),
        await app_client.post("/import-onform-video", json={"urls": []}, headers=athlete_headers),
        await app_client.post("/auto-tag-video", json={"video_id": "x"}, headers=athlete_headers),
    ]

    assert {response.status_code for response in responses} == {403}
    assert (await app_client.get("/admin-videos")).status_code == 401


@pytest.mark.asyncio
async def test_list_get_update_delete(app_client, admin_headers, db_session):
    await _add_video(db_session, "vid-1", status="draft")
    await _add_video(db_session, "vid-2", status="published")

    listed = await app_client.get("/admin-videos", headers=admin_headers)
    drafts = await app_client.get("/admin-videos", params={"status": "draft"}, headers=admin_headers)
    single = await app_client.get("/admin-videos", params={"id": "vid-1"}, headers=admin_headers)

    assert {video["id"] for video in listed.json()} == {"vid-1", "vid-2"}
    assert [video["id"] for video in drafts.json()] == ["vid-1"]
    assert single.json()["tags"] == []

    updated = await app_client.put(
        "/admin-videos",
        params={"id": "vid-1"},
        json={"title": "Hip Load Basics", "tags": ["hips"], "status": "published"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Hip Load Basics"
    assert updated.json()["tags"] == ["hips"]
    assert updated.json()["published_at"] is not None

    deleted = await app_client.delete("/admin-videos", params={"id": "vid-1"}, headers=admin_headers)
    missing = await app_client.get("/admin-videos", params={"id": "vid-1"}, headers=admin_headers)
    assert deleted.json() == {"success": True}
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_auto_tag_endpoint(app_client, admin_headers, db_session):
    await _add_video(db_session, "vid-3", status="analyzing")
    llm = MagicMock()
    llm.ainvoke = AsyncMock(
        return_value=SimpleNamespace(
            content='```json\n{"four_b_category": "bat", "suggested_title": "Bat Path"}\n```'
        )
    )
    app.dependency_overrides[get_tagging_llm] = lambda: llm

    response = await app_client.post(
        "/auto-tag-video", json={"video_id": "vid-3", "auto_publish": True}, headers=admin_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "published"
    assert body["analysis"]["four_b_category"] == "bat"


@pytest.mark.asyncio
async def test_auto_tag_unparseable_reply_is_parse_error(app_client, admin_headers, db_session):
    await _add_video(db_session, "vid-4", status="analyzing")
    llm = MagicMock()
    llm.ainvoke = AsyncMock(return_value=SimpleNamespace(content="sorry, no idea"))
    app.dependency_overrides[get_tagging_llm] = lambda: llm

    response = await app_client.post("/auto-tag-video", json={"video_id": "vid-4"}, headers=admin_headers)

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "parse_error"


@pytest.mark.asyncio
async def test_transcribe_without_provider_is_upstream_error(app_client, admin_headers, db_session):
    await _add_video(db_session, "vid-5", status="processing", transcript=None)

    response = await app_client.post("/transcribe-video", json={"video_id": "vid-5"}, headers=admin_headers)

    assert response.status_code == 500
    assert response.json()["error"] == {
        "code": "upstream_error",
        "message": "Transcription service not configured",
    }


@pytest.mark.asyncio
async def test_import_requires_urls(app_client, admin_headers):
    response = await app_client.post("/import-onform-video", json={"urls": []}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "urls array is required"


@pytest.mark.asyncio
async def test_update_with_null_required_field_is_bad_request(app_client, admin_headers, db_session):
    await _add_video(db_session, "vid-6", status="draft")

    response = await app_client.put(
        "/admin-videos", params={"id": "vid-6"}, json={"title": None}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_argument"
    assert response.json()["error"]["details"] == {"fields": ["title"]}
