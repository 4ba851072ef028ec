"""Unit tests for athlete notifications and the Twilio provider."""

from urllib.parse import parse_qs

import httpx
import pytest

from barrelcoach.core.errors import InvalidArgumentError, NotFoundError, UpstreamError
from barrelcoach.db.models import SessionScores
from barrelcoach.repositories.messaging import ActivityLogRepository, MessageRepository
from barrelcoach.services.messaging import TwilioProvider, normalize_phone
from barrelcoach.services.notifications import (
    FourBScores,
    NotificationService,
    format_scores_message,
)
from tests.conftest import FakeProvider

SCORES = FourBScores(
    brain=72,
    body=55,
    bat=61.5,
    ball=38,
    composite=56.6,
    motor_profile="Spinner",
    leaks=["early_extension", "casting", "drifting", "bat_drag"],
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("(555) 123-4567", "+15551234567"),
        ("+1 555 123 4567", "+15551234567"),
        ("447700900123", "+447700900123"),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_scores_message_lists_grades_and_top_three_leaks():
    body = format_scores_message("Jordan Alvarez", SCORES)

    assert body.startswith("🔬 Jordan, your 3D analysis is ready!")
    assert "• Brain: 72 (Plus-Plus)" in body
    assert "• Bat: 61.5 (Plus)" in body
    assert "• Ball: 38 (Below Avg)" in body
    assert "⚡ Composite: 56.6 (Average)" in body
    assert "🎯 Motor Profile: Spinner" in body
    assert "• early extension" in body
    assert "bat drag" not in body


@pytest.mark.asyncio
async def test_send_analysis_results_logs_message_and_activity(db_session, make_player):
    player = await make_player()
    provider = FakeProvider()
    service = NotificationService(db_session, provider)

    result = await service.send_analysis_results(
        player_id=player.id, scores=SCORES, whatsapp=True, session_id="s-1"
    )

    assert result["success"] is True
    assert provider.sent[0]["to"] == player.phone
    assert provider.sent[0]["whatsapp"] is True
    messages = await MessageRepository(db_session).list_for_player(player.id)
    assert [(m.status, m.channel) for m in messages] == [("sent", "whatsapp")]
    activity = await ActivityLogRepository(db_session).list_for_player(player.id)
    assert [entry.action for entry in activity] == ["analysis_sent"]


@pytest.mark.asyncio
async def test_failed_send_is_logged_then_raised(db_session, make_player):
    player = await make_player()
    service = NotificationService(db_session, FakeProvider(fail=True))

    with pytest.raises(UpstreamError):
        await service.send_analysis_results(player_id=player.id, scores=SCORES)

    messages = await MessageRepository(db_session).list_for_player(player.id)
    assert [m.status for m in messages] == ["failed"]
    assert await ActivityLogRepository(db_session).list_for_player(player.id) == []


@pytest.mark.asyncio
async def test_send_analysis_results_requires_phone(db_session, make_player):
    player = await make_player(phone=None)
    service = NotificationService(db_session, FakeProvider())

    with pytest.raises(InvalidArgumentError):
        await service.send_analysis_results(player_id=player.id, scores=SCORES)
    with pytest.raises(NotFoundError):
        await service.send_analysis_results(player_id="nobody", scores=SCORES)


@pytest.mark.asyncio
async def test_session_complete_sms(db_session, make_player, make_swing_session):
    player = await make_player(phone="555-123-4567")
    swing_session = await make_swing_session(
        player_id=player.id, status="complete", composite_score=61.4, grade="Plus"
    )
    db_session.add(
        SessionScores(id="scores-1", session_id=swing_session.id, leaks_json='["late_timing"]')
    )
    await db_session.commit()
    provider = FakeProvider()

    result = await NotificationService(db_session, provider).send_session_complete_sms(swing_session.id)

    assert result == {"success": True, "sid": "SM0001"}
    sent = provider.sent[0]
    assert sent["to"] == "+15551234567"
    assert "COMPOSITE SCORE: 61/80 (Plus)" in sent["body"]
    assert "LEAK DETECTED: late timing" in sent["body"]
    activity = await ActivityLogRepository(db_session).list_for_player(player.id)
    assert [entry.action for entry in activity] == ["sms_sent"]


@pytest.mark.asyncio
async def test_failed_session_complete_sms_is_logged_then_raised(db_session, make_player, make_swing_session):
    player = await make_player(phone="555-123-4567")
    swing_session = await make_swing_session(player_id=player.id, status="complete", composite_score=55.0)
    service = NotificationService(db_session, FakeProvider(fail=True))

    with pytest.raises(UpstreamError):
        await service.send_session_complete_sms(swing_session.id)

    messages = await MessageRepository(db_session).list_for_player(player.id)
    assert [(m.status, m.trigger_type, m.phone_number) for m in messages] == [
        ("failed", "session_complete", "+15551234567")
    ]
    assert await ActivityLogRepository(db_session).list_for_player(player.id) == []


@pytest.mark.asyncio
async def test_session_complete_sms_skips_opted_out_and_missing_phone(
    db_session, make_player, make_swing_session
):
    opted_out = await make_player(sms_opt_in=False)
    first = await make_swing_session(player_id=opted_out.id)
    second = await make_swing_session(player_phone=None)
    provider = FakeProvider()
    service = NotificationService(db_session, provider)

    assert (await service.send_session_complete_sms(first.id))["reason"] == "opted_out"
    assert (await service.send_session_complete_sms(second.id))["reason"] == "no_phone"
    assert provider.sent == []


@pytest.mark.asyncio
async def test_twilio_provider_posts_form_with_basic_auth():
    captured = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["form"] = parse_qs(request.content.decode())
        return httpx.Response(201, json={"sid": "SM123", "status": "queued"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        provider = TwilioProvider("AC1", "token", "+15550000000", client=client)
        receipt = await provider.send("+15551234567", "hello", whatsapp=True)

    assert receipt.sid == "SM123"
    assert captured["url"] == "https://api.twilio.com/2010-04-01/Accounts/AC1/Messages.json"
    assert captured["auth"].startswith("Basic ")
    assert captured["form"]["To"] == ["whatsapp:+15551234567"]
    assert captured["form"]["From"] == ["whatsapp:+15550000000"]


@pytest.mark.asyncio
async def test_twilio_error_surfaces_provider_message():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Invalid 'To' Phone Number"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        provider = TwilioProvider("AC1", "token", "+15550000000", client=client)
        with pytest.raises(UpstreamError, match="Invalid 'To' Phone Number"):
            await provider.send("+1", "hello")


@pytest.mark.asyncio
async def test_twilio_requires_credentials():
    with pytest.raises(UpstreamError, match="not configured"):
        await TwilioProvider(None, None, None).send("+15551234567", "hello")
