"""Pytest configuration and shared fixtures."""

import uuid
from collections.abc import AsyncGenerator, Callable
from typing import Any, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from barrelcoach.config import get_settings
from barrelcoach.core.errors import UpstreamError
from barrelcoach.db.models import Player, Swing, SwingSession
from barrelcoach.db.session import DatabaseManager
from barrelcoach.services.messaging import DeliveryReceipt, MessagingProvider
from barrelcoach.services.sequencing import IDEAL_SEQUENCE, SwingResult, analyze_sequence
from barrelcoach.services.storage import VideoStorage


@pytest.fixture
async def test_db() -> AsyncGenerator[DatabaseManager, None]:
    """Create a test database with in-memory SQLite."""
    db_manager = DatabaseManager("sqlite+aiosqlite:///:memory:", echo=False)
    await db_manager.create_tables()

    yield db_manager

    await db_manager.drop_tables()
    await db_manager.close()


@pytest.fixture
async def db_session(test_db: DatabaseManager) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests."""
    async for session in test_db.get_session():
        yield session


@pytest.fixture
def storage(tmp_path) -> VideoStorage:
    return VideoStorage(tmp_path / "storage", "http://test/storage")


class FakeProvider(MessagingProvider):
    """Records outbound messages instead of sending them."""

    def __init__(self, *, fail: bool = False) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.fail = fail

    async def send(self, to: str, body: str, *, whatsapp: bool = False) -> DeliveryReceipt:
        if self.fail:
            raise UpstreamError("Failed to send message: HTTP 400")
        self.sent.append({"to": to, "body": body, "whatsapp": whatsapp})
        return DeliveryReceipt(sid=f"SM{len(self.sent):04d}", status="queued")


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


def ideal_peaks(step: float = 20.0) -> Dict[str, float]:
    return {segment: index * step for index, segment in enumerate(IDEAL_SEQUENCE)}


def make_result(
    swing_id: str,
    *,
    brain: float = 60,
    body: float = 60,
    bat: float = 60,
    ball: float = 60,
    motor_profile: Optional[str] = "spinner",
    leaks: Optional[List[str]] = None,
    peaks: Optional[Dict[str, float]] = None,
) -> SwingResult:
    return SwingResult(
        swing_id=swing_id,
        brain=brain,
        body=body,
        bat=bat,
        ball=ball,
        motor_profile=motor_profile,
        leaks=leaks or [],
        sequence=analyze_sequence(peaks or ideal_peaks()),
    )


class FakeScoringEngine:
    """Scores every swing with fixed values and counts calls."""

    def __init__(self, *, score: float = 60, error: Optional[Exception] = None) -> None:
        self.score = score
        self.error = error
        self.calls = 0

    async def score_swings(self, session_id: str, swings: List[Dict[str, Any]]) -> List[SwingResult]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [
            make_result(
                swing["swing_id"],
                brain=self.score,
                body=self.score,
                bat=self.score,
                ball=self.score,
                leaks=["early_extension"],
            )
            for swing in swings
        ]


@pytest.fixture
def fake_engine() -> FakeScoringEngine:
    return FakeScoringEngine()


@pytest.fixture
def make_swing_session(db_session: AsyncSession) -> Callable[..., Any]:
    """Factory that persists a swing session."""

    async def _make(**overrides: Any) -> SwingSession:
        values: Dict[str, Any] = {
            "id": str(uuid.uuid4()),
            "player_name": "Jordan Alvarez",
            "player_email": "jordan@example.com",
            "player_phone": "5551234567",
            "swings_required": 3,
            "status": "uploading",
        }
        values.update(overrides)
        swing_session = SwingSession(**values)
        db_session.add(swing_session)
        await db_session.commit()
        return swing_session

    return _make


@pytest.fixture
def make_player(db_session: AsyncSession) -> Callable[..., Any]:
    async def _make(**overrides: Any) -> Player:
        values: Dict[str, Any] = {
            "id": str(uuid.uuid4()),
            "name": "Jordan Alvarez",
            "email": "jordan@example.com",
            "phone": "+15551234567",
        }
        values.update(overrides)
        player = Player(**values)
        db_session.add(player)
        await db_session.commit()
        return player

    return _make


@pytest.fixture
def add_swings(db_session: AsyncSession) -> Callable[..., Any]:
    """Attach uploaded swings to a session."""

    async def _add(swing_session: SwingSession, count: int) -> List[Swing]:
        swings = [
            Swing(
                id=str(uuid.uuid4()),
                session_id=swing_session.id,
                swing_index=index,
                video_storage_path=f"{swing_session.id}/{index}.mp4",
                video_url=f"http://test/storage/swing-videos/{swing_session.id}/{index}.mp4",
            )
            for index in range(count)
        ]
        db_session.add_all(swings)
        await db_session.commit()
        return swings

    return _add


def make_token(
    subject: str = "user-1",
    *,
    email: Optional[str] = "jordan@example.com",
    role: Optional[str] = None,
) -> str:
    settings = get_settings()
    claims: Dict[str, Any] = {"sub": subject}
    if email:
        claims["email"] = email
    if role:
        claims["role"] = role
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


@pytest.fixture
def athlete_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    token = make_token("admin-1", email="coach@example.com", role="admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def app_client(
    test_db: DatabaseManager,
    storage: VideoStorage,
    fake_engine: FakeScoringEngine,
    fake_provider: FakeProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with test doubles wired in."""
    from barrelcoach.db.session import get_session
    from barrelcoach.dependencies import (
        get_messaging_provider,
        get_scoring_engine,
        get_storage,
        get_tagging_llm,
        get_transcriber,
    )
    from barrelcoach.main import app

    async def _session_override() -> AsyncGenerator[AsyncSession, None]:
        async for session in test_db.get_session():
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_scoring_engine] = lambda: fake_engine
    app.dependency_overrides[get_messaging_provider] = lambda: fake_provider
    app.dependency_overrides[get_tagging_llm] = lambda: None
    app.dependency_overrides[get_transcriber] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
