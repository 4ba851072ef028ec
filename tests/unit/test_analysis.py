"""Unit tests for session analysis and score persistence."""

import pytest

from barrelcoach.core.errors import NotFoundError, UpstreamError
from barrelcoach.repositories.session_scores import (
    SessionMetricRepository,
    SessionScoresRepository,
)
from barrelcoach.repositories.swing_session import SwingRepository, SwingSessionRepository
from barrelcoach.services.analysis import AnalysisService
from tests.conftest import FakeScoringEngine


@pytest.mark.asyncio
async def test_analysis_persists_scores_and_completes_session(
    db_session, fake_engine, make_swing_session, add_swings
):
    swing_session = await make_swing_session(status="pending_payment")
    await add_swings(swing_session, 3)
    service = AnalysisService(db_session, fake_engine)

    result = await service.analyze_session(swing_session.id)

    assert result["success"] is True
    assert result["cached"] is False
    data = result["data"]
    assert data["swingCount"] == 3
    assert data["scores"]["composite"] == 60.0
    assert data["scores"]["grade"] == "Plus"
    assert data["scores"]["leaks"] == ["early_extension"]
    assert data["scores"]["sequenceMatch"] is True
    assert {metric["name"] for metric in data["metrics"]} == {
        "sequence_score",
        "composite_score",
        "in_sequence_rate",
        "swing_count",
    }

    stored = await SwingSessionRepository(db_session).get(swing_session.id)
    assert stored.status == "complete"
    assert stored.grade == "Plus"
    assert stored.composite_score == 60.0
    assert stored.analyzed_at is not None

    swings = await SwingRepository(db_session).list_for_session(swing_session.id)
    assert {swing.status for swing in swings} == {"analyzed"}
    assert all(swing.sequence_score == 100 for swing in swings)


@pytest.mark.asyncio
async def test_second_analysis_is_served_from_cache(db_session, fake_engine, make_swing_session, add_swings):
    swing_session = await make_swing_session()
    await add_swings(swing_session, 2)
    service = AnalysisService(db_session, fake_engine)

    first = await service.analyze_session(swing_session.id)
    second = await service.analyze_session(swing_session.id)

    assert second["cached"] is True
    assert second["data"]["scores"] == first["data"]["scores"]
    assert fake_engine.calls == 1


@pytest.mark.asyncio
async def test_force_recompute_replaces_scores(db_session, make_swing_session, add_swings):
    swing_session = await make_swing_session()
    await add_swings(swing_session, 2)

    await AnalysisService(db_session, FakeScoringEngine(score=60)).analyze_session(swing_session.id)
    result = await AnalysisService(db_session, FakeScoringEngine(score=72)).analyze_session(
        swing_session.id, force_recompute=True
    )

    assert result["cached"] is False
    assert result["data"]["scores"]["grade"] == "Plus-Plus"
    assert await SessionScoresRepository(db_session).get_for_session(swing_session.id) is not None
    metrics = await SessionMetricRepository(db_session).list_for_session(swing_session.id)
    assert len(metrics) == 4


@pytest.mark.asyncio
async def test_engine_failure_marks_session_failed(db_session, make_swing_session, add_swings):
    swing_session = await make_swing_session(status="pending_payment")
    await add_swings(swing_session, 1)
    engine = FakeScoringEngine(error=UpstreamError("Scoring engine error: 503"))

    with pytest.raises(UpstreamError):
        await AnalysisService(db_session, engine).analyze_session(swing_session.id)

    stored = await SwingSessionRepository(db_session).get(swing_session.id)
    assert stored.status == "failed"
    assert await SessionScoresRepository(db_session).get_for_session(swing_session.id) is None


@pytest.mark.asyncio
async def test_session_without_swings(db_session, fake_engine, make_swing_session):
    swing_session = await make_swing_session()

    with pytest.raises(NotFoundError, match="No swings"):
        await AnalysisService(db_session, fake_engine).analyze_session(swing_session.id)
    assert fake_engine.calls == 0


@pytest.mark.asyncio
async def test_unknown_session(db_session, fake_engine):
    with pytest.raises(NotFoundError):
        await AnalysisService(db_session, fake_engine).analyze_session("missing")
