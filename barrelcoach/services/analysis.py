"""Session analysis: score swings through the engine and persist the 4B report."""

from __future__ import annotations

import json
import uuid
from datetime import datetime
from typing import Any, Dict, List

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, UpstreamError
from ..db.models.session_scores import SessionMetric, SessionScores
from ..db.models.swing_session import SwingSession
from ..repositories.session_scores import SessionMetricRepository, SessionScoresRepository
from ..repositories.swing_session import SwingRepository, SwingSessionRepository
from .grading import grade_label
from .scoring import ScoringEngine
from .sequencing import SessionAggregate, SwingResult, aggregate_session

logger = structlog.get_logger(__name__)


class AnalysisService:
    """Runs (or returns cached) analysis for a swing session."""

    def __init__(self, session: AsyncSession, engine: ScoringEngine):
        self.session = session
        self.engine = engine
        self.sessions = SwingSessionRepository(session)
        self.swings = SwingRepository(session)
        self.scores = SessionScoresRepository(session)
        self.metrics = SessionMetricRepository(session)

    async def analyze_session(self, session_id: str, *, force_recompute: bool = False) -> Dict[str, Any]:
        """Analyze a session, reusing stored scores unless ``force_recompute``.

        Raises:
            NotFoundError: the session or its swings do not exist
            UpstreamError: the scoring engine failed; the session is marked failed
        """
        swing_session = await self.sessions.get(session_id)
        if swing_session is None:
            raise NotFoundError("Session not found")

        if not force_recompute:
            existing = await self.scores.get_for_session(session_id)
            if existing is not None:
                metrics = await self.metrics.list_for_session(session_id)
                logger.info("analysis_cache_hit", session_id=session_id)
                return {
                    "success": True,
                    "cached": True,
                    "data": {
                        "sessionId": session_id,
                        "scores": serialize_scores(existing),
                        "metrics": [serialize_metric(metric) for metric in metrics],
                    },
                }

        swings = await self.swings.list_for_session(session_id)
        if not swings:
            raise NotFoundError("No swings found for session")

        await self.sessions.update(db_obj=swing_session, obj_in={"status": "analyzing"})

        payload = [
            {"swing_id": swing.id, "swing_index": swing.swing_index, "video_url": swing.video_url}
            for swing in swings
        ]
        try:
            results = await self.engine.score_swings(session_id, payload)
        except UpstreamError:
            await self._mark_failed(session_id)
            raise

        if not results:
            await self._mark_failed(session_id)
            raise UpstreamError("Scoring engine returned no swing results")

        aggregate = aggregate_session(results)
        try:
            scores, metrics = await self._persist(swing_session, swings, results, aggregate)
        except SQLAlchemyError:
            await self.session.rollback()
            await self._mark_failed(session_id)
            raise

        logger.info(
            "analysis_complete",
            session_id=session_id,
            composite=aggregate.composite,
            swings=aggregate.swing_count,
        )
        return {
            "success": True,
            "cached": False,
            "data": {
                "sessionId": session_id,
                "scores": serialize_scores(scores),
                "metrics": [serialize_metric(metric) for metric in metrics],
                "swingCount": aggregate.swing_count,
                "swingResults": [_serialize_result(result) for result in results],
            },
        }

    async def _persist(
        self,
        swing_session: SwingSession,
        swings,
        results: List[SwingResult],
        aggregate: SessionAggregate,
    ):
        session_id = swing_session.id
        await self.scores.delete_for_session(session_id)
        await self.metrics.delete_for_session(session_id)

        in_sequence = round(aggregate.in_sequence_rate / 100 * aggregate.swing_count)
        scores = SessionScores(
            id=str(uuid.uuid4()),
            session_id=session_id,
            brain=aggregate.brain,
            body=aggregate.body,
            bat=aggregate.bat,
            ball=aggregate.ball,
            composite=aggregate.composite,
            motor_profile=aggregate.motor_profile,
            leaks_json=json.dumps(aggregate.leaks),
            sequence_score=aggregate.sequence_score,
            sequence_match=aggregate.sequence_match,
            sequence_order_json=json.dumps(aggregate.sequence_order),
            sequence_errors_json=json.dumps(aggregate.sequence_errors),
            notes=f"Analyzed {aggregate.swing_count} swings. "
            f"{in_sequence}/{aggregate.swing_count} in sequence.",
        )
        await self.scores.create(scores, commit=False)

        metrics = [
            SessionMetric(session_id=session_id, metric_name=name, metric_value=value, metric_units=units)
            for name, value, units in (
                ("sequence_score", float(aggregate.sequence_score), "percent"),
                ("composite_score", aggregate.composite, "points"),
                ("in_sequence_rate", round(aggregate.in_sequence_rate, 1), "percent"),
                ("swing_count", float(aggregate.swing_count), "count"),
            )
        ]
        for metric in metrics:
            await self.metrics.create(metric, commit=False)

        by_id = {result.swing_id: result for result in results}
        for swing in swings:
            result = by_id.get(swing.id)
            if result is None:
                continue
            await self.swings.update(
                db_obj=swing,
                obj_in={
                    "sequence_score": result.sequence.sequence_score if result.sequence else None,
                    "analysis_json": json.dumps(_serialize_result(result)),
                    "status": "analyzed",
                },
                commit=False,
            )

        now = datetime.utcnow()
        await self.sessions.update(
            db_obj=swing_session,
            obj_in={
                "status": "complete",
                "composite_score": aggregate.composite,
                "grade": grade_label(aggregate.composite),
                "analyzed_at": now,
                "updated_at": now,
            },
            commit=False,
        )
        await self.session.commit()
        return scores, metrics

    async def _mark_failed(self, session_id: str) -> None:
        logger.error("analysis_failed", session_id=session_id)
        swing_session = await self.sessions.get(session_id)
        if swing_session is None:
            return
        await self.sessions.update(
            db_obj=swing_session,
            obj_in={"status": "failed", "updated_at": datetime.utcnow()},
        )


def serialize_scores(scores: SessionScores) -> Dict[str, Any]:
    return {
        "brain": scores.brain,
        "body": scores.body,
        "bat": scores.bat,
        "ball": scores.ball,
        "composite": scores.composite,
        "grade": grade_label(scores.composite),
        "motorProfile": scores.motor_profile,
        "leaks": json.loads(scores.leaks_json or "[]"),
        "sequenceScore": scores.sequence_score,
        "sequenceMatch": scores.sequence_match,
        "sequenceOrder": json.loads(scores.sequence_order_json or "[]"),
        "sequenceErrors": json.loads(scores.sequence_errors_json or "[]"),
        "notes": scores.notes,
    }


def serialize_metric(metric: SessionMetric) -> Dict[str, Any]:
    return {
        "name": metric.metric_name,
        "value": metric.metric_value,
        "units": metric.metric_units,
        "source": metric.source,
    }


def _serialize_result(result: SwingResult) -> Dict[str, Any]:
    return {
        "swingId": result.swing_id,
        "brain": result.brain,
        "body": result.body,
        "bat": result.bat,
        "ball": result.ball,
        "motorProfile": result.motor_profile,
        "leaks": result.leaks,
        "sequence": result.sequence.to_dict() if result.sequence else None,
    }


__all__ = ["AnalysisService", "serialize_metric", "serialize_scores"]
