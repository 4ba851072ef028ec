"""Repository for session scores and metrics."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models.session_scores import SessionMetric, SessionScores
from .base import BaseRepository


class SessionScoresRepository(BaseRepository[SessionScores]):
    """Repository for the one-per-session scores row."""

    def __init__(self, session: AsyncSession):
        super().__init__(SessionScores, session)

    async def get_for_session(self, session_id: str) -> Optional[SessionScores]:
        statement = select(self.model).where(self.model.session_id == session_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def delete_for_session(self, session_id: str) -> None:
        """Remove the scores row of a session without committing."""
        await self.session.execute(delete(self.model).where(self.model.session_id == session_id))


class SessionMetricRepository(BaseRepository[SessionMetric]):
    """Repository for per-session derived metrics."""

    def __init__(self, session: AsyncSession):
        super().__init__(SessionMetric, session)

    async def list_for_session(self, session_id: str) -> List[SessionMetric]:
        statement = (
            select(self.model)
            .where(self.model.session_id == session_id)
            .order_by(self.model.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete_for_session(self, session_id: str) -> None:
        """Remove every metric of a session without committing."""
        await self.session.execute(delete(self.model).where(self.model.session_id == session_id))
