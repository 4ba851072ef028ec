"""Repository for the drill video catalog."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models.drill_video import DrillVideo
from .base import BaseRepository


class DrillVideoRepository(BaseRepository[DrillVideo]):
    """Repository for drill video CRUD operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(DrillVideo, session)

    async def get_recent(
        self, *, skip: int = 0, limit: int = 100, status: Optional[str] = None
    ) -> List[DrillVideo]:
        """Get videos ordered by creation date, newest first.

        Args:
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return
            status: Optional status filter
        """
        statement = select(self.model).order_by(desc(self.model.created_at))
        if status:
            statement = statement.where(self.model.status == status)
        statement = statement.offset(skip).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())
