"""Repository for swing sessions and their swings."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models.swing import Swing
from ..db.models.swing_session import SwingSession
from .base import BaseRepository

_KEY_COLUMNS = ("id", "session_id", "swing_index")


class SwingSessionRepository(BaseRepository[SwingSession]):
    """Repository for swing session CRUD operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(SwingSession, session)


class SwingRepository(BaseRepository[Swing]):
    """Repository for swing rows keyed by (session, index)."""

    def __init__(self, session: AsyncSession):
        super().__init__(Swing, session)

    async def get_by_index(self, session_id: str, swing_index: int) -> Optional[Swing]:
        """Get the swing occupying ``swing_index`` in a session, if any."""
        statement = (
            select(self.model)
            .where(
                self.model.session_id == session_id,
                self.model.swing_index == swing_index,
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def upsert(self, values: Dict[str, Any]) -> Swing:
        """Insert a swing or overwrite the one at the same (session, index).

        Uses ``INSERT ... ON CONFLICT DO UPDATE`` so two writers racing on
        one index end with a single row holding the last write. Does not
        commit; the caller owns the transaction.
        """
        dialect = self.session.get_bind().dialect.name
        insert = postgresql_insert if dialect == "postgresql" else sqlite_insert
        statement = insert(self.model).values(**values)
        statement = statement.on_conflict_do_update(
            index_elements=["session_id", "swing_index"],
            set_={column: statement.excluded[column] for column in values if column not in _KEY_COLUMNS},
        )
        await self.session.execute(statement)

        return await self.get_by_index(values["session_id"], values["swing_index"])

    async def list_for_session(self, session_id: str) -> List[Swing]:
        """List every swing of a session ordered by index."""
        statement = (
            select(self.model)
            .where(self.model.session_id == session_id)
            .order_by(self.model.swing_index)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_uploaded(self, session_id: str) -> int:
        """Count swings that have a stored video."""
        statement = select(func.count()).select_from(self.model).where(
            self.model.session_id == session_id,
            self.model.status.in_(("complete", "analyzed")),
        )
        result = await self.session.execute(statement)
        return int(result.scalar_one())
