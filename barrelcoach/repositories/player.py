"""Repository for players."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models.player import Player
from .base import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    """Repository for player CRUD operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Player, session)

    async def get_email_subscribers(self) -> List[Player]:
        """Players who opted in to email and have an address on file."""
        statement = (
            select(self.model)
            .where(
                self.model.email_opt_in.is_(True),
                self.model.email.is_not(None),
                self.model.email != "",
            )
            .order_by(self.model.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
