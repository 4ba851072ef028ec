"""Repositories for SMS templates, the scheduled queue and message logs."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.models.messaging import ActivityLog, Message, ScheduledMessage, SmsTemplate
from .base import BaseRepository


class SmsTemplateRepository(BaseRepository[SmsTemplate]):
    """Repository for trigger templates."""

    def __init__(self, session: AsyncSession):
        super().__init__(SmsTemplate, session)

    async def get_active(self, trigger_name: str) -> Optional[SmsTemplate]:
        """Get the active template for a trigger, if any."""
        statement = select(self.model).where(
            self.model.trigger_name == trigger_name,
            self.model.is_active.is_(True),
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()


class ScheduledMessageRepository(BaseRepository[ScheduledMessage]):
    """Repository for the scheduled messaging queue."""

    def __init__(self, session: AsyncSession):
        super().__init__(ScheduledMessage, session)

    async def list_for_session(
        self, session_id: str, *, status: Optional[str] = None
    ) -> List[ScheduledMessage]:
        statement = select(self.model).where(self.model.session_id == session_id)
        if status:
            statement = statement.where(self.model.status == status)
        statement = statement.order_by(self.model.scheduled_for)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def cancel_pending(self, session_id: str, trigger_name: str) -> int:
        """Mark pending rows for (session, trigger) cancelled and return how many."""
        statement = (
            update(self.model)
            .where(
                self.model.session_id == session_id,
                self.model.trigger_name == trigger_name,
                self.model.status == "pending",
            )
            .values(status="cancelled")
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(statement)
        await self.session.commit()
        return result.rowcount or 0


class MessageRepository(BaseRepository[Message]):
    """Repository for the outbound message log."""

    def __init__(self, session: AsyncSession):
        super().__init__(Message, session)

    async def list_for_player(self, player_id: str) -> List[Message]:
        statement = (
            select(self.model)
            .where(self.model.player_id == player_id)
            .order_by(self.model.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Repository for the player activity feed."""

    def __init__(self, session: AsyncSession):
        super().__init__(ActivityLog, session)

    async def list_for_player(self, player_id: str) -> List[ActivityLog]:
        statement = (
            select(self.model)
            .where(self.model.player_id == player_id)
            .order_by(self.model.created_at)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
