"""Swing upload orchestration: store the video, record the swing, advance the session."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from ..db.models.swing import Swing
from ..db.models.swing_session import SwingSession, status_rank
from ..repositories.messaging import ScheduledMessageRepository
from ..repositories.swing_session import SwingRepository, SwingSessionRepository
from ..security.auth import Principal
from .storage import VideoStorage, swing_storage_key, video_extension

logger = structlog.get_logger(__name__)

NO_UPLOAD_REMINDER = "no_upload_reminder"


class UploadService:
    """Accepts swing videos for a session."""

    def __init__(self, session: AsyncSession, storage: VideoStorage, bucket: str):
        self.session = session
        self.sessions = SwingSessionRepository(session)
        self.swings = SwingRepository(session)
        self.scheduled = ScheduledMessageRepository(session)
        self.storage = storage
        self.bucket = bucket

    async def upload_swing(
        self,
        *,
        session_id: Optional[str],
        swing_index: Optional[int],
        data: Optional[bytes],
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        principal: Optional[Principal] = None,
    ) -> Dict[str, Any]:
        """Store one swing video and update the session ledger.

        Returns:
            Upload summary with the running swing count and payment readiness

        Raises:
            InvalidArgumentError: missing fields or an index outside the session
            NotFoundError: the session does not exist
            ForbiddenError: the caller does not own the session
            StorageError: the video could not be written
        """
        if not session_id or data is None or swing_index is None:
            raise InvalidArgumentError("Missing required fields: sessionId, file, swingIndex")

        swing_session = await self.sessions.get(session_id)
        if swing_session is None:
            raise NotFoundError("Session not found")

        if principal is not None:
            self._check_owner(swing_session, principal)

        if swing_index < 0 or swing_index >= swing_session.swings_required:
            raise InvalidArgumentError(
                f"Invalid swing index. Must be 0-{swing_session.swings_required - 1}",
                details={"swing_index": swing_index},
            )

        ext = video_extension(filename, content_type)
        storage_path = swing_storage_key(session_id, swing_index, ext)
        video_url = await self.storage.put(self.bucket, storage_path, data, content_type)

        try:
            swing = await self._upsert_swing(
                swing_session,
                swing_index,
                storage_path=storage_path,
                video_url=video_url,
                filename=filename,
                size=len(data),
            )
            uploaded = await self.swings.count_uploaded(session_id)
            ready = uploaded >= swing_session.swings_required
            swing_session.swing_count = uploaded
            swing_session.status = _next_status(swing_session.status, ready)
            swing_session.updated_at = datetime.utcnow()
            self.session.add(swing_session)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

        logger.info(
            "swing_uploaded",
            session_id=session_id,
            swing_index=swing_index,
            uploaded=uploaded,
            required=swing_session.swings_required,
        )

        await self._cancel_upload_reminder(session_id)

        return {
            "success": True,
            "swingIndex": swing_index,
            "swingsUploaded": uploaded,
            "swingsRequired": swing_session.swings_required,
            "readyForPayment": ready,
            "videoStoragePath": swing.video_storage_path,
            "videoUrl": swing.video_url,
        }

    async def get_session_detail(self, session_id: Optional[str], principal: Principal) -> Dict[str, Any]:
        """Return a session with its uploaded swings, for the owner or an admin."""
        if not session_id:
            raise InvalidArgumentError("Missing sessionId")
        swing_session = await self.sessions.get(session_id)
        if swing_session is None:
            raise NotFoundError("Session not found")
        self._check_owner(swing_session, principal)

        swings = await self.swings.list_for_session(session_id)
        return {
            "session": swing_session.model_dump(mode="json"),
            "swings": [
                swing.model_dump(mode="json", exclude={"analysis_json"}) for swing in swings
            ],
        }

    @staticmethod
    def _check_owner(swing_session: SwingSession, principal: Principal) -> None:
        if principal.is_admin:
            return
        email_matches = bool(
            principal.email
            and swing_session.player_email
            and principal.email.lower() == swing_session.player_email.lower()
        )
        user_matches = bool(swing_session.user_id and swing_session.user_id == principal.subject)
        if not (email_matches or user_matches):
            raise ForbiddenError("Not authorized to upload to this session")

    async def _upsert_swing(
        self,
        swing_session: SwingSession,
        swing_index: int,
        *,
        storage_path: str,
        video_url: str,
        filename: Optional[str],
        size: int,
    ) -> Swing:
        return await self.swings.upsert(
            {
                "id": str(uuid.uuid4()),
                "session_id": swing_session.id,
                "swing_index": swing_index,
                "video_storage_path": storage_path,
                "video_url": video_url,
                "video_filename": filename,
                "video_size_bytes": size,
                "validation_passed": True,
                "status": "complete",
                "uploaded_at": datetime.utcnow(),
            }
        )

    async def _cancel_upload_reminder(self, session_id: str) -> None:
        try:
            cancelled = await self.scheduled.cancel_pending(session_id, NO_UPLOAD_REMINDER)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.warning("reminder_cancel_failed", session_id=session_id, error=str(exc))
            return
        if cancelled:
            logger.info("reminder_cancelled", session_id=session_id, count=cancelled)


def _next_status(current: str, ready: bool) -> str:
    """Status after an upload; never moves a session backwards."""
    if current == "failed" or status_rank(current) > status_rank("pending_payment"):
        return current
    if ready or current == "pending_payment":
        return "pending_payment"
    return "uploading"


__all__ = ["NO_UPLOAD_REMINDER", "UploadService"]
