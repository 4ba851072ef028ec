"""Admin drill-video pipeline: import, transcription, AI tagging and catalog CRUD."""

from __future__ import annotations

import json
import re
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import httpx
import structlog
from langchain_core.exceptions import LangChainException
from langchain_openai import ChatOpenAI
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field, ValidationError, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings
from ..core.errors import (
    BarrelCoachError,
    InvalidArgumentError,
    NotFoundError,
    ParseError,
    UpstreamError,
)
from ..db.models.drill_video import VIDEO_STATUSES, DrillVideo
from ..repositories.drill_video import DrillVideoRepository
from .storage import VideoStorage

logger = structlog.get_logger(__name__)

FOUR_B_CATEGORIES = ("brain", "body", "bat", "ball")
MOTOR_PROFILES = ("whipper", "spinner", "slinger", "puncher")
PLAYER_LEVELS = ("youth", "travel", "high_school", "college", "pro")
VIDEO_TYPES = ("drill", "lesson", "breakdown", "q_and_a", "live_session")
MAX_TAGS = 5
TRANSCRIPT_PROMPT_LIMIT = 6000
IMPORT_TITLE_PREFIX = "OnForm Import - "
REQUIRED_VIDEO_FIELDS = ("title", "video_url", "access_level", "status")

ONFORM_VIEW_URL = "https://link.getonform.com/view?id={video_id}"
_ONFORM_PATH_ID = re.compile(r"/(?:video|v)/([A-Za-z0-9]+)")
_ONFORM_DOWNLOAD_URL = re.compile(r"https://storage\.googleapis\.com/us-videos/original/[^\"'\s]+")
_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")

TAGGING_SYSTEM_PROMPT = """You analyze baseball coaching video transcripts and categorize them.

Return ONLY valid JSON with these fields:
{
  "four_b_category": "brain" | "body" | "bat" | "ball" (pick the PRIMARY category based on Coach Rick's 4B System - Brain=timing/mental, Body=legs/hips/rotation, Bat=swing mechanics, Ball=contact/impact),
  "problems_addressed": ["problem1", "problem2"] (from this list: spinning_out, casting, late_timing, early_timing, drifting, rolling_over, ground_balls, no_power, chasing_pitches, collapsing_back_side, long_swing, weak_rotation, poor_balance, head_movement, bat_drag, uppercut, chopping),
  "drill_name": "Name of drill if one is being taught" or null,
  "motor_profiles": [] (which profiles this applies to from: "whipper", "spinner", "slinger", "puncher" - empty array if general),
  "player_level": [] (which levels this is appropriate for from: "youth", "travel", "high_school", "college", "pro"),
  "video_type": "drill" | "lesson" | "breakdown" | "q_and_a" | "live_session",
  "suggested_title": "A clear, specific title for this video",
  "suggested_description": "A 1-2 sentence description of what this video teaches",
  "suggested_tags": ["tag1", "tag2", "tag3"] (additional searchable terms, max 5)
}"""


class TagAnalysis(BaseModel):
    """Taxonomy returned by the tagging model."""

    four_b_category: Optional[str] = None
    problems_addressed: List[str] = Field(default_factory=list)
    drill_name: Optional[str] = None
    motor_profiles: List[str] = Field(default_factory=list)
    player_level: List[str] = Field(default_factory=list)
    video_type: Optional[str] = None
    suggested_title: Optional[str] = None
    suggested_description: Optional[str] = None
    suggested_tags: List[str] = Field(default_factory=list)

    @field_validator("four_b_category", "video_type", mode="before")
    @classmethod
    def _lower(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("problems_addressed", "motor_profiles", "player_level", "suggested_tags", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("four_b_category")
    @classmethod
    def _known_category(cls, value: Optional[str]) -> Optional[str]:
        return value if value in FOUR_B_CATEGORIES else None

    @field_validator("video_type")
    @classmethod
    def _known_type(cls, value: Optional[str]) -> Optional[str]:
        return value if value in VIDEO_TYPES else None

    @field_validator("motor_profiles")
    @classmethod
    def _known_profiles(cls, value: List[str]) -> List[str]:
        return [profile for profile in value if profile in MOTOR_PROFILES]

    @field_validator("player_level")
    @classmethod
    def _known_levels(cls, value: List[str]) -> List[str]:
        return [level for level in value if level in PLAYER_LEVELS]

    @field_validator("suggested_tags")
    @classmethod
    def _cap_tags(cls, value: List[str]) -> List[str]:
        return value[:MAX_TAGS]


def extract_onform_id(url: str) -> Optional[str]:
    """Pull the OnForm video id out of a share link."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.hostname == "link.getonform.com":
        ids = parse_qs(parsed.query).get("id")
        return ids[0] if ids else None
    if parsed.hostname == "web.onform.com":
        match = _ONFORM_PATH_ID.search(parsed.path)
        return match.group(1) if match else None
    return None


def find_download_url(page_html: str) -> Optional[str]:
    match = _ONFORM_DOWNLOAD_URL.search(page_html)
    if match is None:
        return None
    return match.group(0).replace("&amp;", "&")


def parse_tag_response(content: str) -> TagAnalysis:
    """Parse the model reply, tolerating markdown code fences.

    Raises:
        ParseError: the reply is not a JSON object of the expected shape
    """
    match = _FENCED_JSON.search(content)
    raw = match.group(1) if match else content.strip()
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        return TagAnalysis.model_validate(data)
    except (ValueError, ValidationError) as exc:
        logger.error("tag_response_unparseable", content=content[:500])
        raise ParseError("Failed to parse AI analysis") from exc


def build_tagging_llm(settings: Settings) -> Optional[ChatOpenAI]:
    if not settings.ai_gateway_api_key:
        return None
    return ChatOpenAI(
        api_key=settings.ai_gateway_api_key,
        model=settings.auto_tag_model,
        temperature=settings.auto_tag_temperature,
        base_url=settings.ai_gateway_url,
    )


def build_transcriber(settings: Settings) -> Optional[AsyncOpenAI]:
    if not settings.openai_api_key:
        return None
    return AsyncOpenAI(api_key=settings.openai_api_key)


class ContentPipelineService:
    """Moves drill videos through import, transcription and tagging."""

    def __init__(
        self,
        session: AsyncSession,
        storage: VideoStorage,
        *,
        bucket: str = "videos",
        llm: Any = None,
        transcriber: Any = None,
        transcription_model: str = "whisper-1",
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.session = session
        self.repository = DrillVideoRepository(session)
        self.storage = storage
        self.bucket = bucket
        self.llm = llm
        self.transcriber = transcriber
        self.transcription_model = transcription_model
        self._http = http_client

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    async def import_videos(self, urls: List[str], *, auto_publish: bool = False) -> Dict[str, Any]:
        """Import OnForm share links as drill videos; failures are per item.

        When a transcriber is configured each imported video continues
        through transcription (and tagging) with ``auto_publish``; otherwise
        it stays ``processing`` for a later ``/transcribe-video`` call.
        """
        if not urls:
            raise InvalidArgumentError("urls array is required")

        results: List[Dict[str, Any]] = []
        for url in urls:
            try:
                video = await self._import_one(url)
            except BarrelCoachError as exc:
                logger.warning("onform_import_failed", url=url, error=exc.message)
                results.append({"url": url, "success": False, "error": exc.message})
                continue
            except SQLAlchemyError as exc:
                await self.session.rollback()
                logger.warning("onform_import_failed", url=url, error=str(exc))
                results.append({"url": url, "success": False, "error": "Failed to save video"})
                continue

            item: Dict[str, Any] = {"url": url, "success": True, "videoId": video.id, "status": video.status}
            if self.transcriber is not None:
                item.update(await self._continue_pipeline(video.id, auto_publish))
            results.append(item)

        succeeded = sum(1 for result in results if result["success"])
        failed = len(results) - succeeded
        message = f"Imported {succeeded} video(s)" + (f", {failed} failed" if failed else "")
        logger.info("onform_import_complete", imported=succeeded, failed=failed, auto_publish=auto_publish)
        return {"success": True, "message": message, "results": results}

    async def _continue_pipeline(self, video_id: str, auto_publish: bool) -> Dict[str, Any]:
        """Run transcription for a freshly imported video; the import itself stands."""
        try:
            outcome = await self.transcribe(video_id, auto_publish=auto_publish)
        except BarrelCoachError as exc:
            logger.warning("onform_pipeline_failed", video_id=video_id, error=exc.message)
            video = await self.repository.get(video_id)
            return {"status": video.status if video else "processing_failed", "pipelineError": exc.message}
        return {"status": outcome["status"]}
    async def _import_one(self, url: str) -> DrillVideo:
        onform_id = extract_onform_id(url)
        if not onform_id:
            raise InvalidArgumentError("Could not extract video ID from URL")

        page = await self._get(ONFORM_VIEW_URL.format(video_id=onform_id), "Failed to fetch OnForm page")
        try:
            page_html = page.text
        except (UnicodeDecodeError, LookupError) as exc:
            raise UpstreamError(f"Could not decode OnForm page: {exc}") from exc
        download_url = find_download_url(page_html)
        if download_url is None:
            raise UpstreamError("Could not find video download URL in page")

        video = await self._get(download_url, "Failed to download video")
        storage_path = f"drills/{uuid.uuid4()}.mp4"
        public_url = await self.storage.put(self.bucket, storage_path, video.content, "video/mp4")

        record = DrillVideo(
            id=str(uuid.uuid4()),
            title=f"{IMPORT_TITLE_PREFIX}{onform_id}",
            video_url=public_url,
            storage_path=storage_path,
            status="processing",
            access_level="paid",
            video_type="drill",
        )
        return await self.repository.create(record)

    async def _get(self, url: str, failure: str) -> httpx.Response:
        try:
            if self._http is not None:
                response = await self._http.get(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=60) as client:
                    response = await client.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{failure}: {exc}") from exc
        if response.status_code != 200:
            raise UpstreamError(f"{failure}: {response.status_code}")
        return response

    # ------------------------------------------------------------------
    # Transcription
    # ------------------------------------------------------------------

    async def transcribe(self, video_id: Optional[str], *, auto_publish: bool = False) -> Dict[str, Any]:
        """Transcribe a stored video and hand it to tagging when speech was found."""
        video = await self._get_video(video_id)
        if video.status != "processing":
            raise InvalidArgumentError(
                f"Video is {video.status}; only processing videos can be transcribed"
            )
        if not video.storage_path:
            raise InvalidArgumentError("Video has no stored file")
        if self.transcriber is None:
            raise UpstreamError("Transcription service not configured")

        data = await self.storage.get(self.bucket, video.storage_path)
        filename = video.storage_path.rsplit("/", 1)[-1]
        try:
            result = await self.transcriber.audio.transcriptions.create(
                model=self.transcription_model,
                file=(filename, data),
            )
        except (OpenAIError, httpx.HTTPError) as exc:
            await self._set_status(video, "processing_failed")
            logger.error("transcription_failed", video_id=video.id, error=str(exc))
            raise UpstreamError(f"Transcription failed: {exc}") from exc

        transcript = (getattr(result, "text", None) or "").strip()
        next_status = "analyzing" if transcript else "draft"
        await self.repository.update(
            db_obj=video,
            obj_in={"transcript": transcript, "status": next_status, "updated_at": datetime.utcnow()},
        )
        logger.info("transcription_complete", video_id=video.id, length=len(transcript))

        if transcript:
            tagged = await self.auto_tag(video.id, auto_publish=auto_publish)
            next_status = tagged["status"]

        return {"success": True, "status": next_status, "transcript_length": len(transcript)}

    # ------------------------------------------------------------------
    # AI tagging
    # ------------------------------------------------------------------

    async def auto_tag(self, video_id: Optional[str], *, auto_publish: bool = False) -> Dict[str, Any]:
        """Classify a transcribed video and advance it to review or publication."""
        video = await self._get_video(video_id)
        if not video.transcript:
            raise InvalidArgumentError("No transcript found. Please transcribe the video first.")
        if video.status not in ("draft", "analyzing", "ready_for_review"):
            raise InvalidArgumentError(f"Video is {video.status} and cannot be tagged")
        if self.llm is None:
            raise UpstreamError("AI gateway not configured")

        messages = [
            {"role": "system", "content": TAGGING_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Title: {video.title or 'Untitled'}\n"
                    f"Description: {video.description or 'None'}\n\n"
                    f"Transcript:\n{video.transcript[:TRANSCRIPT_PROMPT_LIMIT]}"
                ),
            },
        ]

        try:
            response = await self.llm.ainvoke(messages)
        except (OpenAIError, httpx.HTTPError, LangChainException) as exc:
            await self._set_status(video, "processing_failed")
            logger.error("auto_tag_failed", video_id=video.id, error=str(exc))
            raise UpstreamError(f"AI analysis failed: {exc}") from exc

        content = getattr(response, "content", None)
        if not content:
            await self._set_status(video, "processing_failed")
            raise UpstreamError("No response from AI")

        analysis = parse_tag_response(content)

        status = "published" if auto_publish else "ready_for_review"
        now = datetime.utcnow()
        fields: Dict[str, Any] = {
            "four_b_category": analysis.four_b_category,
            "problems_addressed_json": json.dumps(analysis.problems_addressed),
            "drill_name": analysis.drill_name,
            "motor_profiles_json": json.dumps(analysis.motor_profiles),
            "player_level_json": json.dumps(analysis.player_level),
            "video_type": analysis.video_type or video.video_type,
            "tags_json": json.dumps(analysis.suggested_tags),
            "status": status,
            "updated_at": now,
        }
        if analysis.suggested_title and _is_placeholder_title(video.title):
            fields["title"] = analysis.suggested_title
        if analysis.suggested_description and not video.description:
            fields["description"] = analysis.suggested_description
        if status == "published":
            fields["published_at"] = now

        await self.repository.update(db_obj=video, obj_in=fields)
        logger.info("auto_tag_complete", video_id=video.id, status=status)

        message = "Video published" if status == "published" else "Video ready for review"
        return {
            "success": True,
            "analysis": analysis.model_dump(),
            "status": status,
            "message": message,
        }

    # ------------------------------------------------------------------
    # Catalog CRUD
    # ------------------------------------------------------------------

    async def list_videos(self, *, status: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[DrillVideo]:
        return await self.repository.get_recent(skip=skip, limit=limit, status=status)

    async def get_video(self, video_id: Optional[str]) -> DrillVideo:
        return await self._get_video(video_id)

    async def update_video(self, video_id: Optional[str], changes: Dict[str, Any]) -> DrillVideo:
        """Apply admin edits; list fields are stored as JSON."""
        video = await self._get_video(video_id)

        cleared = sorted(key for key in REQUIRED_VIDEO_FIELDS if key in changes and changes[key] is None)
        if cleared:
            raise InvalidArgumentError(
                f"Fields cannot be null: {', '.join(cleared)}", details={"fields": cleared}
            )

        status = changes.get("status")
        if status is not None and status not in VIDEO_STATUSES:
            raise InvalidArgumentError(f"Unknown status: {status}")

        fields: Dict[str, Any] = {}
        for key, value in changes.items():
            if key in ("problems_addressed", "motor_profiles", "player_level", "tags"):
                fields[f"{key}_json"] = json.dumps(value or [])
            else:
                fields[key] = value

        now = datetime.utcnow()
        fields["updated_at"] = now
        if status == "published" and video.status != "published":
            fields["published_at"] = now

        return await self.repository.update(db_obj=video, obj_in=fields)

    async def delete_video(self, video_id: Optional[str]) -> bool:
        video = await self._get_video(video_id)
        deleted = await self.repository.delete(id=video.id)
        logger.info("drill_video_deleted", video_id=video.id)
        return deleted

    async def _get_video(self, video_id: Optional[str]) -> DrillVideo:
        if not video_id:
            raise InvalidArgumentError("video_id is required")
        video = await self.repository.get(video_id)
        if video is None:
            raise NotFoundError("Video not found")
        return video

    async def _set_status(self, video: DrillVideo, status: str) -> None:
        await self.repository.update(
            db_obj=video,
            obj_in={"status": status, "updated_at": datetime.utcnow()},
        )


def _is_placeholder_title(title: Optional[str]) -> bool:
    return not title or title.startswith(IMPORT_TITLE_PREFIX)


__all__ = [
    "ContentPipelineService",
    "TagAnalysis",
    "build_tagging_llm",
    "build_transcriber",
    "extract_onform_id",
    "find_download_url",
    "parse_tag_response",
]
