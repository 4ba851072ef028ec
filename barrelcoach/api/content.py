"""Admin drill-video routes: catalog CRUD, OnForm import, transcription and tagging."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_content_service
from ..schemas.content import DrillVideoUpdate, ImportOnformRequest, VideoPipelineRequest
from ..security import require_admin
from ..services.content import ContentPipelineService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/admin-videos")
async def get_videos(
    video_id: Optional[str] = Query(None, alias="id"),
    status: Optional[str] = Query(None, description="Filter by status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: ContentPipelineService = Depends(get_content_service),
) -> Any:
    """Return one video by ``id``, or the catalog newest first."""
    if video_id:
        video = await service.get_video(video_id)
        return video.to_api()
    videos = await service.list_videos(status=status, skip=skip, limit=limit)
    return [video.to_api() for video in videos]


@router.put("/admin-videos")
async def update_video(
    changes: DrillVideoUpdate,
    video_id: Optional[str] = Query(None, alias="id"),
    service: ContentPipelineService = Depends(get_content_service),
) -> Dict[str, Any]:
    video = await service.update_video(video_id, changes.model_dump(exclude_unset=True))
    return video.to_api()


@router.delete("/admin-videos")
async def delete_video(
    video_id: Optional[str] = Query(None, alias="id"),
    service: ContentPipelineService = Depends(get_content_service),
) -> Dict[str, bool]:
    await service.delete_video(video_id)
    return {"success": True}


@router.post("/import-onform-video")
async def import_onform_video(
    request: ImportOnformRequest,
    service: ContentPipelineService = Depends(get_content_service),
) -> Dict[str, Any]:
    return await service.import_videos(request.urls, auto_publish=request.auto_publish)


@router.post("/transcribe-video")
async def transcribe_video(
    request: VideoPipelineRequest,
    service: ContentPipelineService = Depends(get_content_service),
) -> Dict[str, Any]:
    return await service.transcribe(request.video_id, auto_publish=request.auto_publish)


@router.post("/auto-tag-video")
async def auto_tag_video(
    request: VideoPipelineRequest,
    service: ContentPipelineService = Depends(get_content_service),
) -> Dict[str, Any]:
    return await service.auto_tag(request.video_id, auto_publish=request.auto_publish)
