"""Athlete swing-session routes: uploads, session detail and analysis."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ..core.errors import InvalidArgumentError
from ..dependencies import get_analysis_service, get_upload_service
from ..schemas.sessions import AnalyzeSessionRequest, SessionDetailResponse, UploadSwingResponse
from ..security import Principal, get_current_principal, require_admin
from ..services.analysis import AnalysisService
from ..services.uploads import UploadService

router = APIRouter()


@router.post("/upload-swing", response_model=UploadSwingResponse)
async def upload_swing(
    file: Optional[UploadFile] = File(None),
    session_id: Optional[str] = Form(None, alias="sessionId"),
    swing_index: Optional[int] = Form(None, alias="swingIndex"),
    principal: Principal = Depends(get_current_principal),
    service: UploadService = Depends(get_upload_service),
) -> Dict[str, Any]:
    """Store one swing video for the caller's session.

    The session moves to ``pending_payment`` once every required swing is in.
    """
    data = await file.read() if file is not None else None
    return await service.upload_swing(
        session_id=session_id,
        swing_index=swing_index,
        data=data,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        principal=principal,
    )


@router.get("/get-session", response_model=SessionDetailResponse)
async def get_swing_session(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    principal: Principal = Depends(get_current_principal),
    service: UploadService = Depends(get_upload_service),
) -> Dict[str, Any]:
    return await service.get_session_detail(session_id, principal)


@router.post("/analyze-session")
async def analyze_session(
    request: AnalyzeSessionRequest,
    _: Principal = Depends(require_admin),
    service: AnalysisService = Depends(get_analysis_service),
) -> Dict[str, Any]:
    """Score a session's swings, or return the stored report unless forced."""
    if not request.session_id:
        raise InvalidArgumentError("Missing sessionId")
    return await service.analyze_session(request.session_id, force_recompute=request.force_recompute)
