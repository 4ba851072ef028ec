"""Admin messaging routes: result notifications and the scheduled SMS queue."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..core.errors import InvalidArgumentError
from ..dependencies import get_notification_service, get_scheduling_service
from ..schemas.messaging import (
    ScheduleSmsRequest,
    SendAnalysisCompleteRequest,
    SessionCompleteSmsRequest,
    TriggerRequest,
)
from ..security import require_admin
from ..services.notifications import NotificationService
from ..services.scheduling import SchedulingService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post("/send-analysis-complete")
async def send_analysis_complete(
    request: SendAnalysisCompleteRequest,
    service: NotificationService = Depends(get_notification_service),
) -> Dict[str, Any]:
    if not request.player_id or request.scores is None:
        raise InvalidArgumentError("player_id and scores are required")
    return await service.send_analysis_results(
        player_id=request.player_id,
        scores=request.scores,
        phone=request.phone,
        whatsapp=request.is_whatsapp,
        session_id=request.session_id,
    )


@router.post("/session-complete-sms")
async def session_complete_sms(
    request: SessionCompleteSmsRequest,
    service: NotificationService = Depends(get_notification_service),
) -> Dict[str, Any]:
    if not request.session_id:
        raise InvalidArgumentError("Missing sessionId")
    return await service.send_session_complete_sms(request.session_id)


@router.post("/schedule-sms")
async def schedule_sms(
    request: ScheduleSmsRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Dict[str, Any]:
    scheduled = await service.enqueue(request.session_id, request.trigger_name, request.delay_minutes)
    return {"success": True, "scheduled": scheduled.model_dump(mode="json")}


@router.post("/cancel-sms")
async def cancel_sms(
    request: TriggerRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Dict[str, Any]:
    cancelled = await service.cancel(request.session_id, request.trigger_name)
    return {"success": True, "cancelled": cancelled}


@router.post("/send-sms")
async def send_sms(
    request: TriggerRequest,
    service: SchedulingService = Depends(get_scheduling_service),
) -> Dict[str, Any]:
    """Send a trigger's template to the session's phone immediately."""
    return await service.send_template_sms(request.session_id, request.trigger_name)
