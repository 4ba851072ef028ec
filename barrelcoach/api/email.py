"""E-mail routes: admin broadcast and the public unsubscribe page."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..dependencies import get_email_service
from ..schemas.messaging import BroadcastRequest
from ..security import require_admin
from ..services.email import TEMPLATES_DIR, EmailService

router = APIRouter()
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.post("/broadcast-email", dependencies=[Depends(require_admin)])
async def broadcast_email(
    request: BroadcastRequest,
    service: EmailService = Depends(get_email_service),
) -> Dict[str, Any]:
    return await service.broadcast(request.subject, request.message)


@router.get("/unsubscribe", response_class=HTMLResponse)
async def unsubscribe(
    request: Request,
    player_id: Optional[str] = Query(None),
    token: Optional[str] = Query(None),
    service: EmailService = Depends(get_email_service),
) -> HTMLResponse:
    """Render the unsubscribe result; always HTML, even for bad links."""
    outcome = await service.unsubscribe(player_id, token)
    return templates.TemplateResponse(
        request,
        "unsubscribe.html",
        {
            "success": outcome.success,
            "message": outcome.message,
            "first_name": outcome.first_name,
        },
        status_code=outcome.status_code,
    )
