from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ....application.services.moderation_service import ModerationService
from ....core.dependencies import get_moderation_service
from ...api.dependencies import admin_mutation, require_admin_session
from ...api.schemas.admin import DeleteReportRequest, ManageReportRequest, ModerateContentRequest
from ...api.serializers import serialize_content, serialize_report

router = APIRouter(prefix="/api/admin", tags=["Moderation"])


@router.get("/reports")
def list_reports(
    status: Optional[str] = Query(default=None),
    _: str = Depends(require_admin_session),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Dict[str, Any]:
    return {"reports": [serialize_report(report) for report in moderation.list_reports(status)]}


@router.put("/manage-report")
def manage_report(
    payload: ManageReportRequest,
    actor: str = Depends(admin_mutation),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Dict[str, Any]:
    report = moderation.manage_report(
        payload.report_id,
        payload.action,
        payload.admin_notes,
        actor=actor,
    )
    return {"success": True, "report": serialize_report(report)}


@router.delete("/manage-report")
def delete_report(
    payload: DeleteReportRequest,
    actor: str = Depends(admin_mutation),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Dict[str, Any]:
    moderation.delete_report(payload.report_id, actor=actor)
    return {"success": True}


@router.get("/pending-content")
def pending_content(
    _: str = Depends(require_admin_session),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Dict[str, Any]:
    grouped = moderation.list_pending_content()
    return {
        "photos": [serialize_content(item) for item in grouped["photos"]],
        "texts": [serialize_content(item) for item in grouped["texts"]],
    }


@router.put("/moderate-content")
def moderate_content(
    payload: ModerateContentRequest,
    actor: str = Depends(admin_mutation),
    moderation: ModerationService = Depends(get_moderation_service),
) -> Dict[str, Any]:
    item = moderation.moderate_content(
        payload.content_id,
        payload.content_type,
        payload.action,
        actor=actor,
    )
    return {"success": True, "content": serialize_content(item)}
