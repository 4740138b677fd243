from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ....application.services.report_service import ReportService
from ....core.dependencies import get_report_service
from ....domain.models import User
from ...api.dependencies import rate_limit, require_active_user
from ...api.schemas.members import ReportUserRequest
from ...api.serializers import serialize_report

router = APIRouter(prefix="/api", tags=["Reports"])


@router.post(
    "/report-user",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("api"))],
)
def report_user(
    payload: ReportUserRequest,
    user: User = Depends(require_active_user),
    reports: ReportService = Depends(get_report_service),
) -> Dict[str, Any]:
    report = reports.report_user(user, payload.reported_id, payload.reason, payload.description)
    return {"success": True, "report": serialize_report(report)}
