from typing import Any, Dict

from fastapi import APIRouter, Depends, Query

from ....application.services.notification_service import NotificationService
from ....core.dependencies import get_notification_service
from ....domain.errors import ForbiddenError
from ....domain.models import User
from ...api.dependencies import get_current_user, rate_limit, require_active_user
from ...api.schemas.members import NotifyTripRequest
from ...api.serializers import serialize_notification

router = APIRouter(prefix="/api", tags=["Notifications"], dependencies=[Depends(rate_limit("api"))])


@router.post("/notify-trip")
def notify_trip(
    payload: NotifyTripRequest,
    user: User = Depends(require_active_user),
    notifications: NotificationService = Depends(get_notification_service),
) -> Dict[str, Any]:
    if payload.user_id != user.id:
        raise ForbiddenError("You can only announce your own trips")
    created = notifications.notify_trip(
        user_id=user.id,
        username=payload.username,
        state=payload.state,
        city=payload.city,
        start=payload.start,
        end=payload.end,
    )
    return {"success": True, "notified": created}


@router.get("/notifications")
def list_notifications(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
) -> Dict[str, Any]:
    items = notifications.list_for_user(user.id, limit, offset)
    return {"notifications": [serialize_notification(item) for item in items]}


@router.post("/notifications/read-all")
def mark_all_read(
    user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
) -> Dict[str, Any]:
    return {"updated": notifications.mark_all_read(user.id)}


@router.post("/notifications/{notification_id}/read")
def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    notifications: NotificationService = Depends(get_notification_service),
) -> Dict[str, Any]:
    notifications.mark_read(user.id, notification_id)
    return {"success": True}
