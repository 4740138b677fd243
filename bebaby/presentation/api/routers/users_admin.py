import math
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....application.services.user_lifecycle_service import UserLifecycleService
from ....core.dependencies import get_user_lifecycle_service
from ....domain.models import UserStatus, UserType
from ...api.dependencies import admin_mutation, require_admin_session
from ...api.schemas.admin import (
    CreateAdminUserRequest,
    DeleteUserRequest,
    ManageUserRequest,
    TogglePremiumRequest,
)
from ...api.serializers import serialize_user

router = APIRouter(prefix="/api/admin", tags=["User Lifecycle"])


@router.post("/toggle-premium")
def toggle_premium(
    payload: TogglePremiumRequest,
    actor: str = Depends(admin_mutation),
    lifecycle: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Dict[str, Any]:
    user = lifecycle.toggle_premium(payload.user_id, payload.premium, actor=actor)
    return {"success": True, "user": serialize_user(user)}


@router.post("/create-admin-user", status_code=status.HTTP_201_CREATED)
def create_admin_user(
    payload: CreateAdminUserRequest,
    actor: str = Depends(admin_mutation),
    lifecycle: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Dict[str, Any]:
    user = lifecycle.create_admin_user(
        name=payload.name,
        username=payload.username,
        email=payload.email,
        password=payload.password,
        actor=actor,
    )
    return {"success": True, "user": serialize_user(user)}


@router.put("/manage-user")
def manage_user(
    payload: ManageUserRequest,
    actor: str = Depends(admin_mutation),
    lifecycle: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Dict[str, Any]:
    user = lifecycle.manage_user(payload.user_id, payload.action, payload.admin_notes, actor=actor)
    return {"success": True, "user": serialize_user(user)}


@router.delete("/manage-user")
def deactivate_user(
    payload: DeleteUserRequest,
    actor: str = Depends(admin_mutation),
    lifecycle: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Dict[str, Any]:
    user = lifecycle.deactivate_user(payload.user_id, payload.admin_notes, actor=actor)
    return {"success": True, "user": serialize_user(user)}


@router.get("/premium-users")
def premium_users(
    _: str = Depends(require_admin_session),
    lifecycle: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Dict[str, Any]:
    return {"users": [serialize_user(user) for user in lifecycle.list_premium_users()]}


@router.get("/search-users")
def search_users(
    search: Optional[str] = Query(default=None, max_length=100),
    user_type: Optional[UserType] = Query(default=None, alias="userType"),
    user_status: Optional[UserStatus] = Query(default=None, alias="status"),
    premium: Optional[bool] = None,
    verified: Optional[bool] = None,
    state: Optional[str] = Query(default=None, max_length=50),
    city: Optional[str] = Query(default=None, max_length=100),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
    _: str = Depends(require_admin_session),
    lifecycle: UserLifecycleService = Depends(get_user_lifecycle_service),
) -> Dict[str, Any]:
    """
    Filter members for the admin user browser.

    - **search**: case-insensitive match on name, username, email, city or state
    - **userType**, **status**, **premium**, **verified**, **state**, **city**: exact filters
    - **page**, **limit**: 1-based page of at most 100 users, newest first
    """
    users, total = lifecycle.search_users(
        text=search,
        user_type=user_type,
        status=user_status,
        premium=premium,
        verified=verified,
        state=state,
        city=city,
        page=page,
        limit=limit,
    )
    return {
        "users": [serialize_user(user) for user in users],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
            "hasNext": page * limit < total,
            "hasPrev": page > 1,
        },
    }
