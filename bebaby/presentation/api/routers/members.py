"""API router for member registration, login and profile management."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool

from ....application.services.profile_service import ProfileService
from ....core.dependencies import get_profile_service, get_user_service
from ....domain.models import User
from ....services.user_service import UserService
from ...api.dependencies import get_current_user, rate_limit, require_active_user
from ...api.schemas.members import LoginRequest, ProfileUpdateRequest, RegisterRequest
from ...api.serializers import serialize_content, serialize_user

router = APIRouter(prefix="/api", tags=["Members"])


@router.post(
    "/auth/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("auth"))],
)
def register(
    payload: RegisterRequest,
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """
    Register a new member.

    - **email**: unique email address
    - **username**: 3-20 letters, digits or underscores, unique
    - **birthdate**: members must be 18 or older
    """
    user = user_service.register(
        email=payload.email,
        username=payload.username,
        password=payload.password,
        birthdate=payload.birthdate,
        user_type=payload.user_type,
        name=payload.name,
        gender=payload.gender,
        looking_for=payload.looking_for,
        state=payload.state,
        city=payload.city,
    )
    return {"success": True, "user": serialize_user(user), "token": user_service.create_token(user)}


@router.post("/auth/login", dependencies=[Depends(rate_limit("auth"))])
def login(
    payload: LoginRequest,
    user_service: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user, token = user_service.authenticate(payload.email, payload.password)
    return {"access_token": token, "token_type": "bearer", "user": serialize_user(user)}


@router.get("/user/profile", dependencies=[Depends(rate_limit("api"))])
def get_profile(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": serialize_user(user)}


@router.put("/user/profile", dependencies=[Depends(rate_limit("api"))])
def update_profile(
    payload: ProfileUpdateRequest,
    user: User = Depends(require_active_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> Dict[str, Any]:
    """Text fields shown to other members are queued for moderation instead of applied."""
    updated, pending = profiles.update_profile(user, payload.model_dump(exclude_unset=True))
    return {
        "success": True,
        "user": serialize_user(updated),
        "pending": [serialize_content(item) for item in pending],
    }


@router.post(
    "/user/photos",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("upload"))],
)
async def upload_photo(
    request: Request,
    user: User = Depends(require_active_user),
    profiles: ProfileService = Depends(get_profile_service),
) -> Dict[str, Any]:
    declared = request.headers.get("content-length")
    if declared and declared.isdigit():
        profiles.check_upload_size(int(declared))

    data = bytearray()
    async for chunk in request.stream():
        data.extend(chunk)
        profiles.check_upload_size(len(data))

    item = await run_in_threadpool(
        profiles.upload_photo, user, bytes(data), request.headers.get("content-type")
    )
    return {"success": True, "content": serialize_content(item)}
