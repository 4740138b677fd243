from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response

from ....application.services.admin_auth_service import (
    ADMIN_SESSION_COOKIE,
    ADMIN_SESSION_VALUE,
    AdminAuthService,
)
from ....core.config import Settings
from ....core.dependencies import get_admin_auth_service, get_security_state, get_settings
from ....core.logging import audit
from ....services.security_state import SecurityState
from ...api.dependencies import client_identifier, csrf_session_id, rate_limit, require_admin_session
from ...api.schemas.admin import AdminLoginRequest

router = APIRouter(prefix="/api/admin", tags=["Admin Authentication"])


@router.post("/login", dependencies=[Depends(rate_limit("auth"))])
def admin_login(
    payload: AdminLoginRequest,
    request: Request,
    response: Response,
    admin_auth: AdminAuthService = Depends(get_admin_auth_service),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    admin = admin_auth.authenticate(payload.username, payload.password)
    response.set_cookie(
        ADMIN_SESSION_COOKIE,
        ADMIN_SESSION_VALUE,
        max_age=settings.admin_session_max_age,
        httponly=True,
        secure=settings.is_production,
        samesite="strict" if settings.is_production else "lax",
        path="/",
    )
    audit("admin.login", admin=admin, client=client_identifier(request))
    return {"success": True}


@router.post("/logout")
def admin_logout(
    request: Request,
    response: Response,
    security: SecurityState = Depends(get_security_state),
) -> Dict[str, Any]:
    security.csrf_store.revoke(csrf_session_id(request))
    response.delete_cookie(ADMIN_SESSION_COOKIE, path="/")
    audit("admin.logout", client=client_identifier(request))
    return {"success": True}


@router.get("/check-auth")
def admin_check_auth(_: str = Depends(require_admin_session)) -> Dict[str, Any]:
    return {"authenticated": True}


@router.get("/csrf")
def admin_csrf_token(
    request: Request,
    security: SecurityState = Depends(get_security_state),
) -> Dict[str, Any]:
    token = security.csrf_store.issue(csrf_session_id(request))
    return {"csrfToken": token, "expiresIn": security.csrf_store.ttl_seconds}
