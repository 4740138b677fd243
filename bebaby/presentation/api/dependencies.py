import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...application.services.admin_auth_service import ADMIN_SESSION_COOKIE, AdminAuthService
from ...core.dependencies import get_security_state, get_user_service
from ...domain.errors import AuthError, CsrfError, ForbiddenError, RateLimitError
from ...domain.models import User
from ...services.security_state import SecurityState
from ...services.user_service import UserService

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-Token"
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

_bearer_scheme = HTTPBearer(auto_error=False)


def client_identifier(request: Request) -> str:
    """Socket peer address, or the address appended by a trusted proxy.

    ``X-Forwarded-For`` is client-controlled except for the entries appended by
    proxies in front of the app. With ``TRUSTED_PROXY_HOPS=N`` the N-th entry from
    the right is used; with 0 (the default) the header is ignored.
    """
    peer = request.client.host if request.client else "unknown"
    container = getattr(request.app.state, "container", None)
    hops = container.settings.trusted_proxy_hops if container else 0
    if hops <= 0:
        return peer
    forwarded = [part.strip() for part in request.headers.get("x-forwarded-for", "").split(",") if part.strip()]
    if len(forwarded) < hops:
        return peer
    return forwarded[-hops]


def csrf_session_id(request: Request) -> str:
    """Admin cookie value when authenticated, otherwise the client address."""
    session = request.cookies.get(ADMIN_SESSION_COOKIE)
    if AdminAuthService.is_authenticated(session):
        return session
    return f"anon:{client_identifier(request)}"


def require_admin_session(request: Request) -> str:
    if not AdminAuthService.is_authenticated(request.cookies.get(ADMIN_SESSION_COOKIE)):
        raise AuthError("Unauthorized")
    return client_identifier(request)


def require_csrf(
    request: Request,
    security: SecurityState = Depends(get_security_state),
) -> None:
    if request.method not in MUTATING_METHODS:
        return
    token = request.headers.get(CSRF_HEADER)
    if not token:
        raise CsrfError("CSRF token missing")
    if not security.csrf_store.consume(csrf_session_id(request), token):
        logger.warning("Rejected CSRF token for %s %s", request.method, request.url.path)
        raise CsrfError("CSRF token invalid")


def admin_mutation(
    actor: str = Depends(require_admin_session),
    _: None = Depends(require_csrf),
) -> str:
    """Session gate followed by CSRF validation. Returns the client address used as audit actor."""
    return actor


def rate_limit(name: str) -> Callable[..., None]:
    def dependency(
        request: Request,
        security: SecurityState = Depends(get_security_state),
    ) -> None:
        result = security.limiter(name).check(client_identifier(request))
        if not result.success:
            logger.warning("Rate limit %r exceeded by %s", name, client_identifier(request))
            raise RateLimitError(
                "Too many requests",
                limit=result.limit,
                reset=result.reset,
                retry_after=result.retry_after_seconds,
            )

    dependency.__name__ = f"rate_limit_{name}"
    return dependency


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    user_service: UserService = Depends(get_user_service),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("Missing bearer token")
    return user_service.resolve_token(credentials.credentials)


def require_active_user(user: User = Depends(get_current_user)) -> User:
    """Banned and deactivated members cannot create or change anything."""
    if not user.can_interact:
        raise ForbiddenError("Account is not active")
    return user
