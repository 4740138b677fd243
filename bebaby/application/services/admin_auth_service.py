from __future__ import annotations

import hmac
import logging
from typing import Optional

from ...domain.errors import AuthError, ValidationError
from ...domain.models import UserStatus
from ...domain.ports.persistence import UserRepository
from ...services.user_service import verify_password

logger = logging.getLogger(__name__)

ADMIN_SESSION_COOKIE = "admin_session"
ADMIN_SESSION_VALUE = "authenticated"
MAX_CREDENTIAL_LENGTH = 100


class AdminAuthService:
    """Checks administrator credentials and the shared admin session marker.

    The session cookie carries no admin identity: every authenticated admin holds
    the same marker value. The identity is only known at login time.
    """

    def __init__(self, users: UserRepository, username: str, password: str) -> None:
        if not username or not password:
            raise RuntimeError("Admin credentials are not configured.")
        self._users = users
        self._username = username
        self._password = password

    # ------------------------------------------------------------------
    def authenticate(self, username: str, password: str) -> str:
        """Return the admin label to audit, or raise ``AuthError``."""
        if not username or not password:
            raise ValidationError("Username and password are required")
        if len(username) > MAX_CREDENTIAL_LENGTH or len(password) > MAX_CREDENTIAL_LENGTH:
            raise ValidationError("Credentials are too long")

        username_match = hmac.compare_digest(username.encode("utf-8"), self._username.encode("utf-8"))
        password_match = hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8"))
        if username_match and password_match:
            return username

        user = self._users.get_user_by_username(username)
        if (
            user is not None
            and user.is_admin
            and user.status is UserStatus.ACTIVE
            and verify_password(password, user.password_hash)
        ):
            return user.username

        logger.warning("Rejected admin login for %r", username)
        raise AuthError("Invalid credentials")

    @staticmethod
    def is_authenticated(session_value: Optional[str]) -> bool:
        if not session_value:
            return False
        return hmac.compare_digest(session_value.encode("utf-8"), ADMIN_SESSION_VALUE.encode("utf-8"))
