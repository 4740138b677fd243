from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from ...core.logging import audit
from ...domain.errors import NotFoundError, ValidationError
from ...domain.models import User, UserStatus, UserType
from ...domain.ports.persistence import UserRepository
from ...services.email_service import EmailService
from ...services.user_service import hash_password

logger = logging.getLogger(__name__)

MANAGE_USER_ACTIONS = ("block", "unblock", "activate_premium", "deactivate_premium")


class UserLifecycleService:
    """Administrator-driven account changes: premium grants, bans and soft deletion.

    Users are never removed from storage. Deactivation sets ``INACTIVE`` so that
    messages, photos and reports owned by the account keep their references.
    """

    def __init__(
        self,
        users: UserRepository,
        email_service: EmailService,
        *,
        premium_duration_days: int = 30,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._users = users
        self._email = email_service
        self._premium_duration = timedelta(days=premium_duration_days)
        self._clock = clock

    def toggle_premium(self, user_id: str, premium: bool, *, actor: str = "admin") -> User:
        """Overwrite the premium flag.

        No payment state is consulted; an administrator can grant or revoke premium
        regardless of what the member paid.
        """
        self._require_user(user_id)
        expiry = self._clock() + self._premium_duration if premium else None
        user = self._users.set_user_premium(user_id, premium, expiry)
        audit("user.premium", user_id=user_id, premium=premium, actor=actor)
        self._email.send_premium_email(user.email, name=user.name, premium=premium, expiry=expiry)
        return user

    def create_admin_user(self, *, name: str, username: str, email: str, password: str, actor: str = "admin") -> User:
        # The UNIQUE constraints on username and email decide conflicts; the
        # repository raises ConflictError when either is taken.
        user = self._users.create_user(
            email=email.strip().lower(),
            username=username.strip(),
            password_hash=hash_password(password),
            user_type=UserType.SUGAR_BABY,
            name=name.strip(),
            birthdate=date(1990, 1, 1),
            gender="OTHER",
            is_admin=True,
            verified=True,
            email_verified=True,
            status=UserStatus.ACTIVE,
        )
        audit("admin.created", user_id=user.id, username=user.username, actor=actor)
        return user

    def manage_user(
        self,
        user_id: str,
        action: str,
        admin_notes: Optional[str] = None,
        *,
        actor: str = "admin",
    ) -> User:
        if action not in MANAGE_USER_ACTIONS:
            raise ValidationError(f"Invalid action. Expected one of: {', '.join(MANAGE_USER_ACTIONS)}")
        if action == "activate_premium":
            return self.toggle_premium(user_id, True, actor=actor)
        if action == "deactivate_premium":
            return self.toggle_premium(user_id, False, actor=actor)

        self._require_user(user_id)
        if action == "block":
            user = self._users.set_user_status(user_id, UserStatus.BANNED, admin_notes or "Administrative action")
            self._email.send_account_status_email(user.email, blocked=True, reason=admin_notes)
        else:
            user = self._users.set_user_status(user_id, UserStatus.ACTIVE, None)
        audit("user.status", user_id=user_id, status=user.status.value, actor=actor)
        return user

    def deactivate_user(self, user_id: str, admin_notes: Optional[str] = None, *, actor: str = "admin") -> User:
        self._require_user(user_id)
        user = self._users.set_user_status(user_id, UserStatus.INACTIVE, admin_notes or "Administrative action")
        audit("user.deactivated", user_id=user_id, actor=actor)
        self._email.send_account_status_email(user.email, blocked=False, reason=admin_notes)
        return user

    def list_premium_users(self) -> List[User]:
        return self._users.list_premium_users()

    def search_users(
        self,
        *,
        text: Optional[str] = None,
        user_type: Optional[UserType] = None,
        status: Optional[UserStatus] = None,
        premium: Optional[bool] = None,
        verified: Optional[bool] = None,
        state: Optional[str] = None,
        city: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[User], int]:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive")
        return self._users.search_users(
            text=text.strip() if text else None,
            user_type=user_type,
            status=status,
            premium=premium,
            verified=verified,
            state=state,
            city=city,
            limit=limit,
            offset=(page - 1) * limit,
        )

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
