"""User domain model for members and administrators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class UserType(str, Enum):
    SUGAR_BABY = "SUGAR_BABY"
    SUGAR_DADDY = "SUGAR_DADDY"
    SUGAR_MOMMY = "SUGAR_MOMMY"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    BANNED = "BANNED"
    INACTIVE = "INACTIVE"


@dataclass(slots=True)
class User:
    """
    User entity covering both member profiles and administrator accounts.

    Attributes:
        id: Opaque unique identifier
        email: Unique e-mail address (stored lower-case)
        username: Unique public handle
        password_hash: bcrypt hash
        status: Lifecycle status; BANNED and INACTIVE users cannot act on the platform
        premium: Premium flag, overwritten by administrators
        premium_expiry: When the premium grant lapses, if any
        is_admin: Whether the account may sign in to the admin area
    """

    id: str
    email: str
    username: str
    password_hash: str
    name: Optional[str]
    birthdate: Optional[date]
    gender: Optional[str]
    user_type: UserType
    looking_for: Optional[str]
    state: Optional[str]
    city: Optional[str]
    about: Optional[str]
    photo_url: Optional[str]
    education: Optional[str]
    profession: Optional[str]
    email_verified: bool
    verified: bool
    is_admin: bool
    premium: bool
    premium_expiry: Optional[datetime]
    status: UserStatus
    status_reason: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def can_interact(self) -> bool:
        return self.status not in (UserStatus.BANNED, UserStatus.INACTIVE)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username} status={self.status.value}>"
