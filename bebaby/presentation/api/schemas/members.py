"""Request schemas for member-facing endpoints."""

from datetime import date
from typing import Optional

from pydantic import EmailStr, Field

from ....domain.models import UserType
from .admin import USERNAME_PATTERN
from .common import CamelModel


class RegisterRequest(CamelModel):
    """Request schema for member registration."""

    email: EmailStr
    username: str = Field(pattern=USERNAME_PATTERN)
    password: str = Field(min_length=6, max_length=72)
    birthdate: date
    user_type: UserType
    name: Optional[str] = Field(default=None, max_length=100)
    gender: Optional[str] = Field(default=None, max_length=20)
    looking_for: Optional[str] = Field(default=None, max_length=500)
    state: Optional[str] = Field(default=None, max_length=50)
    city: Optional[str] = Field(default=None, max_length=100)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)


class ProfileUpdateRequest(CamelModel):
    """Only the fields present in the body are changed."""

    name: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=50)
    city: Optional[str] = Field(default=None, max_length=100)
    education: Optional[str] = Field(default=None, max_length=100)
    profession: Optional[str] = Field(default=None, max_length=100)
    about: Optional[str] = Field(default=None, max_length=2000)
    looking_for: Optional[str] = Field(default=None, max_length=500)


class ReportUserRequest(CamelModel):
    reported_id: str = Field(min_length=1)
    reason: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)


class StartConversationRequest(CamelModel):
    receiver_id: str = Field(min_length=1)
    initial_message: Optional[str] = Field(default=None, max_length=1000)


class SendMessageRequest(CamelModel):
    content: str = Field(min_length=1, max_length=2000)


class NotifyTripRequest(CamelModel):
    user_id: str = Field(min_length=1)
    username: str = Field(min_length=1)
    state: str = Field(min_length=1, max_length=50)
    city: str = Field(min_length=1, max_length=100)
    start: date
    end: date
