from typing import Optional

from pydantic import EmailStr, Field

from .common import CamelModel

USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,20}$"


class AdminLoginRequest(CamelModel):
    username: str
    password: str


class ManageReportRequest(CamelModel):
    report_id: str = Field(min_length=1)
    action: str
    admin_notes: Optional[str] = Field(default=None, max_length=1000)


class DeleteReportRequest(CamelModel):
    report_id: str = Field(min_length=1)


class ModerateContentRequest(CamelModel):
    content_id: str = Field(min_length=1)
    content_type: str
    action: str


class TogglePremiumRequest(CamelModel):
    user_id: str = Field(min_length=1)
    premium: bool


class CreateAdminUserRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    username: str = Field(pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)


class ManageUserRequest(CamelModel):
    user_id: str = Field(min_length=1)
    action: str
    admin_notes: Optional[str] = Field(default=None, max_length=1000)


class DeleteUserRequest(CamelModel):
    user_id: str = Field(min_length=1)
    admin_notes: Optional[str] = Field(default=None, max_length=1000)
