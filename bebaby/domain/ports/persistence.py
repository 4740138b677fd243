from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional, Protocol, Tuple

from ..models import (
    ContentStatus,
    ContentType,
    Conversation,
    Message,
    Notification,
    PendingContent,
    Report,
    ReportAction,
    ReportStatus,
    User,
    UserStatus,
    UserType,
)


class UserRepository(Protocol):
    """Persistence functions related to member and admin accounts."""

    def create_user(
        self,
        *,
        email: str,
        username: str,
        password_hash: str,
        user_type: UserType,
        name: Optional[str] = None,
        birthdate: Optional[date] = None,
        gender: Optional[str] = None,
        looking_for: Optional[str] = None,
        state: Optional[str] = None,
        city: Optional[str] = None,
        is_admin: bool = False,
        verified: bool = False,
        email_verified: bool = False,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> User:
        ...

    def get_user(self, user_id: str) -> Optional[User]:
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    def update_user_profile(self, user_id: str, **fields: Any) -> User:
        ...

    def set_user_status(self, user_id: str, status: UserStatus, reason: Optional[str]) -> User:
        ...

    def set_user_premium(self, user_id: str, premium: bool, expiry: Optional[datetime]) -> User:
        ...

    def list_users_by_state(
        self,
        state: str,
        *,
        exclude_user_id: Optional[str],
        limit: int,
        offset: int = 0,
    ) -> List[User]:
        ...

    def list_premium_users(self) -> List[User]:
        ...

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
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        """Matching users newest first, plus the total number of matches."""
        ...


class ReportRepository(Protocol):
    """Persistence functions related to user reports."""

    def create_report(
        self,
        reporter_id: str,
        reported_id: str,
        reason: str,
        description: Optional[str],
    ) -> Report:
        ...

    def get_report(self, report_id: str) -> Optional[Report]:
        ...

    def find_recent_report(self, reporter_id: str, reported_id: str, since: datetime) -> Optional[Report]:
        ...

    def list_reports(self, status: Optional[ReportStatus] = None) -> List[Report]:
        ...

    def apply_report_action(
        self,
        report_id: str,
        *,
        expected_version: int,
        action: ReportAction,
        admin_notes: Optional[str],
        report_status: ReportStatus,
        user_status: Optional[UserStatus],
    ) -> Report:
        ...

    def delete_report(self, report_id: str) -> bool:
        ...


class ContentRepository(Protocol):
    """Persistence functions related to content awaiting moderation."""

    def create_pending_content(
        self,
        user_id: str,
        content_type: ContentType,
        *,
        photo_url: Optional[str] = None,
        field: Optional[str] = None,
        content: Optional[str] = None,
    ) -> PendingContent:
        ...

    def get_pending_content(self, content_id: str) -> Optional[PendingContent]:
        ...

    def list_pending_content(self, content_type: Optional[ContentType] = None) -> List[PendingContent]:
        ...

    def decide_content(self, content_id: str, status: ContentStatus) -> PendingContent:
        ...


class NotificationRepository(Protocol):
    """Persistence functions related to in-app notifications."""

    def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        type: str,
        dedupe_key: Optional[str] = None,
    ) -> Optional[Notification]:
        ...

    def list_notifications(self, user_id: str, limit: int, offset: int = 0) -> List[Notification]:
        ...

    def mark_notification_read(self, notification_id: str, user_id: str) -> bool:
        ...

    def mark_all_notifications_read(self, user_id: str) -> int:
        ...


class ConversationRepository(Protocol):
    """Persistence functions related to conversations and their messages."""

    def create_conversation(self, conversation_id: str, user_a: str, user_b: str) -> Tuple[Conversation, bool]:
        ...

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        ...

    def add_message(self, conversation_id: str, sender_id: str, receiver_id: str, content: str) -> Message:
        ...

    def list_messages(self, conversation_id: str, limit: int) -> List[Message]:
        ...

    def mark_messages_read(self, conversation_id: str, receiver_id: str) -> int:
        ...


class PersistenceGateway(
    UserRepository,
    ReportRepository,
    ContentRepository,
    NotificationRepository,
    ConversationRepository,
    Protocol,
):
    """Composite gateway combining every persistence concern used by the app."""

    pass
