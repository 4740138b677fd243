"""Domain models for the Bebaby application."""

from .content import ContentStatus, ContentType, ModerationAction, PendingContent
from .conversation import Conversation, Message, conversation_id
from .notification import Notification
from .report import Report, ReportAction, ReportStatus
from .user import User, UserStatus, UserType

__all__ = [
    "ContentStatus",
    "ContentType",
    "Conversation",
    "Message",
    "ModerationAction",
    "Notification",
    "PendingContent",
    "Report",
    "ReportAction",
    "ReportStatus",
    "User",
    "UserStatus",
    "UserType",
    "conversation_id",
]
