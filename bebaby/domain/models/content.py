from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ContentType(str, Enum):
    PHOTO = "photo"
    TEXT = "text"


class ContentStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ModerationAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


# Profile fields whose edits go through moderation before they become visible.
MODERATED_TEXT_FIELDS = ("about", "looking_for")


@dataclass(slots=True)
class PendingContent:
    """Photo or profile text awaiting an administrator decision."""

    id: str
    user_id: str
    content_type: ContentType
    status: ContentStatus
    photo_url: Optional[str]
    field: Optional[str]
    content: Optional[str]
    created_at: datetime
    decided_at: Optional[datetime]

    @property
    def is_terminal(self) -> bool:
        return self.status is not ContentStatus.PENDING
