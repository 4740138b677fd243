from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ReportStatus(str, Enum):
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"


class ReportAction(str, Enum):
    REVIEW = "review"
    BLOCK_USER = "block_user"
    DELETE_USER = "delete_user"


@dataclass(slots=True)
class Report:
    id: str
    reporter_id: str
    reported_id: str
    reason: str
    description: Optional[str]
    status: ReportStatus
    reviewed: bool
    action_taken: Optional[ReportAction]
    admin_notes: Optional[str]
    reviewed_at: Optional[datetime]
    version: int
    created_at: datetime
    updated_at: datetime
