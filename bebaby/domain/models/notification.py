from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Notification:
    id: str
    user_id: str
    title: str
    message: str
    type: str
    read: bool
    dedupe_key: Optional[str]
    created_at: datetime
