from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


def conversation_id(user_a: str, user_b: str) -> str:
    """Deterministic id for the single conversation between two users."""
    return "_".join(sorted((user_a, user_b)))


@dataclass(slots=True)
class Conversation:
    id: str
    participants: Tuple[str, str]
    last_message: Optional[str]
    last_message_at: Optional[datetime]
    created_at: datetime

    def other_participant(self, user_id: str) -> str:
        first, second = self.participants
        return second if user_id == first else first


@dataclass(slots=True)
class Message:
    id: str
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    read: bool
    created_at: datetime
