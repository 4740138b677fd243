from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ...domain.errors import ForbiddenError, NotFoundError, ValidationError
from ...domain.models import Conversation, Message, User, conversation_id
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


class ConversationService:
    """One conversation per pair of members, addressed by a deterministic id."""

    def __init__(self, persistence: PersistenceGateway) -> None:
        self._persistence = persistence

    def start_conversation(
        self,
        sender: User,
        receiver_id: str,
        initial_message: Optional[str] = None,
    ) -> Tuple[Conversation, bool]:
        """Open (or reopen) the conversation between ``sender`` and ``receiver_id``.

        Returns the conversation and whether this call created it.
        """
        if sender.id == receiver_id:
            raise ValidationError("receiverId: cannot start a conversation with yourself")
        receiver = self._persistence.get_user(receiver_id)
        if receiver is None or not receiver.can_interact:
            raise NotFoundError("Receiver not found")
        if receiver.user_type is sender.user_type:
            raise ForbiddenError("Members of the same type cannot start conversations")

        conversation, created = self._persistence.create_conversation(
            conversation_id(sender.id, receiver.id), sender.id, receiver.id
        )
        if created:
            logger.info("Conversation %s started by %s", conversation.id, sender.id)
        if initial_message:
            self._deliver(conversation, sender, receiver.id, initial_message)
            conversation = self._persistence.get_conversation(conversation.id) or conversation
        return conversation, created

    def send_message(self, sender: User, conversation_key: str, content: str) -> Message:
        conversation = self._participant_conversation(sender, conversation_key)
        receiver_id = conversation.other_participant(sender.id)
        receiver = self._persistence.get_user(receiver_id)
        if receiver is None or not receiver.can_interact:
            raise ForbiddenError("This member can no longer receive messages")
        return self._deliver(conversation, sender, receiver_id, content)

    def list_messages(self, user: User, conversation_key: str, limit: int = 200) -> List[Message]:
        self._participant_conversation(user, conversation_key)
        return self._persistence.list_messages(conversation_key, limit)

    def mark_read(self, user: User, conversation_key: str) -> int:
        self._participant_conversation(user, conversation_key)
        return self._persistence.mark_messages_read(conversation_key, user.id)

    def _participant_conversation(self, user: User, conversation_key: str) -> Conversation:
        conversation = self._persistence.get_conversation(conversation_key)
        if conversation is None or user.id not in conversation.participants:
            raise NotFoundError("Conversation not found")
        return conversation

    def _deliver(self, conversation: Conversation, sender: User, receiver_id: str, content: str) -> Message:
        text = content.strip()
        if not text:
            raise ValidationError("content: message cannot be empty")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"content: message is longer than {MAX_MESSAGE_LENGTH} characters")
        message = self._persistence.add_message(conversation.id, sender.id, receiver_id, text)
        self._persistence.create_notification(
            receiver_id,
            title="New message",
            message=f"{sender.username} sent you a message.",
            type="message",
        )
        return message
