"""Deterministic conversations between members and message delivery."""

import pytest

from bebaby.domain.errors import ForbiddenError, NotFoundError, ValidationError
from bebaby.domain.models import UserStatus, UserType, conversation_id


@pytest.fixture
def conversations(container):
    return container.conversation_service


@pytest.fixture
def pair(make_user):
    baby = make_user("baby", user_type=UserType.SUGAR_BABY)
    daddy = make_user("daddy", user_type=UserType.SUGAR_DADDY)
    return baby, daddy


class TestConversationId:
    def test_is_symmetric(self):
        assert conversation_id("b", "a") == conversation_id("a", "b") == "a_b"


class TestConversationService:
    def test_start_is_idempotent(self, conversations, pair):
        baby, daddy = pair

        first, created_first = conversations.start_conversation(baby, daddy.id)
        second, created_second = conversations.start_conversation(daddy, baby.id)

        assert created_first is True
        assert created_second is False
        assert first.id == second.id == conversation_id(baby.id, daddy.id)

    def test_initial_message_notifies_the_receiver(self, conversations, persistence, pair):
        baby, daddy = pair

        conversation, _ = conversations.start_conversation(baby, daddy.id, "Hello there")

        assert conversation.last_message == "Hello there"
        assert [message.content for message in persistence.list_messages(conversation.id, 10)] == ["Hello there"]
        assert persistence.list_notifications(daddy.id, 10)[0].type == "message"

    def test_same_user_type_is_refused(self, conversations, make_user):
        first = make_user("first", user_type=UserType.SUGAR_BABY)
        second = make_user("second", user_type=UserType.SUGAR_BABY)

        with pytest.raises(ForbiddenError):
            conversations.start_conversation(first, second.id)

    def test_self_and_missing_receivers(self, conversations, pair, make_user):
        baby, _ = pair
        banned = make_user("banned", user_type=UserType.SUGAR_DADDY, status=UserStatus.BANNED)

        with pytest.raises(ValidationError):
            conversations.start_conversation(baby, baby.id)
        with pytest.raises(NotFoundError):
            conversations.start_conversation(baby, "missing")
        with pytest.raises(NotFoundError):
            conversations.start_conversation(baby, banned.id)

    def test_outsiders_cannot_read_or_write(self, conversations, pair, make_user):
        baby, daddy = pair
        outsider = make_user("outsider", user_type=UserType.SUGAR_MOMMY)
        conversation, _ = conversations.start_conversation(baby, daddy.id)

        with pytest.raises(NotFoundError):
            conversations.send_message(outsider, conversation.id, "hi")
        with pytest.raises(NotFoundError):
            conversations.list_messages(outsider, conversation.id)

    def test_mark_read_only_touches_received_messages(self, conversations, pair):
        baby, daddy = pair
        conversation, _ = conversations.start_conversation(baby, daddy.id, "one")
        conversations.send_message(baby, conversation.id, "two")
        conversations.send_message(daddy, conversation.id, "reply")

        assert conversations.mark_read(daddy, conversation.id) == 2
        assert conversations.mark_read(daddy, conversation.id) == 0

    def test_blank_message(self, conversations, pair):
        baby, daddy = pair
        conversation, _ = conversations.start_conversation(baby, daddy.id)

        with pytest.raises(ValidationError):
            conversations.send_message(baby, conversation.id, "   ")

    def test_cannot_message_a_banned_member(self, conversations, persistence, pair):
        baby, daddy = pair
        conversation, _ = conversations.start_conversation(baby, daddy.id)
        persistence.set_user_status(daddy.id, UserStatus.BANNED, "abuse")

        with pytest.raises(ForbiddenError):
            conversations.send_message(baby, conversation.id, "still there?")


class TestConversationRoutes:
    def test_start_twice_returns_201_then_200(self, client, bearer, pair):
        baby, daddy = pair

        first = client.post("/api/conversations", json={"receiverId": daddy.id}, headers=bearer(baby))
        second = client.post("/api/conversations", json={"receiverId": baby.id}, headers=bearer(daddy))

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.json()["conversation"]["id"] == second.json()["conversation"]["id"]

    def test_send_and_list_messages(self, client, bearer, pair):
        baby, daddy = pair
        key = client.post(
            "/api/conversations", json={"receiverId": daddy.id}, headers=bearer(baby)
        ).json()["conversation"]["id"]

        sent = client.post(f"/api/conversations/{key}/messages", json={"content": "Hi!"}, headers=bearer(daddy))
        listed = client.get(f"/api/conversations/{key}/messages", headers=bearer(baby))

        assert sent.status_code == 201
        assert sent.json()["message"]["receiverId"] == baby.id
        assert [item["content"] for item in listed.json()["messages"]] == ["Hi!"]

    def test_banned_sender_is_forbidden(self, client, bearer, make_user):
        banned = make_user("banned", user_type=UserType.SUGAR_BABY, status=UserStatus.BANNED)
        daddy = make_user("daddy", user_type=UserType.SUGAR_DADDY)

        response = client.post("/api/conversations", json={"receiverId": daddy.id}, headers=bearer(banned))

        assert response.status_code == 403
