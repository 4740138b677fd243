"""Response payloads in the camelCase shape the web client reads."""

from datetime import datetime
from typing import Any, Dict, Optional

from ...domain.models import Conversation, Message, Notification, PendingContent, Report, User


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "username": user.username,
        "name": user.name,
        "birthdate": user.birthdate.isoformat() if user.birthdate else None,
        "gender": user.gender,
        "userType": user.user_type.value,
        "lookingFor": user.looking_for,
        "state": user.state,
        "city": user.city,
        "about": user.about,
        "photoURL": user.photo_url,
        "education": user.education,
        "profession": user.profession,
        "emailVerified": user.email_verified,
        "verified": user.verified,
        "isAdmin": user.is_admin,
        "premium": user.premium,
        "premiumExpiry": _iso(user.premium_expiry),
        "status": user.status.value,
        "statusReason": user.status_reason,
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }


def serialize_report(report: Report) -> Dict[str, Any]:
    return {
        "id": report.id,
        "reporterId": report.reporter_id,
        "reportedId": report.reported_id,
        "reason": report.reason,
        "description": report.description,
        "status": report.status.value,
        "reviewed": report.reviewed,
        "actionTaken": report.action_taken.value if report.action_taken else None,
        "adminNotes": report.admin_notes,
        "reviewedAt": _iso(report.reviewed_at),
        "createdAt": _iso(report.created_at),
        "updatedAt": _iso(report.updated_at),
    }


def serialize_content(item: PendingContent) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": item.id,
        "userId": item.user_id,
        "contentType": item.content_type.value,
        "status": item.status.value,
        "createdAt": _iso(item.created_at),
        "decidedAt": _iso(item.decided_at),
    }
    if item.photo_url is not None:
        payload["photoURL"] = item.photo_url
    if item.field is not None:
        payload["field"] = item.field
        payload["content"] = item.content
    return payload


def serialize_notification(notification: Notification) -> Dict[str, Any]:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type,
        "read": notification.read,
        "createdAt": _iso(notification.created_at),
    }


def serialize_conversation(conversation: Conversation) -> Dict[str, Any]:
    return {
        "id": conversation.id,
        "participants": list(conversation.participants),
        "lastMessage": conversation.last_message,
        "lastMessageAt": _iso(conversation.last_message_at),
        "createdAt": _iso(conversation.created_at),
    }


def serialize_message(message: Message) -> Dict[str, Any]:
    return {
        "id": message.id,
        "conversationId": message.conversation_id,
        "senderId": message.sender_id,
        "receiverId": message.receiver_id,
        "content": message.content,
        "read": message.read,
        "createdAt": _iso(message.created_at),
    }
