from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Response, status

from ....application.services.conversation_service import ConversationService
from ....core.dependencies import get_conversation_service
from ....domain.models import User
from ...api.dependencies import rate_limit, require_active_user
from ...api.schemas.members import SendMessageRequest, StartConversationRequest
from ...api.serializers import serialize_conversation, serialize_message

router = APIRouter(
    prefix="/api/conversations",
    tags=["Conversations"],
    dependencies=[Depends(rate_limit("api"))],
)


@router.post("")
def start_conversation(
    payload: StartConversationRequest,
    response: Response,
    user: User = Depends(require_active_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    conversation, created = conversations.start_conversation(
        user, payload.receiver_id, payload.initial_message
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return {"conversation": serialize_conversation(conversation), "created": created}


@router.get("/{conversation_id}/messages")
def list_messages(
    conversation_id: str,
    limit: int = Query(default=200, ge=1, le=500),
    user: User = Depends(require_active_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    messages = conversations.list_messages(user, conversation_id, limit)
    return {"messages": [serialize_message(message) for message in messages]}


@router.post("/{conversation_id}/messages", status_code=status.HTTP_201_CREATED)
def send_message(
    conversation_id: str,
    payload: SendMessageRequest,
    user: User = Depends(require_active_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    message = conversations.send_message(user, conversation_id, payload.content)
    return {"message": serialize_message(message)}


@router.post("/{conversation_id}/read")
def mark_read(
    conversation_id: str,
    user: User = Depends(require_active_user),
    conversations: ConversationService = Depends(get_conversation_service),
) -> Dict[str, Any]:
    return {"updated": conversations.mark_read(user, conversation_id)}
