"""
Conversation API routes
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from messenger_store.api.deps import get_chat, get_current_user, get_data
from messenger_store.data import DataLayer
from messenger_store.data.models import CurrentUser, Message
from messenger_store.models.request import SendMessageRequest
from messenger_store.models.response import (
    ConversationListResponse,
    ConversationLookupResponse,
    MessageListResponse,
    SendMessageResponse,
)
from messenger_store.services.chat_service import ChatService
from messenger_store.utils.exceptions import ConversationNotFoundError
from messenger_store.utils.id_generator import generate_message_id
from messenger_store.utils.response_utils import success_response
from messenger_store.utils.validators import validate_conversation_id
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

def _sse(event: str, payload: str) -> str:
    return f"event: {event}\ndata: {payload}\n\n"

@router.get("/conversations", response_model=ConversationListResponse)
async def get_user_conversations(
    user: CurrentUser = Depends(get_current_user),
    data: DataLayer = Depends(get_data)
) -> ConversationListResponse:
    """Caller's conversation summaries"""
    logger.info("Getting user conversations", user_key=user.key)
    summaries = await data.conversations.get_conversations(user.key)
    return ConversationListResponse.from_summaries(summaries)

@router.get("/conversations/stream")
async def stream_user_conversations(
    user: CurrentUser = Depends(get_current_user),
    data: DataLayer = Depends(get_data)
):
    """Server-sent events carrying the full summary list after every change"""
    logger.info("Streaming user conversations", user_key=user.key)

    async def events():
        stream = data.conversations.list_conversations(user.key)
        try:
            async for summaries in stream:
                yield _sse("conversations", ConversationListResponse.from_summaries(summaries).model_dump_json())
        finally:
            await stream.aclose()

    return StreamingResponse(events(), media_type="text/event-stream")

@router.get("/conversations/lookup", response_model=ConversationLookupResponse)
async def lookup_conversation(
    email: str = Query(..., description="Other participant's email"),
    user: CurrentUser = Depends(get_current_user),
    chat: ChatService = Depends(get_chat)
) -> ConversationLookupResponse:
    """Existing conversation between the caller and another user"""
    conversation_id = await chat.open_conversation(user, email)
    return ConversationLookupResponse(conversation_id=conversation_id, exists=conversation_id is not None)

@router.post("/conversations/messages", response_model=SendMessageResponse, status_code=201)
async def send_message(
    request: SendMessageRequest,
    user: CurrentUser = Depends(get_current_user),
    chat: ChatService = Depends(get_chat)
) -> SendMessageResponse:
    """Send a message, creating the conversation on first contact"""
    message_id = request.message_id or generate_message_id(user.key)
    common = dict(id=message_id, sender_key=user.key, sender_name=user.name)
    if request.kind == "text":
        message = Message.of_text(text=request.text, **common)
    elif request.kind == "photo":
        message = Message.of_photo(url=request.url, **common)
    elif request.kind == "video":
        message = Message.of_video(url=request.url, **common)
    else:
        message = Message.of_location(longitude=request.longitude, latitude=request.latitude, **common)

    conversation_id = await chat.send_message(
        user, request.recipient_email, request.recipient_name, message, request.conversation_id
    )
    return SendMessageResponse(conversation_id=conversation_id, message_id=message_id)

@router.delete("/conversations/{conversation_id}")
async def delete_conversation(
    conversation_id: str,
    user: CurrentUser = Depends(get_current_user),
    data: DataLayer = Depends(get_data)
):
    """Remove the conversation from the caller's list only"""
    validate_conversation_id(conversation_id)
    logger.info("Deleting conversation", conversation_id=conversation_id, user_key=user.key)
    await data.conversations.delete_conversation(user.key, conversation_id)
    return success_response({"conversation_id": conversation_id}, "Conversation deleted successfully")

@router.get("/conversations/{conversation_id}/messages", response_model=MessageListResponse)
async def get_conversation_messages(
    conversation_id: str,
    data: DataLayer = Depends(get_data)
) -> MessageListResponse:
    """Messages of a conversation, oldest first"""
    validate_conversation_id(conversation_id)
    if not await data.conversations.conversation_exists(conversation_id):
        raise ConversationNotFoundError(conversation_id)
    messages = await data.conversations.get_messages(conversation_id)
    return MessageListResponse.from_messages(conversation_id, messages)

@router.get("/conversations/{conversation_id}/messages/stream")
async def stream_conversation_messages(
    conversation_id: str,
    data: DataLayer = Depends(get_data)
):
    """Server-sent events carrying the full message log after every change"""
    validate_conversation_id(conversation_id)
    logger.info("Streaming conversation messages", conversation_id=conversation_id)

    async def events():
        stream = data.conversations.list_messages(conversation_id)
        try:
            async for messages in stream:
                yield _sse("messages", MessageListResponse.from_messages(conversation_id, messages).model_dump_json())
        finally:
            await stream.aclose()

    return StreamingResponse(events(), media_type="text/event-stream")
