"""
API Response Models
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from messenger_store.data.codec import message_content
from messenger_store.data.models import ConversationSummary, DirectoryEntry, Message

class UserResponse(BaseModel):
    """Directory entry"""
    key: str = Field(..., description="Canonical user key")
    name: str = Field(..., description="Display name")
    
    @classmethod
    def from_entry(cls, entry: DirectoryEntry) -> "UserResponse":
        return cls(key=entry.key, name=entry.name)

class UserListResponse(BaseModel):
    users: List[UserResponse] = Field(..., description="Directory entries")
    total: int = Field(..., description="Number of entries")
    
    @classmethod
    def from_entries(cls, entries: List[DirectoryEntry]) -> "UserListResponse":
        return cls(users=[UserResponse.from_entry(entry) for entry in entries], total=len(entries))

class LatestMessageResponse(BaseModel):
    date: datetime = Field(..., description="Sent time of the latest message")
    text: str = Field(..., description="Latest message payload")
    is_read: bool = Field(False, description="Read flag")

class ConversationSummaryResponse(BaseModel):
    """One participant's conversation summary"""
    id: str = Field(..., description="Conversation ID")
    other_user_key: str = Field(..., description="Counterpart's canonical key")
    name: str = Field(..., description="Counterpart's display name")
    latest_message: LatestMessageResponse = Field(..., description="Latest message snapshot")
    
    @classmethod
    def from_summary(cls, summary: ConversationSummary) -> "ConversationSummaryResponse":
        latest = summary.latest_message
        return cls(
            id=summary.id,
            other_user_key=summary.other_user_key,
            name=summary.name,
            latest_message=LatestMessageResponse(date=latest.date, text=latest.text, is_read=latest.is_read)
        )

class ConversationListResponse(BaseModel):
    """Conversation List Response Model"""
    conversations: List[ConversationSummaryResponse] = Field(..., description="Conversation summaries")
    total: int = Field(..., description="Total number of conversations")
    
    @classmethod
    def from_summaries(cls, summaries: List[ConversationSummary]) -> "ConversationListResponse":
        return cls(
            conversations=[ConversationSummaryResponse.from_summary(summary) for summary in summaries],
            total=len(summaries)
        )

class MessageResponse(BaseModel):
    """Message Response Model"""
    id: str = Field(..., description="Message ID")
    sender_key: str = Field(..., description="Sender's canonical key")
    sender_name: str = Field(..., description="Sender's display name")
    kind: str = Field(..., description="Message kind")
    content: str = Field(..., description="Text, media URL or 'longitude,latitude'")
    sent_at: datetime = Field(..., description="Sent time")
    is_read: bool = Field(False, description="Read flag")
    
    @classmethod
    def from_message(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            sender_key=message.sender_key,
            sender_name=message.sender_name,
            kind=message.kind.value,
            content=message_content(message),
            sent_at=message.sent_at,
            is_read=message.is_read
        )

class MessageListResponse(BaseModel):
    conversation_id: str = Field(..., description="Conversation ID")
    messages: List[MessageResponse] = Field(..., description="Messages, oldest first")
    total: int = Field(..., description="Number of messages")
    
    @classmethod
    def from_messages(cls, conversation_id: str, messages: List[Message]) -> "MessageListResponse":
        return cls(
            conversation_id=conversation_id,
            messages=[MessageResponse.from_message(message) for message in messages],
            total=len(messages)
        )

class SendMessageResponse(BaseModel):
    conversation_id: str = Field(..., description="Conversation the message was sent into")
    message_id: str = Field(..., description="Message ID")

class ConversationLookupResponse(BaseModel):
    conversation_id: Optional[str] = Field(None, description="Existing conversation ID")
    exists: bool = Field(..., description="Whether a conversation exists")

class MediaUploadResponse(BaseModel):
    url: str = Field(..., description="Public URL of the stored object")
    category: str = Field(..., description="Object store folder")
    file_name: str = Field(..., description="Stored file name")
