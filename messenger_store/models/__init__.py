"""
API model package
"""
from .request import RegisterUserRequest, SendMessageRequest
from .response import (
    ConversationListResponse,
    ConversationLookupResponse,
    ConversationSummaryResponse,
    MediaUploadResponse,
    MessageListResponse,
    MessageResponse,
    SendMessageResponse,
    UserListResponse,
    UserResponse,
)

__all__ = [
    # Requests
    "RegisterUserRequest",
    "SendMessageRequest",
    
    # Responses
    "ConversationListResponse",
    "ConversationLookupResponse",
    "ConversationSummaryResponse",
    "MediaUploadResponse",
    "MessageListResponse",
    "MessageResponse",
    "SendMessageResponse",
    "UserListResponse",
    "UserResponse",
]
