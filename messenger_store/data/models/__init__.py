"""
Data Model Package - Data Access Layer Models
"""
from .conversation import ConversationSummary, LatestMessage
from .message import Location, Message, MessageKind
from .user import CurrentUser, DirectoryEntry, User, UserProfile

__all__ = [
    "ConversationSummary",
    "LatestMessage",
    "Location",
    "Message",
    "MessageKind",
    "CurrentUser",
    "DirectoryEntry",
    "User",
    "UserProfile",
]
