"""
Conversation summary data model
"""
from datetime import datetime
from dataclasses import dataclass

@dataclass
class LatestMessage:
    """Snapshot of the newest message in a conversation"""
    date: datetime
    text: str
    is_read: bool = False

@dataclass
class ConversationSummary:
    """One participant's view of a conversation"""
    id: str
    other_user_key: str
    name: str
    latest_message: LatestMessage
