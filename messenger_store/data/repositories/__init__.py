"""
Data Repository Layer - Unified Export
"""

from .conversation_repository import ConversationRepository
from .user_repository import UserRepository


__all__ = [
    "ConversationRepository",
    "UserRepository",
]
