"""
Data access package - document store, codec and repositories
"""
from typing import Optional

from .codec import decode_message, decode_summary, encode_message, encode_summary
from .locks import KeyedLock
from .models import ConversationSummary, CurrentUser, DirectoryEntry, LatestMessage, Location, Message, MessageKind, User
from .repositories import ConversationRepository, UserRepository
from .stores import DocumentStore, MemoryDocumentStore, create_document_store

from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)

__all__ = [
    # Codec
    "decode_message",
    "decode_summary",
    "encode_message",
    "encode_summary",
    
    # Data models
    "ConversationSummary",
    "CurrentUser",
    "DirectoryEntry",
    "LatestMessage",
    "Location",
    "Message",
    "MessageKind",
    "User",
    
    # Stores and repositories
    "DocumentStore",
    "MemoryDocumentStore",
    "ConversationRepository",
    "UserRepository",
    "DataLayer",
]


class DataLayer:
    """Owns the document store and the repositories sharing it"""
    
    def __init__(self, store: Optional[DocumentStore] = None, timeout: Optional[float] = None,
                 max_retries: Optional[int] = None):
        self.store = store or create_document_store()
        # One lock table so user and conversation writes on the same keys serialize
        self.locks = KeyedLock()
        self.conversations = ConversationRepository(self.store, timeout, max_retries, self.locks)
        self.users = UserRepository(self.store, timeout, max_retries, self.locks)
    
    async def initialize(self):
        """Initialize data access layer"""
        try:
            await self.store.initialize()
            logger.info("Data layer initialized", backend=type(self.store).__name__)
        except Exception as e:
            logger.error("Failed to initialize data layer", error=str(e))
            raise
    
    async def cleanup(self):
        """Release data access layer resources"""
        try:
            await self.store.close()
            logger.info("Data layer closed")
        except Exception as e:
            logger.error("Failed to close data layer", error=str(e))
            raise
