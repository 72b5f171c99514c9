"""
Service Layer Package
"""
from .blob_service import BlobCategory, BlobReferenceService, create_blob_service
from .chat_service import ChatService

__all__ = [
    # Blob storage
    "BlobCategory",
    "BlobReferenceService",
    "create_blob_service",
    
    # Chat flows
    "ChatService",
]
