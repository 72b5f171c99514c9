"""
Error taxonomy and FastAPI handlers
"""
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from messenger_store.utils.logger import get_logger
from messenger_store.utils.time_utils import now_ms

logger = get_logger("exceptions")

class StoreError(Exception):
    """Base class for store errors"""
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

class NotFoundError(StoreError):
    """Requested user or conversation is absent"""
    def __init__(self, message: str):
        super().__init__(message, 404)

class UserNotFoundError(NotFoundError):
    def __init__(self, user_key: str):
        self.user_key = user_key
        super().__init__(f"User {user_key} not found")

class ConversationNotFoundError(NotFoundError):
    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        super().__init__(f"Conversation {conversation_id} not found")

class DecodeError(StoreError):
    """Stored record is malformed"""
    def __init__(self, message: str):
        super().__init__(message, 500)

class WriteConflictError(StoreError):
    """Concurrent update detected"""
    def __init__(self, message: str):
        super().__init__(message, 409)

class StoreTimeoutError(StoreError):
    """Remote call did not complete in time"""
    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"{operation} timed out after {timeout}s", 504)

class BlobError(StoreError):
    """Blob storage errors"""
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message, status_code)

class BlobUploadError(BlobError):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        super().__init__(f"Failed to upload {path}" + (f": {reason}" if reason else ""))

class BlobNotFoundError(BlobError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Blob {path} not found", 404)

class ValidationError(StoreError):
    """Validation errors"""
    def __init__(self, message: str):
        super().__init__(message, 422)

async def store_error_handler(request: Request, exc: StoreError):
    """Store error handler"""
    logger.warning("Store error", error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"message": exc.message, "type": type(exc).__name__},
            "timestamp": now_ms()
        }
    )

async def http_error_handler(request: Request, exc: HTTPException):
    """HTTP error handler"""
    logger.warning("HTTP error", status=exc.status_code, detail=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"message": str(exc.detail), "type": "HTTPException"},
            "timestamp": now_ms()
        }
    )

async def general_error_handler(request: Request, exc: Exception):
    """General error handler"""
    logger.error("Unexpected error", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {"message": "Internal server error", "type": "InternalError"},
            "timestamp": now_ms()
        }
    )
