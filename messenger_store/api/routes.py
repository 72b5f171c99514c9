"""
API routes
"""
from fastapi import APIRouter

from .v1 import conversations as conversations_v1
from .v1 import media as media_v1
from .v1 import users as users_v1
from .health import router as health_router

api_v1_router = APIRouter()

api_v1_router.include_router(
    health_router,
    tags=["health-v1"],
    responses={
        200: {"description": "Success"},
        503: {"description": "Service Unavailable"}
    }
)

api_v1_router.include_router(
    users_v1.router,
    tags=["users-v1"],
    responses={
        200: {"description": "Success"},
        404: {"description": "Not Found"},
        422: {"description": "Validation Error"}
    }
)

api_v1_router.include_router(
    conversations_v1.router,
    tags=["conversations-v1"], 
    responses={
        200: {"description": "Success"},
        404: {"description": "Not Found"},
        409: {"description": "Write Conflict"},
        504: {"description": "Store Timeout"}
    }
)

api_v1_router.include_router(
    media_v1.router,
    tags=["media-v1"],
    responses={
        201: {"description": "Created"},
        502: {"description": "Blob Store Error"}
    }
)

__all__ = ["api_v1_router"]
