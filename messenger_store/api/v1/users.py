"""
User directory API routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query

from messenger_store.api.deps import get_chat, get_data
from messenger_store.data import DataLayer
from messenger_store.models.request import RegisterUserRequest
from messenger_store.models.response import UserListResponse, UserResponse
from messenger_store.services.chat_service import ChatService
from messenger_store.utils.exceptions import UserNotFoundError
from messenger_store.utils.identity import canonicalize
from messenger_store.utils.response_utils import success_response
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

@router.post("/users", status_code=201)
async def register_user(
    request: RegisterUserRequest,
    chat: ChatService = Depends(get_chat)
):
    """Register a user in the directory"""
    logger.info("Registering user", email=request.email)
    await chat.register_user(request.first_name, request.last_name, request.email)
    return success_response(
        {"key": canonicalize(request.email), "name": f"{request.first_name} {request.last_name}"},
        "User registered"
    )

@router.get("/users", response_model=UserListResponse)
async def list_users(data: DataLayer = Depends(get_data)) -> UserListResponse:
    """Whole directory"""
    return UserListResponse.from_entries(await data.users.list_all())

@router.get("/users/search", response_model=UserListResponse)
async def search_users(
    q: str = Query(..., description="Name prefix"),
    x_user_email: Optional[str] = Header(None, description="Caller email, excluded from results"),
    data: DataLayer = Depends(get_data)
) -> UserListResponse:
    """Directory entries whose name starts with the query"""
    exclude_key = canonicalize(x_user_email) if x_user_email else None
    return UserListResponse.from_entries(await data.users.search(q, exclude_key=exclude_key))

@router.get("/users/{key}", response_model=UserResponse)
async def get_user(key: str, data: DataLayer = Depends(get_data)) -> UserResponse:
    profile = await data.users.get_user(key)
    if profile is None:
        raise UserNotFoundError(key)
    return UserResponse(key=profile.key, name=profile.name)

@router.get("/users/{email}/picture")
async def get_profile_picture(email: str, chat: ChatService = Depends(get_chat)):
    """URL of the user's profile picture"""
    url = await chat.profile_picture_url(email)
    return success_response({"url": url})
