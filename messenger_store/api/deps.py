"""
Request dependencies: owned services from app state, caller identity from headers
"""
from fastapi import Depends, Header, Request

from messenger_store.data import DataLayer
from messenger_store.data.models import CurrentUser
from messenger_store.services.chat_service import ChatService
from messenger_store.utils.identity import canonicalize
from messenger_store.utils.validators import validate_email

def get_data(request: Request) -> DataLayer:
    return request.app.state.data

def get_chat(request: Request) -> ChatService:
    return request.app.state.chat

async def get_current_user(
    x_user_email: str = Header(..., description="Caller email"),
    x_user_name: str = Header("", description="Caller display name, defaults to the registered name"),
    data: DataLayer = Depends(get_data)
) -> CurrentUser:
    """Identity of the caller"""
    validate_email(x_user_email)
    name = x_user_name.strip()
    if not name:
        profile = await data.users.get_user(canonicalize(x_user_email))
        # Unregistered callers are named by their email
        name = profile.name if profile is not None else x_user_email
    return CurrentUser(email=x_user_email, name=name)
