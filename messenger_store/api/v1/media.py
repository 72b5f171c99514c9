"""
Media upload API routes
"""
from fastapi import APIRouter, Depends, Query, Request

from messenger_store.api.deps import get_chat, get_current_user
from messenger_store.data.models import CurrentUser
from messenger_store.models.response import MediaUploadResponse
from messenger_store.services.blob_service import BlobCategory
from messenger_store.services.chat_service import ChatService
from messenger_store.utils.exceptions import ValidationError
from messenger_store.utils.identity import profile_picture_filename
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

@router.post("/media/{category}", response_model=MediaUploadResponse, status_code=201)
async def upload_media(
    category: BlobCategory,
    request: Request,
    file_name: str = Query("", description="Target file name, defaults to the profile picture name for images"),
    user: CurrentUser = Depends(get_current_user),
    chat: ChatService = Depends(get_chat)
) -> MediaUploadResponse:
    """Upload the raw request body and return its URL"""
    if not file_name:
        if category != BlobCategory.PROFILE_PICTURE:
            raise ValidationError("file_name is required for message media")
        file_name = profile_picture_filename(user.email)

    body = await request.body()
    if not body:
        raise ValidationError("Upload body cannot be empty")

    url = await chat.blobs.upload(body, file_name, category)
    logger.info("Media uploaded", category=category.value, file_name=file_name, user_key=user.key)
    return MediaUploadResponse(url=url, category=category.value, file_name=file_name)
