"""
Chat Service - client flows composed from the store and blob services
"""
from typing import Optional

from messenger_store.data import DataLayer
from messenger_store.data.models import CurrentUser, Message, User
from messenger_store.services.blob_service import BlobCategory, BlobReferenceService
from messenger_store.utils.id_generator import generate_message_id
from messenger_store.utils.identity import canonicalize, profile_picture_filename
from messenger_store.utils.logger import get_logger
from messenger_store.utils.validators import validate_email, validate_text_message

logger = get_logger(__name__)


class ChatService:
    """Chat Service"""

    def __init__(self, data: DataLayer, blobs: BlobReferenceService):
        self.data = data
        self.blobs = blobs

    async def register_user(self, first_name: str, last_name: str, email: str,
                            picture: Optional[bytes] = None) -> Optional[str]:
        """Add a user to the directory; returns the profile picture URL when one was uploaded"""
        validate_email(email)
        user = User(first_name=first_name.strip(), last_name=last_name.strip(), email=email)
        await self.data.users.register(user)

        if picture is None:
            return None
        return await self.blobs.upload(picture, profile_picture_filename(email), BlobCategory.PROFILE_PICTURE)

    async def profile_picture_url(self, email: str) -> str:
        validate_email(email)
        path = f"{BlobCategory.PROFILE_PICTURE.value}/{profile_picture_filename(email)}"
        return await self.blobs.resolve(path)

    async def open_conversation(self, current_user: CurrentUser, other_email: str) -> Optional[str]:
        """Existing conversation id between the caller and ``other_email``, if any"""
        validate_email(other_email)
        return await self.data.conversations.find_conversation_id(
            sender_key=current_user.key,
            recipient_key=canonicalize(other_email)
        )

    async def send_message(self, current_user: CurrentUser, other_email: str, other_name: str,
                           message: Message, conversation_id: Optional[str] = None) -> str:
        """Send into ``conversation_id``, or start a conversation when there is none yet"""
        validate_email(other_email)
        other_key = canonicalize(other_email)
        conversations = self.data.conversations

        if conversation_id is None:
            conversation_id = await conversations.find_conversation_id(current_user.key, other_key)

        if conversation_id is None:
            conversation_id = await conversations.create_conversation(
                current_user, other_key, other_name, message
            )
        else:
            await conversations.append_message(
                conversation_id, current_user, other_key, other_name, message
            )

        logger.info("Message sent", conversation_id=conversation_id, kind=message.kind.value,
                    sender=current_user.key)
        return conversation_id

    def _new_message_id(self, current_user: CurrentUser) -> str:
        return generate_message_id(current_user.key)

    async def send_text(self, current_user: CurrentUser, other_email: str, other_name: str, text: str,
                        conversation_id: Optional[str] = None) -> str:
        validate_text_message(text)
        message = Message.of_text(self._new_message_id(current_user), current_user.key, current_user.name, text)
        return await self.send_message(current_user, other_email, other_name, message, conversation_id)

    async def send_photo(self, current_user: CurrentUser, other_email: str, other_name: str, data: bytes,
                         conversation_id: Optional[str] = None) -> str:
        message_id = self._new_message_id(current_user)
        url = await self.blobs.upload(data, f"photo_message_{message_id}.png", BlobCategory.MESSAGE_PHOTO)
        message = Message.of_photo(message_id, current_user.key, current_user.name, url)
        return await self.send_message(current_user, other_email, other_name, message, conversation_id)

    async def send_video(self, current_user: CurrentUser, other_email: str, other_name: str, data: bytes,
                         conversation_id: Optional[str] = None) -> str:
        message_id = self._new_message_id(current_user)
        url = await self.blobs.upload(data, f"video_message_{message_id}.mov", BlobCategory.MESSAGE_VIDEO)
        message = Message.of_video(message_id, current_user.key, current_user.name, url)
        return await self.send_message(current_user, other_email, other_name, message, conversation_id)

    async def send_location(self, current_user: CurrentUser, other_email: str, other_name: str,
                            longitude: float, latitude: float, conversation_id: Optional[str] = None) -> str:
        message = Message.of_location(self._new_message_id(current_user), current_user.key, current_user.name,
                                      longitude=longitude, latitude=latitude)
        return await self.send_message(current_user, other_email, other_name, message, conversation_id)
