"""
Message data model
"""
from datetime import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from messenger_store.utils.time_utils import now

class MessageKind(str, Enum):
    """Message kind, stored verbatim in the record's ``type`` field"""
    TEXT = "text"
    PHOTO = "photo"
    VIDEO = "video"
    LOCATION = "location"
    # Recognised but carried without content
    ATTRIBUTED_TEXT = "attributed_text"
    EMOJI = "emoji"
    AUDIO = "audio"
    CONTACT = "contact"
    LINK_PREVIEW = "link_preview"
    CUSTOM = "custom"
    
    @property
    def is_supported(self) -> bool:
        return self in SUPPORTED_KINDS
    
    @property
    def is_media(self) -> bool:
        return self in (MessageKind.PHOTO, MessageKind.VIDEO)

SUPPORTED_KINDS = frozenset({
    MessageKind.TEXT,
    MessageKind.PHOTO,
    MessageKind.VIDEO,
    MessageKind.LOCATION,
})

@dataclass
class Location:
    """Coordinate pair"""
    longitude: float
    latitude: float

@dataclass
class Message:
    """Message Model"""
    
    id: str
    sender_key: str
    sender_name: str = ""
    kind: MessageKind = MessageKind.TEXT
    text: str = ""
    media_url: Optional[str] = None
    location: Optional[Location] = None
    sent_at: datetime = field(default_factory=now)
    is_read: bool = False
    
    @classmethod
    def of_text(cls, id: str, sender_key: str, sender_name: str, text: str, **kwargs) -> "Message":
        return cls(id=id, sender_key=sender_key, sender_name=sender_name,
                   kind=MessageKind.TEXT, text=text, **kwargs)
    
    @classmethod
    def of_photo(cls, id: str, sender_key: str, sender_name: str, url: str, **kwargs) -> "Message":
        return cls(id=id, sender_key=sender_key, sender_name=sender_name,
                   kind=MessageKind.PHOTO, media_url=url, **kwargs)
    
    @classmethod
    def of_video(cls, id: str, sender_key: str, sender_name: str, url: str, **kwargs) -> "Message":
        return cls(id=id, sender_key=sender_key, sender_name=sender_name,
                   kind=MessageKind.VIDEO, media_url=url, **kwargs)
    
    @classmethod
    def of_location(cls, id: str, sender_key: str, sender_name: str,
                    longitude: float, latitude: float, **kwargs) -> "Message":
        return cls(id=id, sender_key=sender_key, sender_name=sender_name,
                   kind=MessageKind.LOCATION,
                   location=Location(longitude=longitude, latitude=latitude), **kwargs)
