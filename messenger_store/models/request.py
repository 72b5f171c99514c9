"""
API Request Model
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Literal, Optional
import re

from messenger_store.utils.validators import FORBIDDEN_KEY_CHARS

# Ids become document path segments
ID_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

def _check_email(v: str) -> str:
    """Emails become user keys, so they must be usable as one path segment"""
    if "@" not in v:
        raise ValueError('Email format is incorrect')
    if FORBIDDEN_KEY_CHARS.intersection(v):
        raise ValueError('Email cannot contain any of / # $ [ ]')
    return v

class RegisterUserRequest(BaseModel):
    """Directory registration request"""
    first_name: str = Field(..., description="First name", min_length=1, max_length=100)
    last_name: str = Field(..., description="Last name", min_length=1, max_length=100)
    email: str = Field(..., description="Email address", min_length=3, max_length=320)
    
    @field_validator('first_name', 'last_name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty or whitespace only')
        return v.strip()
    
    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)
    
    model_config = {
        "json_schema_extra": {
            "example": {
                "first_name": "Ada",
                "last_name": "Lovelace",
                "email": "ada@example.com"
            }
        }
    }

class SendMessageRequest(BaseModel):
    """Send Message Request Model"""
    recipient_email: str = Field(..., description="Recipient email address", min_length=3, max_length=320)
    recipient_name: str = Field(..., description="Recipient display name", max_length=200)
    kind: Literal["text", "photo", "video", "location"] = Field("text", description="Message kind")
    text: Optional[str] = Field(None, description="Text body", max_length=5000)
    url: Optional[str] = Field(None, description="Media URL for photo and video messages", max_length=2000)
    longitude: Optional[float] = Field(None, description="Longitude for location messages")
    latitude: Optional[float] = Field(None, description="Latitude for location messages")
    conversation_id: Optional[str] = Field(
        None,
        description="Conversation ID, empty to reuse an existing conversation or start a new one",
        max_length=300
    )
    message_id: Optional[str] = Field(None, description="Client generated message ID", max_length=300)
    
    @field_validator('recipient_email')
    @classmethod
    def validate_recipient_email(cls, v):
        return _check_email(v)
    
    @field_validator('conversation_id', 'message_id')
    @classmethod
    def validate_id(cls, v):
        if v is not None and not ID_PATTERN.match(v):
            raise ValueError('IDs can only contain letters, numbers, underscores and hyphens')
        return v
    
    @model_validator(mode='after')
    def validate_payload(self):
        """Each kind needs its own payload field"""
        if self.kind == "text" and not (self.text or "").strip():
            raise ValueError('Text messages need a non-empty text')
        if self.kind in ("photo", "video") and not self.url:
            raise ValueError(f'{self.kind} messages need a url')
        if self.kind == "location" and (self.longitude is None or self.latitude is None):
            raise ValueError('Location messages need longitude and latitude')
        return self
    
    model_config = {
        "json_schema_extra": {
            "example": {
                "recipient_email": "grace@example.com",
                "recipient_name": "Grace Hopper",
                "kind": "text",
                "text": "hi"
            }
        }
    }
