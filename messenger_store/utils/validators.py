"""
Validation tools
"""
from messenger_store.utils.exceptions import ValidationError

# Not allowed in document keys; "/" would also split the key into a deeper path
FORBIDDEN_KEY_CHARS = frozenset("/#$[]")

def validate_not_empty(value: str, field_name: str = "Field"):
    """Validate non-empty"""
    if not value or not value.strip():
        raise ValidationError(f"{field_name} cannot be empty")

def validate_max_length(value: str, max_length: int, field_name: str = "Field"):
    """Validate maximum length"""
    if len(value) > max_length:
        raise ValidationError(f"{field_name} length cannot exceed {max_length} characters")

def validate_email(email: str):
    """Validate email shape loosely; the store only needs a usable key"""
    validate_not_empty(email, "Email")
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain:
        raise ValidationError("Email format is incorrect")
    if FORBIDDEN_KEY_CHARS.intersection(email):
        raise ValidationError("Email cannot contain any of / # $ [ ]")

def validate_path_segment(value: str, field_name: str = "Key"):
    """Validate a value used as a single document path segment"""
    validate_not_empty(value, field_name)
    if FORBIDDEN_KEY_CHARS.intersection(value):
        raise ValidationError(f"{field_name} cannot contain any of / # $ [ ]")

def validate_text_message(message: str):
    """Validate text message body"""
    validate_not_empty(message, "Message content")
    validate_max_length(message, 5000, "Message content")

def validate_conversation_id(conversation_id: str):
    """Validate conversation ID"""
    validate_path_segment(conversation_id, "Conversation ID")
    if not conversation_id.startswith("conversation_"):
        raise ValidationError("Conversation ID format is incorrect")
