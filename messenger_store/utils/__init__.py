"""
Utils Package
"""
from .logger import get_logger
from .id_generator import conversation_id_for, generate_message_id
from .identity import canonicalize, profile_picture_filename
from .time_utils import now, now_ms, format_date, parse_date
from .validators import validate_text_message, validate_conversation_id, validate_email, validate_path_segment
from .response_utils import success_response
from .exceptions import StoreError, ValidationError

__all__ = [
    # Logging
    "get_logger",
    
    # ID Generation
    "conversation_id_for",
    "generate_message_id", 
    
    # Identity
    "canonicalize",
    "profile_picture_filename",
    
    # Time
    "now",
    "now_ms",
    "format_date",
    "parse_date",
    
    # Validation
    "validate_text_message",
    "validate_conversation_id",
    "validate_email",
    "validate_path_segment",
    
    # Response
    "success_response",
    
    # Exceptions
    "StoreError",
    "ValidationError"
]
