"""
ID Generator Utils
"""
import uuid

CONVERSATION_PREFIX = "conversation_"

def conversation_id_for(message_id: str) -> str:
    """Conversation id derived from the id of the message that opened it"""
    return f"{CONVERSATION_PREFIX}{message_id}"

def generate_message_id(sender_key: str = "") -> str:
    """Generate message ID"""
    suffix = uuid.uuid4().hex
    return f"{sender_key}_{suffix}" if sender_key else suffix
