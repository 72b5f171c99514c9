"""
Message Codec - typed models <-> stored flat records
"""
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlparse

from messenger_store.data.models import ConversationSummary, LatestMessage, Location, Message, MessageKind
from messenger_store.utils.exceptions import DecodeError
from messenger_store.utils.logger import get_logger
from messenger_store.utils.time_utils import format_date, parse_date

logger = get_logger(__name__)


def message_content(message: Message) -> str:
    """Textual payload stored for a message, determined solely by its kind"""
    kind = message.kind
    if not kind.is_supported:
        logger.warning("Unsupported message kind, storing empty content", kind=kind.value, message_id=message.id)
        return ""
    if kind == MessageKind.TEXT:
        return message.text
    if kind.is_media:
        return message.media_url or ""
    if kind == MessageKind.LOCATION:
        if message.location is None:
            return ""
        return f"{message.location.longitude},{message.location.latitude}"
    return ""


def encode_message(message: Message) -> Dict[str, Any]:
    """Encode a message into its stored record"""
    return {
        "id": message.id,
        "type": message.kind.value,
        "content": message_content(message),
        "date": format_date(message.sent_at),
        "sender_email": message.sender_key,
        "is_read": message.is_read,
        "name": message.sender_name,
    }


def _require_str(record: Dict[str, Any], key: str) -> str:
    value = record.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"Field '{key}' is missing or not a string")
    return value


def _optional_bool(record: Dict[str, Any], key: str) -> bool:
    value = record.get(key, False)
    if not isinstance(value, bool):
        raise DecodeError(f"Field '{key}' is not a boolean")
    return value


def _parse_date_field(value: str) -> Any:
    try:
        return parse_date(value)
    except ValueError as e:
        raise DecodeError(f"Unparseable date '{value}'") from e


def _parse_location(content: str) -> Location:
    parts = content.split(",")
    if len(parts) != 2:
        raise DecodeError(f"Location content '{content}' is not a coordinate pair")
    try:
        longitude, latitude = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise DecodeError(f"Location content '{content}' is not numeric") from e
    return Location(longitude=longitude, latitude=latitude)


def _parse_url(content: str) -> str:
    parsed = urlparse(content)
    if not parsed.scheme or not parsed.netloc:
        raise DecodeError(f"Media content '{content}' is not an absolute URL")
    return content


def decode_message(record: Any) -> Message:
    """Decode a stored record, raising DecodeError when it is malformed"""
    if not isinstance(record, dict):
        raise DecodeError("Message record is not a mapping")

    message_id = _require_str(record, "id")
    type_name = _require_str(record, "type")
    content = _require_str(record, "content")
    date = _parse_date_field(_require_str(record, "date"))
    sender_key = _require_str(record, "sender_email")
    name = _require_str(record, "name")
    is_read = _optional_bool(record, "is_read")

    try:
        kind = MessageKind(type_name)
    except ValueError as e:
        raise DecodeError(f"Unknown message type '{type_name}'") from e

    message = Message(
        id=message_id,
        sender_key=sender_key,
        sender_name=name,
        kind=kind,
        sent_at=date,
        is_read=is_read
    )
    if kind == MessageKind.LOCATION:
        message.location = _parse_location(content)
    elif kind.is_media:
        message.media_url = _parse_url(content)
    else:
        message.text = content
    return message


def encode_summary(summary: ConversationSummary) -> Dict[str, Any]:
    """Encode a conversation summary into its stored record"""
    return {
        "id": summary.id,
        "other_user_email": summary.other_user_key,
        "name": summary.name,
        "latest_message": {
            "date": format_date(summary.latest_message.date),
            "message": summary.latest_message.text,
            "is_read": summary.latest_message.is_read,
        },
    }


def decode_summary(record: Any) -> ConversationSummary:
    """Decode a stored conversation summary"""
    if not isinstance(record, dict):
        raise DecodeError("Conversation record is not a mapping")

    latest = record.get("latest_message")
    if not isinstance(latest, dict):
        raise DecodeError("Field 'latest_message' is missing or not a mapping")

    return ConversationSummary(
        id=_require_str(record, "id"),
        other_user_key=_require_str(record, "other_user_email"),
        name=_require_str(record, "name"),
        latest_message=LatestMessage(
            date=_parse_date_field(_require_str(latest, "date")),
            text=_require_str(latest, "message"),
            is_read=_optional_bool(latest, "is_read"),
        ),
    )


def decode_messages(records: Optional[Iterable[Any]], conversation_id: str = "") -> List[Message]:
    """Decode a message log, dropping malformed entries"""
    messages = []
    for position, record in enumerate(records or []):
        try:
            messages.append(decode_message(record))
        except DecodeError as e:
            logger.warning("Dropping malformed message record",
                           conversation_id=conversation_id, position=position, error=e.message)
    return messages


def decode_summaries(records: Optional[Iterable[Any]], user_key: str = "") -> List[ConversationSummary]:
    """Decode a summary list, dropping malformed entries"""
    summaries = []
    for position, record in enumerate(records or []):
        try:
            summaries.append(decode_summary(record))
        except DecodeError as e:
            logger.warning("Dropping malformed conversation record",
                           user_key=user_key, position=position, error=e.message)
    return summaries
