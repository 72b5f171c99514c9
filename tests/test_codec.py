from datetime import datetime, timedelta, timezone

import pytest

from messenger_store.data.codec import (
    decode_message,
    decode_messages,
    decode_summaries,
    decode_summary,
    encode_message,
    encode_summary,
)
from messenger_store.data.models import ConversationSummary, LatestMessage, Message, MessageKind
from messenger_store.utils.exceptions import DecodeError
from messenger_store.utils.time_utils import format_date, parse_date

from tests.conftest import BASE_TIME


def _record(**overrides):
    record = {
        "id": "m1",
        "type": "text",
        "content": "hi",
        "date": "2024-03-20T09:30:00.125000Z",
        "sender_email": "a-x-com",
        "is_read": False,
        "name": "Alice Adams",
    }
    record.update(overrides)
    return record


def test_encode_text_message():
    message = Message.of_text("m1", "a-x-com", "Alice Adams", "hi", sent_at=BASE_TIME)
    assert encode_message(message) == _record()


def test_encode_location_uses_longitude_then_latitude():
    message = Message.of_location("m2", "a-x-com", "Alice Adams", longitude=-122.4194, latitude=37.7749,
                                  sent_at=BASE_TIME)
    assert encode_message(message)["content"] == "-122.4194,37.7749"
    assert encode_message(message)["type"] == "location"


def test_encode_media_uses_url():
    message = Message.of_video("m3", "a-x-com", "Alice Adams", "https://cdn.test/messages_videos/v.mov")
    assert encode_message(message)["content"] == "https://cdn.test/messages_videos/v.mov"


def test_encode_unsupported_kind_stores_empty_content():
    message = Message(id="m4", sender_key="a-x-com", sender_name="Alice Adams", kind=MessageKind.EMOJI, text="🙂")
    record = encode_message(message)
    assert record["content"] == ""
    assert record["type"] == "emoji"


@pytest.mark.parametrize("message", [
    Message.of_text("t", "a-x-com", "Alice", "hello, world", sent_at=BASE_TIME),
    Message.of_photo("p", "a-x-com", "Alice", "https://cdn.test/messages_images/p.png", sent_at=BASE_TIME),
    Message.of_video("v", "a-x-com", "Alice", "https://cdn.test/messages_videos/v.mov", sent_at=BASE_TIME),
    Message.of_location("l", "a-x-com", "Alice", longitude=13.404954, latitude=52.520008, sent_at=BASE_TIME),
])
def test_decode_inverts_encode_for_supported_kinds(message):
    assert decode_message(encode_message(message)) == message


@pytest.mark.parametrize("record", [
    {key: value for key, value in _record().items() if key != "content"},
    _record(id=7),
    _record(is_read="yes"),
    _record(type="sticker"),
    _record(date="2024-03-20"),
    _record(type="location", content="1.0,2.0,3.0"),
    _record(type="location", content="east,north"),
    _record(type="photo", content="not a url"),
    _record(type="video", content="/relative/path.mov"),
    ["not", "a", "mapping"],
])
def test_decode_rejects_malformed_records(record):
    with pytest.raises(DecodeError):
        decode_message(record)


def test_decode_message_without_read_flag_defaults_to_unread():
    record = _record()
    del record["is_read"]
    assert decode_message(record).is_read is False


def test_decode_messages_drops_only_bad_entries():
    records = [_record(id="m1"), _record(id="m2", type="location", content="nope"), _record(id="m3")]
    assert [message.id for message in decode_messages(records, "conversation_m1")] == ["m1", "m3"]


def test_summary_round_trip_and_partial_decoding():
    summary = ConversationSummary(
        id="conversation_m1",
        other_user_key="b-y-com",
        name="Bob Brown",
        latest_message=LatestMessage(date=BASE_TIME, text="hi", is_read=False)
    )
    record = encode_summary(summary)
    assert record == {
        "id": "conversation_m1",
        "other_user_email": "b-y-com",
        "name": "Bob Brown",
        "latest_message": {"date": "2024-03-20T09:30:00.125000Z", "message": "hi", "is_read": False},
    }
    assert decode_summary(record) == summary
    assert decode_summaries([record, {"id": "broken"}, None]) == [summary]


def test_dates_are_fixed_width_and_sort_chronologically():
    earlier = datetime(2024, 1, 9, 23, 59, 59, tzinfo=timezone.utc)
    later = earlier + timedelta(microseconds=1)
    assert len(format_date(earlier)) == len(format_date(later)) == 27
    assert format_date(earlier) < format_date(later)
    assert parse_date(format_date(later)) == later


def test_dates_are_normalized_to_utc():
    plus_two = timezone(timedelta(hours=2))
    local = datetime(2024, 3, 20, 11, 30, tzinfo=plus_two)
    assert format_date(local) == "2024-03-20T09:30:00.000000Z"
    assert format_date(datetime(2024, 3, 20, 9, 30)) == "2024-03-20T09:30:00.000000Z"
