import pytest

from messenger_store.utils.exceptions import ValidationError
from messenger_store.utils.identity import canonicalize, profile_picture_filename
from messenger_store.utils.validators import validate_conversation_id, validate_email, validate_path_segment


def test_canonicalize_replaces_dots_and_at():
    assert canonicalize("a@x.com") == "a-x-com"
    assert canonicalize("first.last@mail.example.org") == "first-last-mail-example-org"


def test_canonicalize_is_deterministic_and_distinct_for_distinct_emails():
    emails = ["a@x.com", "b@y.com", "a@x.org", "ab@x.com"]
    keys = [canonicalize(email) for email in emails]
    assert keys == [canonicalize(email) for email in emails]
    assert len(set(keys)) == len(emails)


def test_canonicalize_separator_collision_is_known():
    # Emails differing only by '.', '@' or '-' at the same position share a key
    assert canonicalize("a.b@x.com") == canonicalize("a-b@x.com")


def test_profile_picture_filename():
    assert profile_picture_filename("duy.huy@gmail.com") == "duy-huy-gmail-com_profile_picture.png"


@pytest.mark.parametrize("email", ["b@y-com/conversations", "a#b@x.com", "a$b@x.com", "a[1]@x.com", "no-at-sign"])
def test_emails_unusable_as_keys_are_rejected(email):
    with pytest.raises(ValidationError):
        validate_email(email)


def test_path_segments():
    validate_path_segment("conversation_m1")
    with pytest.raises(ValidationError):
        validate_path_segment("conversation_m1/messages")
    with pytest.raises(ValidationError):
        validate_conversation_id("conversation_m1/messages")
