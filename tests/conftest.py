from datetime import datetime, timedelta, timezone

import pytest

from messenger_store.data import DataLayer, MemoryDocumentStore
from messenger_store.data.models import CurrentUser, Message, User
from messenger_store.services.blob_service import BlobReferenceService, LocalBlobBackend

BASE_TIME = datetime(2024, 3, 20, 9, 30, 0, 125000, tzinfo=timezone.utc)


def at(seconds: int) -> datetime:
    return BASE_TIME + timedelta(seconds=seconds)


def text_message(message_id: str, sender: CurrentUser, body: str, seconds: int = 0) -> Message:
    return Message.of_text(message_id, sender.key, sender.name, body, sent_at=at(seconds))


@pytest.fixture
def store():
    return MemoryDocumentStore()


@pytest.fixture
def data(store):
    return DataLayer(store=store, timeout=2.0, max_retries=3)


@pytest.fixture
def blobs(tmp_path):
    return BlobReferenceService(LocalBlobBackend(str(tmp_path / "blobs"), "http://files.test/blobs"))


@pytest.fixture
def alice():
    return CurrentUser(email="a@x.com", name="Alice Adams")


@pytest.fixture
def bob():
    return CurrentUser(email="b@y.com", name="Bob Brown")


@pytest.fixture
async def registered(data):
    await data.users.register(User(first_name="Alice", last_name="Adams", email="a@x.com"))
    await data.users.register(User(first_name="Bob", last_name="Brown", email="b@y.com"))
