import asyncio

import pytest

from messenger_store.data.locks import KeyedLock
from messenger_store.data.stores.base import get_in, set_in, split_path
from messenger_store.utils.exceptions import WriteConflictError


def test_path_helpers():
    assert split_path("/a-x-com/conversations/") == ("a-x-com", ["conversations"])
    assert get_in({"a": {"b": 1}}, ["a", "b"]) == 1
    assert get_in({"a": 1}, ["a", "b"]) is None
    assert set_in(None, ["a", "b"], 2) == {"a": {"b": 2}}
    assert set_in({"a": 1, "b": 2}, ["a"], None) == {"b": 2}


async def test_nested_paths_share_a_document(store):
    await store.set("a-x-com", {"first_name": "Alice", "last_name": "Adams"})
    await store.set("a-x-com/conversations", [{"id": "c1"}])

    assert await store.get("a-x-com/conversations") == [{"id": "c1"}]
    assert (await store.get("a-x-com"))["first_name"] == "Alice"
    assert await store.get("nobody/conversations") is None


async def test_transaction_writes_become_visible_together(store):
    async with store.transaction() as txn:
        await txn.set("conversation_m1/messages", [{"id": "m1"}])
        await txn.set("b-y-com/conversations", [{"id": "conversation_m1"}])
        assert await store.get("conversation_m1/messages") is None

    assert await store.get("conversation_m1/messages") == [{"id": "m1"}]
    assert await store.get("b-y-com/conversations") == [{"id": "conversation_m1"}]


async def test_failed_transaction_writes_nothing(store):
    with pytest.raises(RuntimeError):
        async with store.transaction() as txn:
            await txn.set("conversation_m1/messages", [{"id": "m1"}])
            raise RuntimeError("boom")

    assert await store.get("conversation_m1/messages") is None


async def test_concurrent_change_to_read_document_conflicts(store):
    await store.set("doc", {"v": 1})

    with pytest.raises(WriteConflictError):
        async with store.transaction() as txn:
            await txn.get("doc")
            await store.set("doc", {"v": 2})
            await txn.set("doc", {"v": 3})

    assert await store.get("doc") == {"v": 2}


async def test_watch_yields_current_value_then_latest_change(store):
    await store.set("doc/items", [1])
    stream = store.watch("doc/items")

    assert await stream.__anext__() == [1]

    await store.set("doc/items", [1, 2])
    await store.set("doc/items", [1, 2, 3])
    assert await asyncio.wait_for(stream.__anext__(), 1) == [1, 2, 3]

    await stream.aclose()
    assert store.watcher_count("doc/items") == 0


async def test_watch_ignores_other_documents(store):
    stream = store.watch("doc")
    assert await stream.__anext__() is None

    await store.set("other", {"v": 1})
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(stream.__anext__(), 0.05)
    # Cancelling a pending read ends the stream
    assert store.watcher_count("doc") == 0


async def test_keyed_lock_serializes_shared_keys():
    locks = KeyedLock()
    events = []

    async def worker(name, *keys):
        async with locks.hold(*keys):
            events.append(f"{name} in")
            await asyncio.sleep(0.01)
            events.append(f"{name} out")

    await asyncio.gather(worker("first", "c1", "a"), worker("second", "a", "c1"))

    assert events in (
        ["first in", "first out", "second in", "second out"],
        ["second in", "second out", "first in", "first out"],
    )
    assert len(locks) == 0


async def test_keyed_lock_lets_unrelated_keys_overlap():
    locks = KeyedLock()
    inside = 0
    peak = 0

    async def worker(key):
        nonlocal inside, peak
        async with locks.hold(key):
            inside += 1
            peak = max(peak, inside)
            await asyncio.sleep(0.01)
            inside -= 1

    await asyncio.gather(worker("a"), worker("b"))
    assert peak == 2


def test_create_document_store_picks_backend():
    from messenger_store.configs.database_config import DatabaseConfig
    from messenger_store.data.stores import MemoryDocumentStore, create_document_store
    from messenger_store.data.stores.postgres import PostgresDocumentStore

    assert isinstance(create_document_store(DatabaseConfig(backend="memory")), MemoryDocumentStore)

    postgres = create_document_store(DatabaseConfig(backend="postgres", documents_table="docs"))
    assert isinstance(postgres, PostgresDocumentStore)
    assert postgres.table == "docs"
    assert postgres.db.pool is None

    with pytest.raises(ValueError):
        create_document_store(DatabaseConfig(backend="cassandra"))


async def test_close_ends_open_streams(store):
    stream = store.watch("doc")
    assert await stream.__anext__() is None
    pending = asyncio.ensure_future(stream.__anext__())
    await asyncio.sleep(0)

    await store.close()

    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(pending, 1)
    assert store.watcher_count("doc") == 0
