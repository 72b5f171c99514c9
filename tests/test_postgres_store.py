import asyncio
import json
from contextlib import asynccontextmanager

import asyncpg
import pytest

from messenger_store.configs.database_config import DatabaseConfig
from messenger_store.data import DataLayer
from messenger_store.data.models import User
from messenger_store.data.stores.postgres import PostgresDocumentStore
from messenger_store.utils.exceptions import WriteConflictError


class FakeTransaction:
    def __init__(self, conn):
        self.conn = conn

    async def start(self):
        self.conn.db.events.append("begin")

    async def commit(self):
        db = self.conn.db
        if db.commit_errors:
            raise db.commit_errors.pop(0)
        for path, raw in self.conn.pending.items():
            if raw is None:
                db.rows.pop(path, None)
            else:
                db.rows[path] = raw
        db.events.append("commit")

    async def rollback(self):
        self.conn.pending.clear()
        self.conn.db.events.append("rollback")


class FakeConnection:
    """Just enough of an asyncpg connection for the document store's statements"""

    def __init__(self, db):
        self.db = db
        self.pending = {}

    async def execute(self, sql, *args):
        if "pg_advisory_xact_lock" in sql:
            if self.db.lock_errors:
                raise self.db.lock_errors.pop(0)
            self.db.events.append(("lock", args[0]))
        elif "DELETE FROM" in sql:
            self.pending[args[0]] = None
        elif "INSERT INTO" in sql:
            self.pending[args[0]] = args[1]

    async def fetchval(self, sql, *args):
        return self.db.rows.get(args[0])

    def transaction(self):
        return FakeTransaction(self)


class FakeListener:
    def __init__(self):
        self.callbacks = {}
        self.closed = False

    async def add_listener(self, channel, callback):
        self.callbacks[channel] = callback

    async def remove_listener(self, channel, callback):
        assert self.callbacks.pop(channel) == callback

    async def close(self):
        self.closed = True

    def fire(self, channel, payload):
        self.callbacks[channel](self, 4242, channel, payload)


class FakeDatabase:
    """Stands in for DatabaseManager: rows as JSON text keyed by path"""

    def __init__(self):
        self.config = DatabaseConfig(documents_table="documents", notify_channel="documents_changed")
        self.rows = {}
        self.events = []
        self.lock_errors = []
        self.commit_errors = []
        self.acquired = 0
        self.released = 0
        self.listener = FakeListener()
        self.closed = False

    async def initialize(self):
        self.events.append("initialize")

    async def create_tables(self):
        self.events.append("create_tables")

    async def connect_listener(self):
        return self.listener

    async def close(self):
        self.closed = True

    @asynccontextmanager
    async def get_connection(self):
        self.acquired += 1
        try:
            yield FakeConnection(self)
        finally:
            self.released += 1


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def pg_store(db):
    return PostgresDocumentStore(db)


async def test_commit_writes_changed_documents_under_advisory_locks(db, pg_store):
    async with pg_store.transaction() as txn:
        await txn.set("a-x-com/conversations", [{"id": "conversation_m1"}])
        await txn.set("conversation_m1/messages", [{"id": "m1"}])

    assert db.events == ["begin", ("lock", "a-x-com"), ("lock", "conversation_m1"), "commit"]
    assert json.loads(db.rows["a-x-com"]) == {"conversations": [{"id": "conversation_m1"}]}
    assert db.acquired == db.released == 1

    assert await pg_store.get("conversation_m1/messages") == [{"id": "m1"}]


async def test_deleting_a_document_removes_its_row(db, pg_store):
    db.rows["conversation_m1"] = json.dumps({"messages": []})

    async with pg_store.transaction() as txn:
        await txn.delete("conversation_m1")

    assert "conversation_m1" not in db.rows


async def test_failed_unit_rolls_back_and_releases_connection_once(db, pg_store):
    with pytest.raises(RuntimeError):
        async with pg_store.transaction() as txn:
            await txn.set("a-x-com/conversations", [])
            raise RuntimeError("boom")

    assert db.rows == {}
    assert db.events[-1] == "rollback"
    assert db.acquired == db.released == 1


@pytest.mark.parametrize("error", [
    asyncpg.exceptions.DeadlockDetectedError("deadlock detected"),
    asyncpg.exceptions.SerializationError("could not serialize access"),
    asyncpg.exceptions.UniqueViolationError("duplicate key value"),
])
async def test_commit_races_become_write_conflicts(db, pg_store, error):
    db.commit_errors.append(error)

    with pytest.raises(WriteConflictError):
        async with pg_store.transaction() as txn:
            await txn.set("users", [{"name": "Ada Lovelace", "email": "ada-example-com"}])

    assert db.rows == {}
    assert db.events[-1] == "rollback"
    assert db.acquired == db.released == 1


async def test_lock_failure_becomes_write_conflict(db, pg_store):
    db.lock_errors.append(asyncpg.exceptions.DeadlockDetectedError("deadlock detected"))

    with pytest.raises(WriteConflictError):
        async with pg_store.transaction() as txn:
            await txn.get("users")

    assert db.events[-1] == "rollback"
    assert db.acquired == db.released == 1


async def test_repository_retries_after_deadlock(db, pg_store):
    db.commit_errors.append(asyncpg.exceptions.DeadlockDetectedError("deadlock detected"))
    data = DataLayer(store=pg_store, timeout=1.0, max_retries=2)

    assert await data.users.register(User(first_name="Ada", last_name="Lovelace", email="ada@example.com"))

    assert db.events.count("rollback") == 1
    assert db.events.count("commit") == 1
    assert json.loads(db.rows["users"]) == [{"name": "Ada Lovelace", "email": "ada-example-com"}]
    assert db.acquired == db.released == 2


async def test_notifications_re_read_the_watched_document(db, pg_store):
    await pg_store.initialize()
    stream = pg_store.watch("b-y-com/conversations")
    assert await stream.__anext__() is None

    db.rows["b-y-com"] = json.dumps({"conversations": [{"id": "conversation_m1"}]})
    db.listener.fire("documents_changed", "someone-else")
    db.listener.fire("documents_changed", "b-y-com")
    db.listener.fire("documents_changed", "b-y-com")

    assert await asyncio.wait_for(stream.__anext__(), 1) == [{"id": "conversation_m1"}]

    # Repeated notifications for one change collapse into a single re-read
    pending = asyncio.ensure_future(stream.__anext__())
    await asyncio.sleep(0.01)
    assert not pending.done()

    await pg_store.close()

    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(pending, 1)
    assert db.listener.closed
    assert db.listener.callbacks == {}
    assert db.closed
