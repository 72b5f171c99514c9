"""
PostgreSQL-backed document store: JSONB rows, advisory locks, LISTEN/NOTIFY
"""
import asyncio
import json
from typing import Any, AsyncIterator, Dict, Optional, Set

import asyncpg

from messenger_store.data.database import DatabaseManager
from messenger_store.data.stores.base import (
    STREAM_CLOSED,
    DocumentStore,
    Transaction,
    close_watchers,
    get_in,
    split_path,
)
from messenger_store.utils.exceptions import WriteConflictError
from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)

# Errors after which the whole unit of work can safely be retried
RETRYABLE_ERRORS = (
    asyncpg.exceptions.DeadlockDetectedError,
    asyncpg.exceptions.SerializationError,
    asyncpg.exceptions.UniqueViolationError,
)


def _decode_value(raw: Optional[str]) -> Any:
    if raw is None:
        return None
    return json.loads(raw)


class PostgresTransaction(Transaction):
    """Pessimistic transaction: each document read takes a transaction-scoped advisory lock"""

    def __init__(self, store: "PostgresDocumentStore", conn_ctx, conn: asyncpg.Connection, txn):
        super().__init__()
        self._store = store
        self._conn_ctx = conn_ctx
        self._conn = conn
        self._txn = txn
        self._finished = False

    async def _load(self, root: str) -> Any:
        table = self._store.table
        try:
            # Locks the path even when the row does not exist yet
            await self._conn.execute("SELECT pg_advisory_xact_lock(hashtext($1))", root)
            raw = await self._conn.fetchval(f"SELECT value FROM {table} WHERE path = $1", root)
        except RETRYABLE_ERRORS as e:
            raise WriteConflictError(f"Document {root} is locked by a concurrent writer") from e
        return _decode_value(raw)

    async def _commit(self, changes: Dict[str, Optional[Any]]):
        table = self._store.table
        try:
            for root, value in changes.items():
                if value is None:
                    await self._conn.execute(f"DELETE FROM {table} WHERE path = $1", root)
                else:
                    await self._conn.execute(
                        f"""
                        INSERT INTO {table} (path, value, version, updated_at)
                        VALUES ($1, $2::jsonb, 1, NOW())
                        ON CONFLICT (path) DO UPDATE
                        SET value = EXCLUDED.value, version = {table}.version + 1, updated_at = NOW()
                        """,
                        root,
                        json.dumps(value)
                    )
            await self._txn.commit()
        except RETRYABLE_ERRORS as e:
            await self._txn.rollback()
            raise WriteConflictError(f"Concurrent update on {sorted(changes)}") from e
        except Exception:
            await self._txn.rollback()
            raise
        finally:
            await self._release()

    async def rollback(self):
        if self._finished:
            return
        try:
            await self._txn.rollback()
        finally:
            await self._release()

    async def _release(self):
        if not self._finished:
            self._finished = True
            await self._conn_ctx.__aexit__(None, None, None)


class PostgresDocumentStore(DocumentStore):
    """Documents stored as JSONB rows keyed by top-level path"""

    def __init__(self, db: DatabaseManager):
        self.db = db
        self.table = db.config.documents_table
        self.channel = db.config.notify_channel
        self._listener: Optional[asyncpg.Connection] = None
        self._watchers: Dict[str, Set[asyncio.Queue]] = {}

    async def initialize(self):
        await self.db.initialize()
        await self.db.create_tables()
        self._listener = await self.db.connect_listener()
        await self._listener.add_listener(self.channel, self._on_notify)
        logger.info("Listening for document changes", channel=self.channel)

    async def close(self):
        if self._listener is not None:
            await self._listener.remove_listener(self.channel, self._on_notify)
            await self._listener.close()
            self._listener = None
        close_watchers(self._watchers)
        await self.db.close()

    async def _begin(self) -> Transaction:
        conn_ctx = self.db.get_connection()
        conn = await conn_ctx.__aenter__()
        txn = conn.transaction()
        try:
            await txn.start()
        except BaseException:
            await conn_ctx.__aexit__(None, None, None)
            raise
        return PostgresTransaction(self, conn_ctx, conn, txn)

    async def _read(self, root: str) -> Any:
        async with self.db.get_connection() as conn:
            raw = await conn.fetchval(f"SELECT value FROM {self.table} WHERE path = $1", root)
        return _decode_value(raw)

    async def ping(self) -> bool:
        async with self.db.get_connection() as conn:
            await conn.execute("SELECT 1")
        return True

    def _on_notify(self, connection, pid, channel, payload):
        for queue in list(self._watchers.get(payload, ())):
            if queue.empty():
                queue.put_nowait(payload)

    async def watch(self, path: str) -> AsyncIterator[Any]:
        root, keys = split_path(path)
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._watchers.setdefault(root, set()).add(queue)
        logger.debug("Watcher attached", path=path)
        try:
            yield get_in(await self._read(root), keys)
            while True:
                if await queue.get() is STREAM_CLOSED:
                    return
                # Notifications only carry the path; always re-read the latest state
                yield get_in(await self._read(root), keys)
        finally:
            watchers = self._watchers.get(root)
            if watchers is not None:
                watchers.discard(queue)
                if not watchers:
                    del self._watchers[root]
            logger.debug("Watcher detached", path=path)
