"""
In-process document store for development and tests
"""
import asyncio
import copy
from typing import Any, AsyncIterator, Dict, Optional, Set

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


class MemoryTransaction(Transaction):
    """Optimistic transaction: commit fails if a document it read was changed meanwhile"""

    def __init__(self, store: "MemoryDocumentStore"):
        super().__init__()
        self._store = store
        self._seen_versions: Dict[str, int] = {}

    async def _load(self, root: str) -> Any:
        self._seen_versions[root] = self._store._versions.get(root, 0)
        # Yield so concurrent units of work interleave like remote round-trips would
        await asyncio.sleep(0)
        return self._store._documents.get(root)

    async def _commit(self, changes: Dict[str, Optional[Any]]):
        async with self._store._commit_lock:
            for root, version in self._seen_versions.items():
                if self._store._versions.get(root, 0) != version:
                    raise WriteConflictError(f"Document {root} changed during transaction")
            for root, value in changes.items():
                self._store._apply(root, value)


class MemoryDocumentStore(DocumentStore):
    """Documents held in a dict, watchers fed through single-slot queues"""

    def __init__(self):
        self._documents: Dict[str, Any] = {}
        self._versions: Dict[str, int] = {}
        self._commit_lock = asyncio.Lock()
        self._watchers: Dict[str, Set[asyncio.Queue]] = {}

    async def _begin(self) -> Transaction:
        return MemoryTransaction(self)

    async def _read(self, root: str) -> Any:
        return self._documents.get(root)

    def _apply(self, root: str, value: Any):
        if value is None:
            self._documents.pop(root, None)
        else:
            self._documents[root] = copy.deepcopy(value)
        self._versions[root] = self._versions.get(root, 0) + 1
        logger.debug("Document written", path=root, version=self._versions[root])
        self._notify(root)

    def _notify(self, root: str):
        snapshot = self._documents.get(root)
        for queue in list(self._watchers.get(root, ())):
            # Latest state wins: replace any snapshot the watcher has not consumed
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(copy.deepcopy(snapshot))

    async def watch(self, path: str) -> AsyncIterator[Any]:
        root, keys = split_path(path)
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._watchers.setdefault(root, set()).add(queue)
        logger.debug("Watcher attached", path=path)
        try:
            yield copy.deepcopy(get_in(self._documents.get(root), keys))
            while True:
                document = await queue.get()
                if document is STREAM_CLOSED:
                    return
                yield get_in(document, keys)
        finally:
            watchers = self._watchers.get(root)
            if watchers is not None:
                watchers.discard(queue)
                if not watchers:
                    del self._watchers[root]
            logger.debug("Watcher detached", path=path)

    def watcher_count(self, path: str) -> int:
        root, _ = split_path(path)
        return len(self._watchers.get(root, ()))

    async def close(self):
        close_watchers(self._watchers)
