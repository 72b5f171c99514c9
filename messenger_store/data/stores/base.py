"""
Document store interface

Documents are JSON values addressed by slash separated paths. The first
segment names a top-level document (a user node, the directory, a
conversation log); the remaining segments walk into it, so
``alice-x-com/conversations`` is the ``conversations`` field of the
``alice-x-com`` document.
"""
import asyncio
import copy
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Set, Tuple

from messenger_store.utils.logger import get_logger

logger = get_logger(__name__)

# Queued to a watcher to end its stream
STREAM_CLOSED = object()


def close_watchers(watchers: Dict[str, Set[asyncio.Queue]]):
    """End every open watch stream and forget the watchers"""
    for queues in watchers.values():
        for queue in queues:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(STREAM_CLOSED)
    watchers.clear()


def split_path(path: str) -> Tuple[str, List[str]]:
    """Split a path into its top-level document name and the nested keys"""
    parts = [part for part in path.strip("/").split("/") if part]
    if not parts:
        raise ValueError("Document path cannot be empty")
    return parts[0], parts[1:]


def get_in(document: Any, keys: List[str]) -> Any:
    """Walk nested mappings, returning None where the path does not exist"""
    value = document
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def set_in(document: Any, keys: List[str], value: Any) -> Any:
    """Return ``document`` with ``value`` placed at ``keys``; None removes the key"""
    if not keys:
        return value

    root = document if isinstance(document, dict) else {}
    node = root
    for key in keys[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child

    if value is None:
        node.pop(keys[-1], None)
    else:
        node[keys[-1]] = value
    return root


class Transaction(ABC):
    """Unit of work over one or more documents; writes become visible together on commit"""

    def __init__(self):
        self._documents: Dict[str, Any] = {}
        self._loaded: Set[str] = set()
        self._dirty: Set[str] = set()

    @abstractmethod
    async def _load(self, root: str) -> Any:
        """Read a top-level document, claiming it for this transaction"""

    @abstractmethod
    async def _commit(self, changes: Dict[str, Optional[Any]]):
        """Persist changed top-level documents (None deletes)"""

    async def rollback(self):
        """Discard pending changes"""

    async def _document(self, root: str) -> Any:
        if root not in self._loaded:
            self._documents[root] = copy.deepcopy(await self._load(root))
            self._loaded.add(root)
        return self._documents[root]

    async def get(self, path: str) -> Any:
        root, keys = split_path(path)
        return copy.deepcopy(get_in(await self._document(root), keys))

    async def set(self, path: str, value: Any):
        root, keys = split_path(path)
        document = await self._document(root)
        self._documents[root] = set_in(document, keys, copy.deepcopy(value))
        self._dirty.add(root)

    async def delete(self, path: str):
        await self.set(path, None)

    async def commit(self):
        if not self._dirty:
            await self._commit({})
            return
        await self._commit({root: self._documents.get(root) for root in self._dirty})


class DocumentStore(ABC):
    """Realtime document database"""

    async def initialize(self):
        """Open connections"""

    async def close(self):
        """Release connections and detach watchers"""

    @abstractmethod
    async def _begin(self) -> Transaction:
        """Start a backend transaction"""

    @abstractmethod
    async def _read(self, root: str) -> Any:
        """Read a top-level document without claiming it"""

    @abstractmethod
    def watch(self, path: str) -> AsyncIterator[Any]:
        """Yield the value at ``path`` now and again after every change to its document"""

    @asynccontextmanager
    async def transaction(self):
        txn = await self._begin()
        try:
            yield txn
        except BaseException:
            await txn.rollback()
            raise
        await txn.commit()

    async def get(self, path: str) -> Any:
        root, keys = split_path(path)
        return copy.deepcopy(get_in(await self._read(root), keys))

    async def set(self, path: str, value: Any):
        async with self.transaction() as txn:
            await txn.set(path, value)

    async def ping(self) -> bool:
        """Cheap liveness probe"""
        await self._read("__ping__")
        return True
