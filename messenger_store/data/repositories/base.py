"""
Shared plumbing for store repositories: timeouts, retries, per-key serialization
"""
import asyncio
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

from messenger_store.configs.settings import settings
from messenger_store.data.locks import KeyedLock
from messenger_store.data.stores.base import DocumentStore, Transaction
from messenger_store.utils.exceptions import StoreTimeoutError, WriteConflictError
from messenger_store.utils.logger import get_logger
from messenger_store.utils.validators import validate_path_segment

logger = get_logger(__name__)

T = TypeVar("T")


class BaseRepository:
    """Repository over a document store"""
    
    def __init__(self, store: DocumentStore, timeout: Optional[float] = None,
                 max_retries: Optional[int] = None, locks: Optional[KeyedLock] = None):
        self.store = store
        self.timeout = settings.store_timeout if timeout is None else timeout
        self.max_retries = settings.store_max_retries if max_retries is None else max_retries
        self.locks = locks or KeyedLock()
    
    async def _with_timeout(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error("Store call timed out", operation=operation, timeout=self.timeout)
            raise StoreTimeoutError(operation, self.timeout) from e
    
    async def _read(self, operation: str, path: str) -> Any:
        return await self._with_timeout(operation, self.store.get(path))
    
    async def _transact(self, work: Callable[[Transaction], Awaitable[T]]) -> T:
        async with self.store.transaction() as txn:
            result = await work(txn)
        return result
    
    async def _run_transaction(self, operation: str, work: Callable[[Transaction], Awaitable[T]],
                               lock_keys: Iterable[str] = ()) -> T:
        """Run ``work`` in one transaction, retrying on write conflicts"""
        keys = tuple(lock_keys)
        # Lock keys are the document keys the unit writes under
        for key in keys:
            validate_path_segment(key)
        attempt = 0
        while True:
            attempt += 1
            try:
                async with self.locks.hold(*keys):
                    return await self._with_timeout(operation, self._transact(work))
            except WriteConflictError as e:
                if attempt > self.max_retries:
                    logger.error("Giving up after write conflicts", operation=operation, attempts=attempt)
                    raise
                logger.warning("Write conflict, retrying", operation=operation, attempt=attempt, error=e.message)
