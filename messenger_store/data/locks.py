"""
Per-key asyncio locks
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Dict


class KeyedLock:
    """Serializes coroutines that share a key; unrelated keys proceed concurrently"""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._waiters: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, *keys: str):
        # Fixed acquisition order so two holders of overlapping key sets cannot deadlock
        ordered = sorted(set(keys))
        acquired = []
        try:
            for key in ordered:
                lock = self._locks.setdefault(key, asyncio.Lock())
                self._waiters[key] = self._waiters.get(key, 0) + 1
                try:
                    await lock.acquire()
                except BaseException:
                    self._forget(key)
                    raise
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
                self._forget(key)

    def _forget(self, key: str):
        self._waiters[key] -= 1
        if not self._waiters[key]:
            del self._waiters[key]
            del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)
