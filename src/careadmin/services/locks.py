"""Per-key asyncio locks.

Serialises count-then-act sequences (suspension strikes, candidate review)
for the same record inside one process. Row locks taken in the database
cover the multi-process case.
"""
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLockRegistry:
    """Hands out one ``asyncio.Lock`` per key and forgets it once idle."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)


_registry: KeyedLockRegistry | None = None


def get_lock_registry() -> KeyedLockRegistry:
    """Return the process-level lock registry."""
    global _registry
    if _registry is None:
        _registry = KeyedLockRegistry()
    return _registry
