"""Concurrency locks for inmate operations."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable
from weakref import WeakValueDictionary


_LOCKS: WeakValueDictionary[Hashable, asyncio.Lock] = WeakValueDictionary()


@asynccontextmanager
async def keyed_lock(*key: Hashable) -> AsyncIterator[None]:
    """Async context manager serializing work that shares a key."""

    lock = _LOCKS.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _LOCKS[key] = lock
    await lock.acquire()
    try:
        yield
    finally:
        lock.release()


def registration_lock():
    """Lock guarding inmate identifier allocation."""
    return keyed_lock("inmate-registration")


def inmate_lock(inmate_id: int):
    """Lock guarding state changes of a single inmate."""
    return keyed_lock("inmate", inmate_id)
