import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from domain.exceptions.arbitrage import CacheError
from infrastructure.cache.keys import CacheKey

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    fetched_at: float  # epoch seconds of the last successful fetch


class CacheStore(Protocol):
    async def get(self, key: CacheKey) -> CacheEntry[Any] | None:
        ...

    async def set(self, key: CacheKey, entry: CacheEntry[Any]) -> None:
        ...


class InMemoryCacheStore:
    def __init__(self):
        self._entries: dict[CacheKey, CacheEntry[Any]] = {}

    async def get(self, key: CacheKey) -> CacheEntry[Any] | None:
        return self._entries.get(key)

    async def set(self, key: CacheKey, entry: CacheEntry[Any]) -> None:
        self._entries[key] = entry


def _consume_exception(task: asyncio.Task) -> None:
    if not task.cancelled():
        task.exception()


class RateLimitedCache:
    """Time-boxed memoisation with stale-on-error fallback.

    A fresh entry (younger than ``ttl``) is served without calling the
    fetcher. Otherwise the fetcher runs; if it fails and any previous entry
    exists, that stale entry is served instead. Only a failure with nothing
    cached propagates.

    Refreshes for one key are serialised, and a refresh keeps running if the
    caller that started it is cancelled so its result still lands in the
    store for the next read.
    """

    def __init__(self, store: CacheStore | None = None, clock: Callable[[], float] = time.time):
        self.store = store or InMemoryCacheStore()
        self._clock = clock
        self._locks: dict[CacheKey, asyncio.Lock] = {}
        self._in_flight: dict[CacheKey, asyncio.Task] = {}

    async def get_or_fetch(self, key: CacheKey, ttl: float, fetcher: Callable[[], Awaitable[T]]) -> T:
        entry = await self._read(key)
        if entry is not None and self._is_fresh(entry, ttl):
            return entry.value

        async with self._lock_for(key):
            # Another caller may have refreshed while we waited for the lock
            entry = await self._read(key)
            if entry is not None and self._is_fresh(entry, ttl):
                return entry.value

            refresh = self._in_flight.get(key)
            if refresh is None or refresh.done():
                refresh = asyncio.ensure_future(self._refresh(key, fetcher))
                refresh.add_done_callback(_consume_exception)
                self._in_flight[key] = refresh

            try:
                return await asyncio.shield(refresh)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if entry is None:
                    raise
                age = self._clock() - entry.fetched_at
                logger.warning(
                    f'Using expired cache for {key.value} ({age:.0f}s old) due to fetch error: {e}',
                    extra={'cache_key': key.value},
                )
                return entry.value

    async def peek(self, key: CacheKey) -> Any | None:
        """Return whatever is cached for ``key`` regardless of age."""
        entry = await self._read(key)
        return entry.value if entry is not None else None

    async def _refresh(self, key: CacheKey, fetcher: Callable[[], Awaitable[T]]) -> T:
        value = await fetcher()
        await self._write(key, CacheEntry(value=value, fetched_at=self._clock()))
        return value

    def _is_fresh(self, entry: CacheEntry[Any], ttl: float) -> bool:
        return (self._clock() - entry.fetched_at) < ttl

    def _lock_for(self, key: CacheKey) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def _read(self, key: CacheKey) -> CacheEntry[Any] | None:
        try:
            return await self.store.get(key)
        except CacheError as e:
            logger.error(f'Cache read failed for {key.value}, treating as miss: {e}')
            return None

    async def _write(self, key: CacheKey, entry: CacheEntry[Any]) -> None:
        try:
            await self.store.set(key, entry)
        except CacheError as e:
            logger.error(f'Cache write failed for {key.value}: {e}')
