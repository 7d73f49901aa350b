# nosec B101


import asyncio
import pytest
from unittest.mock import AsyncMock

from infrastructure.cache.keys import CacheKey
from infrastructure.cache.rate_limited_cache import CacheEntry, InMemoryCacheStore, RateLimitedCache
from domain.exceptions.arbitrage import CacheError, SourceUnavailable


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_fresh_entry_does_not_invoke_fetcher():
    clock = FakeClock()
    cache = RateLimitedCache(clock=clock)
    fetcher = AsyncMock(return_value='first')

    assert await cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, fetcher) == 'first'
    clock.now += 29
    assert await cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, fetcher) == 'first'

    fetcher.assert_awaited_once()


@pytest.mark.asyncio
async def test_expired_entry_is_refreshed():
    clock = FakeClock()
    cache = RateLimitedCache(clock=clock)
    fetcher = AsyncMock(side_effect=['first', 'second'])

    await cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, fetcher)
    clock.now += 30

    assert await cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, fetcher) == 'second'
    assert fetcher.await_count == 2


@pytest.mark.asyncio
async def test_failing_fetch_after_expiry_returns_stale_value():
    clock = FakeClock()
    cache = RateLimitedCache(clock=clock)

    await cache.get_or_fetch(CacheKey.LOCAL_PRICES, 30, AsyncMock(return_value=['stale']))
    clock.now += 3600

    failing = AsyncMock(side_effect=SourceUnavailable('VALR', 'down'))
    result = await cache.get_or_fetch(CacheKey.LOCAL_PRICES, 30, failing)

    assert result == ['stale']
    failing.assert_awaited_once()


@pytest.mark.asyncio
async def test_failed_refresh_does_not_reset_ttl():
    clock = FakeClock()
    cache = RateLimitedCache(clock=clock)
    await cache.get_or_fetch(CacheKey.LOCAL_PRICES, 30, AsyncMock(return_value='old'))
    clock.now += 60

    await cache.get_or_fetch(CacheKey.LOCAL_PRICES, 30, AsyncMock(side_effect=SourceUnavailable('VALR', 'down')))
    fetcher = AsyncMock(return_value='new')

    assert await cache.get_or_fetch(CacheKey.LOCAL_PRICES, 30, fetcher) == 'new'
    fetcher.assert_awaited_once()


@pytest.mark.asyncio
async def test_failing_fetch_without_entry_propagates():
    cache = RateLimitedCache()

    with pytest.raises(SourceUnavailable):
        await cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, AsyncMock(side_effect=SourceUnavailable('fx', 'down')))


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_fetch():
    cache = RateLimitedCache()
    release = asyncio.Event()
    calls = 0

    async def slow_fetch():
        nonlocal calls
        calls += 1
        await release.wait()
        return 'value'

    waiters = [asyncio.create_task(cache.get_or_fetch(CacheKey.INTERNATIONAL_PRICES, 30, slow_fetch)) for _ in range(5)]
    await asyncio.sleep(0)
    release.set()

    assert await asyncio.gather(*waiters) == ['value'] * 5
    assert calls == 1


@pytest.mark.asyncio
async def test_cancelled_caller_still_populates_cache():
    cache = RateLimitedCache()
    release = asyncio.Event()

    async def slow_fetch():
        await release.wait()
        return 'late value'

    caller = asyncio.create_task(cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, slow_fetch))
    await asyncio.sleep(0)
    caller.cancel()
    with pytest.raises(asyncio.CancelledError):
        await caller

    release.set()
    for _ in range(5):
        await asyncio.sleep(0)

    assert await cache.peek(CacheKey.EXCHANGE_RATE) == 'late value'


@pytest.mark.asyncio
async def test_store_read_error_is_treated_as_miss():
    store = AsyncMock()
    store.get.side_effect = CacheError('redis down')
    cache = RateLimitedCache(store=store)

    result = await cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, AsyncMock(return_value='live'))

    assert result == 'live'
    store.set.assert_awaited_once()


@pytest.mark.asyncio
async def test_store_write_error_still_returns_value():
    store = AsyncMock()
    store.get.return_value = None
    store.set.side_effect = CacheError('redis down')
    cache = RateLimitedCache(store=store)

    assert await cache.get_or_fetch(CacheKey.EXCHANGE_RATE, 30, AsyncMock(return_value='live')) == 'live'


@pytest.mark.asyncio
async def test_keys_are_independent():
    store = InMemoryCacheStore()
    await store.set(CacheKey.LOCAL_PRICES, CacheEntry(value='local', fetched_at=0))
    cache = RateLimitedCache(store=store, clock=FakeClock(10))

    assert await cache.peek(CacheKey.LOCAL_PRICES) == 'local'
    assert await cache.peek(CacheKey.INTERNATIONAL_PRICES) is None
