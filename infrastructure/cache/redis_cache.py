import json
from datetime import datetime
from decimal import Decimal
from typing import Any

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.arbitrage import CacheError
from domain.models.market import Currency, FxRate, Quote
from infrastructure.cache.keys import CacheKey
from infrastructure.cache.rate_limited_cache import CacheEntry


def _encode_quote(quote: Quote) -> dict[str, str]:
    return {
        'exchange_name': quote.exchange_name,
        'price': str(quote.price),
        'currency': quote.currency.value,
        'observed_at': quote.observed_at.isoformat(),
    }


def _decode_quote(data: dict[str, str]) -> Quote:
    return Quote(
        exchange_name=data['exchange_name'],
        price=Decimal(data['price']),
        currency=Currency(data['currency']),
        observed_at=datetime.fromisoformat(data['observed_at']),
    )


def encode_value(value: Any) -> dict[str, Any]:
    if isinstance(value, FxRate):
        return {'type': 'fx_rate', 'rate': str(value.rate), 'observed_at': value.observed_at.isoformat()}
    if isinstance(value, list) and all(isinstance(item, Quote) for item in value):
        return {'type': 'quotes', 'items': [_encode_quote(q) for q in value]}
    raise CacheError(f'Unsupported cache value type: {type(value).__name__}')


def decode_value(data: dict[str, Any]) -> Any:
    kind = data.get('type')
    if kind == 'fx_rate':
        return FxRate(rate=Decimal(data['rate']), observed_at=datetime.fromisoformat(data['observed_at']))
    if kind == 'quotes':
        return [_decode_quote(item) for item in data['items']]
    raise CacheError(f'Unknown cached value type: {kind!r}')


class RedisCacheStore:
    """Redis-backed store for RateLimitedCache.

    Entries are kept for ``retention_seconds`` (much longer than the refresh
    TTL) so an expired value is still there to serve when upstream fails.
    """

    def __init__(self, redis_client: redis.Redis, retention_seconds: int = 86400, prefix: str = 'arbitrage'):
        self.redis = redis_client
        self.retention_seconds = retention_seconds
        self.prefix = prefix

    def _make_key(self, key: CacheKey) -> str:
        return f'{self.prefix}:cache:{key.value}'

    async def get(self, key: CacheKey) -> CacheEntry[Any] | None:
        try:
            data = await self.redis.get(self._make_key(key))
        except RedisError as e:
            raise CacheError(f'Redis get failed: {e}') from e

        if not data:
            return None

        try:
            payload = json.loads(data)
            return CacheEntry(value=decode_value(payload['value']), fetched_at=float(payload['fetched_at']))
        except (ValueError, KeyError, TypeError) as e:
            raise CacheError(f'Invalid json data for {key.value}: {e}') from e

    async def set(self, key: CacheKey, entry: CacheEntry[Any]) -> None:
        payload = {'value': encode_value(entry.value), 'fetched_at': entry.fetched_at}
        try:
            await self.redis.setex(self._make_key(key), self.retention_seconds, json.dumps(payload))
        except RedisError as e:
            raise CacheError(f'Redis set failed: {e}') from e
